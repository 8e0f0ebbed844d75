"""
Module export dispatcher.

Maps activity type names to renderer classes. The registry is fixed when
it is built; lookups are case-insensitive and an unknown type raises
UnsupportedModuleError, which callers catch to skip the activity.
"""

import logging
from types import MappingProxyType
from typing import FrozenSet, Mapping, Type

from .errors import UnsupportedModuleError
from .renderers import (
    GlossaryRenderer,
    ModuleRenderer,
    PageRenderer,
    SimpleQuizRenderer,
    SlideshowRenderer,
)

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """
    Immutable registry of renderers by activity type.

    Usage:
        registry = default_registry()
        if registry.is_supported(cm.modname):
            record = provider.get_activity(cm.modname, cm.instance)
            html = registry.resolve(cm.modname).render_record(record, cm, formatter)
    """

    def __init__(self, renderers: Mapping[str, Type[ModuleRenderer]]):
        table = {}
        for type_name, renderer_class in renderers.items():
            key = type_name.strip().lower()
            if key in table:
                raise ValueError(f"Module type registered twice: {type_name}")
            table[key] = renderer_class
        self._renderers = MappingProxyType(table)
        self._supported = frozenset(table)

    def resolve(self, type_name: str) -> ModuleRenderer:
        """
        Get the renderer for an activity type.

        Raises:
            UnsupportedModuleError: the type is not registered
        """
        renderer_class = self._renderers.get((type_name or '').strip().lower())
        if renderer_class is None:
            raise UnsupportedModuleError(type_name)
        return renderer_class()

    def is_supported(self, type_name: str) -> bool:
        return (type_name or '').strip().lower() in self._supported

    def supported_types(self) -> FrozenSet[str]:
        return self._supported

    def __contains__(self, type_name) -> bool:
        return isinstance(type_name, str) and self.is_supported(type_name)

    def __len__(self) -> int:
        return len(self._supported)


DEFAULT_RENDERERS = MappingProxyType({
    'page': PageRenderer,
    'glossary': GlossaryRenderer,
    'slideshow': SlideshowRenderer,
    'simplequiz': SimpleQuizRenderer,
})


def default_registry() -> ModuleRegistry:
    """Registry with every renderer shipped in this package."""
    return ModuleRegistry(DEFAULT_RENDERERS)

"""
Emoji image lookup.

Maps an emoji asset key (see symbols.emoji_key) to something an <img>
tag can point at, or None when no image exists for it.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class AssetLocator(ABC):
    """Answers whether an emoji image exists and where to find it."""

    @abstractmethod
    def locate(self, key: str) -> Optional[str]:
        """Return a servable reference for the asset key, or None."""


class NullAssetLocator(AssetLocator):
    """Knows no assets; every emoji is dropped."""

    def locate(self, key: str) -> Optional[str]:
        return None


class DirectoryAssetLocator(AssetLocator):
    """
    Look up emoji images in a directory of ``emoji_u<key>.svg`` files.

    Usage:
        locator = DirectoryAssetLocator('pix/emoji', url_prefix='https://lms/pix/emoji/')
        locator.locate('1f600')  # 'https://lms/pix/emoji/emoji_u1f600.svg'
    """

    def __init__(self, directory, url_prefix: Optional[str] = None, suffix: str = '.svg'):
        """
        Args:
            directory: Directory holding the image files
            url_prefix: Prepended to the file name; the file URI is used when None
            suffix: Image file extension
        """
        self.directory = Path(directory)
        self.url_prefix = url_prefix
        self.suffix = suffix
        if not self.directory.is_dir():
            logger.warning(f"Emoji directory not found: {self.directory}")

    def locate(self, key: str) -> Optional[str]:
        filename = f'emoji_u{key}{self.suffix}'
        path = self.directory / filename
        if not path.is_file():
            return None
        if self.url_prefix is None:
            return path.resolve().as_uri()
        return f'{self.url_prefix}{filename}'

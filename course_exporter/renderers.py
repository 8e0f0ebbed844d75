"""
Module renderers.

One renderer per activity type. The exporter fetches the activity record
from the provider and the renderer turns it into an HTML fragment.
Titles and intros are written by the exporter, and emoji, math, units
and scripts are handled afterwards by the fragment pipeline.
"""

import html
import json
import logging
import string
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .errors import RenderError
from .formatting import RichTextFormatter, TextFormat
from .models import CourseModule

logger = logging.getLogger(__name__)


class ModuleRenderer(ABC):
    """Renders one activity type; instances hold no state."""

    modname = ''

    @abstractmethod
    def render_record(
        self,
        record: Dict[str, Any],
        module: CourseModule,
        formatter: RichTextFormatter,
    ) -> str:
        """
        Render an activity body from its fetched record.

        Raises:
            RenderError: the record lacks data this type needs
        """

    def _require(self, record: Dict[str, Any], field: str, module: CourseModule):
        if not isinstance(record, dict):
            raise RenderError(f"{self.modname} {module.instance} (cm {module.id}) is not a record")
        if record.get(field) is None:
            raise RenderError(
                f"{self.modname} {module.instance} (cm {module.id}) has no '{field}'"
            )
        return record[field]

    def _require_items(
        self, record: Dict[str, Any], field: str, module: CourseModule
    ) -> List[Dict[str, Any]]:
        items = self._require(record, field, module)
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise RenderError(
                f"{self.modname} {module.instance} (cm {module.id}): "
                f"'{field}' must be a list of records"
            )
        return items


class PageRenderer(ModuleRenderer):
    """Single page of rich text."""

    modname = 'page'

    def render_record(self, record, module, formatter):
        content = self._require(record, 'content', module)
        return formatter.format_text(
            content, record.get('contentformat', TextFormat.HTML), context=module
        )


class GlossaryRenderer(ModuleRenderer):
    """Glossary entries, alphabetical by concept."""

    modname = 'glossary'

    def render_record(self, record, module, formatter):
        entries = self._require_items(record, 'entries', module)
        parts = ['<div>']
        for entry in sorted(entries, key=lambda e: str(e.get('concept', '')).casefold()):
            concept = html.escape(str(entry.get('concept', '')))
            definition = formatter.format_text(
                entry.get('definition', ''),
                entry.get('definitionformat', TextFormat.HTML),
                context=module,
            )
            parts.append(f'<h3>{concept}</h3>')
            parts.append(f'<span>{definition}</span>')
        parts.append('</div>')
        return ''.join(parts)


class SlideshowRenderer(ModuleRenderer):
    """Slides in sort order, one block each."""

    modname = 'slideshow'

    def render_record(self, record, module, formatter):
        slides = self._require_items(record, 'slides', module)
        parts = ['<div class="slideshow"><div class="slides">']
        for slide in sorted(slides, key=lambda s: s.get('sortorder', 0)):
            name = html.escape(str(slide.get('name', '')))
            content = formatter.format_text(
                slide.get('content', ''),
                slide.get('contentformat', TextFormat.HTML),
                context=module,
            )
            parts.append(f'<div class="slide"><h3>{name}</h3><div>{content}</div></div>')
        parts.append('</div></div>')
        return ''.join(parts)


class SimpleQuizRenderer(ModuleRenderer):
    """Quiz questions with lettered answer options, without the answers marked."""

    modname = 'simplequiz'

    def render_record(self, record, module, formatter):
        questions = self._load_questions(self._require(record, 'questions', module), module)

        parts = ['<div style="font-family: Arial, sans-serif; margin: 20px;">']
        for number, question in enumerate(questions, start=1):
            text = html.escape(str(self._text_of(question)))
            parts.append('<div style="margin-bottom: 20px;">')
            parts.append(f'<p><strong>Question {number}:</strong> {text}</p>')

            answers = question.get('answers') if isinstance(question, dict) else None
            if answers and isinstance(answers, list):
                parts.append('<ul style="list-style-type: none; padding-left: 0;">')
                for index, answer in enumerate(answers):
                    label = option_label(index)
                    parts.append(
                        f'<li><strong>{label}.</strong> {html.escape(str(self._text_of(answer)))}</li>'
                    )
                parts.append('</ul>')
            else:
                parts.append('<p><em>No options available.</em></p>')
            parts.append('</div>')
        parts.append('</div>')
        return ''.join(parts)

    def _load_questions(self, raw, module: CourseModule) -> List[Any]:
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise RenderError(
                    f"Invalid questions format in simplequiz {module.instance}: {e}"
                ) from e
        if not isinstance(raw, list):
            raise RenderError(f"Invalid questions format in simplequiz {module.instance}")
        return raw

    @staticmethod
    def _text_of(item) -> str:
        if isinstance(item, dict):
            return item.get('text', '')
        return item


def option_label(index: int) -> str:
    """Letter label for an answer option: A..Z, then AA, AB, ..."""
    letters = string.ascii_uppercase
    label = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        label = letters[remainder] + label
    return label

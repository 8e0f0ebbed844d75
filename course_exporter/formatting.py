"""
Rich-text formatting.

Stored course text comes with a format code. The formatter turns it into
HTML that is safe to embed; the export pipeline only post-processes that
HTML and never escapes it again.
"""

import html
import logging
import re
from abc import ABC, abstractmethod
from enum import IntEnum

import markdown

logger = logging.getLogger(__name__)


class TextFormat(IntEnum):
    """Format codes used by the platform for stored text."""
    MOODLE = 0     # Auto-format: plain text with paragraph breaks
    HTML = 1
    PLAIN = 2
    MARKDOWN = 4


class RichTextFormatter(ABC):
    """Turns stored text plus a format code into embeddable HTML."""

    @abstractmethod
    def format_text(self, text: str, text_format=TextFormat.HTML, context=None) -> str:
        """
        Args:
            text: Stored content
            text_format: TextFormat code (int accepted)
            context: Opaque handle for formatters that need one

        Returns:
            HTML fragment
        """


class DefaultFormatter(RichTextFormatter):
    """
    Formatter used when no platform formatter is plugged in.

    HTML is passed through untouched, plain text is escaped, markdown is
    rendered with the markdown package.
    """

    PARAGRAPH_BREAK = re.compile(r'\n\s*\n')

    def __init__(self, markdown_extensions=None):
        self.markdown_extensions = list(markdown_extensions or ['extra', 'sane_lists'])

    def format_text(self, text: str, text_format=TextFormat.HTML, context=None) -> str:
        if not text:
            return ''
        try:
            text_format = TextFormat(int(text_format))
        except (TypeError, ValueError):
            logger.warning(f"Unknown text format {text_format!r}, treating as HTML")
            text_format = TextFormat.HTML

        if text_format == TextFormat.PLAIN:
            return self._plain_to_html(text)
        if text_format == TextFormat.MARKDOWN:
            return markdown.markdown(text, extensions=self.markdown_extensions)
        if text_format == TextFormat.MOODLE:
            paragraphs = [p for p in self.PARAGRAPH_BREAK.split(text.strip()) if p.strip()]
            return ''.join(f'<p>{self._plain_to_html(p)}</p>' for p in paragraphs)
        return text

    @staticmethod
    def _plain_to_html(text: str) -> str:
        return html.escape(text).replace('\r\n', '\n').replace('\n', '<br />')

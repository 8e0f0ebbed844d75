"""
Layout sinks.

The exporter produces HTML fragments and structural commands (new page,
heading, bookmark); a sink turns them into a document. HtmlDocumentSink
assembles a standalone HTML file. PyMuPDFSink lays the same document out
as PDF pages with PyMuPDF's Story API and turns bookmarks into the PDF
outline.
"""

import html
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import PdfGenerationError

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

DOCUMENT_CSS = '''
body { font-family: sans-serif; font-size: 12pt; line-height: 1.4; }
.page-break { page-break-before: always; }
.cover { text-align: center; }
.cover h1 { margin-top: 60pt; }
.cover hr { border: 0; border-top: 1px solid rgb(87, 87, 87); }
img { vertical-align: middle; }
.outline { font-size: 10pt; }
'''


class LayoutSink(ABC):
    """Receives document content in reading order."""

    @abstractmethod
    def set_metadata(self, **metadata: str) -> None:
        """Document properties (title, author, subject, keywords)."""

    @abstractmethod
    def add_page(self) -> None:
        """Start a new page."""

    @abstractmethod
    def write_heading(self, text: str, level: int, color: Optional[Color] = None) -> None:
        """Write a plain-text heading (escaped by the sink)."""

    @abstractmethod
    def bookmark(self, title: str, level: int) -> None:
        """Add an outline entry pointing at the current position."""

    @abstractmethod
    def write_html(self, fragment: str) -> None:
        """Write an already normalized HTML fragment."""

    @abstractmethod
    def save(self, path) -> str:
        """
        Write the document.

        Raises:
            PdfGenerationError: the document could not be produced
        """


class HtmlDocumentSink(LayoutSink):
    """Collects content into one HTML document."""

    def __init__(self, css: str = DOCUMENT_CSS, include_outline: bool = True):
        self.css = css
        self.include_outline = include_outline
        self.metadata: Dict[str, str] = {}
        self.outline: List[Tuple[int, str, str]] = []   # (level, title, anchor)
        self._pages: List[List[str]] = []
        self._last_anchor: Optional[str] = None
        self._anchor_count = 0

    @property
    def pages(self) -> int:
        return len(self._pages)

    def set_metadata(self, **metadata: str) -> None:
        self.metadata.update({k: v for k, v in metadata.items() if v is not None})

    def add_page(self) -> None:
        self._pages.append([])
        self._last_anchor = None

    def write_heading(self, text: str, level: int, color: Optional[Color] = None) -> None:
        level = min(max(level, 1), 6)
        anchor = self._new_anchor()
        style = f' style="color: rgb({color[0]}, {color[1]}, {color[2]});"' if color else ''
        self._append(f'<h{level} id="{anchor}"{style}>{html.escape(text)}</h{level}>')
        self._last_anchor = anchor

    def bookmark(self, title: str, level: int) -> None:
        anchor = self._last_anchor
        if anchor is None:
            anchor = self._new_anchor()
            self._append(f'<div id="{anchor}"></div>')
        self.outline.append((level, title, anchor))

    def write_html(self, fragment: str) -> None:
        self._append(fragment)
        self._last_anchor = None

    def page_bodies(self) -> List[List[str]]:
        """Body fragments grouped by page, in order."""
        return [list(body) for body in self._pages]

    def render_document(self, include_outline: Optional[bool] = None) -> str:
        if include_outline is None:
            include_outline = self.include_outline
        body = []
        if include_outline and self.outline:
            body.append(self._render_outline())
        for number, fragments in enumerate(self._pages):
            if number:
                body.append('<div class="page-break"></div>')
            body.extend(fragments)
        return self._wrap(body)

    def save(self, path) -> str:
        path = Path(path)
        try:
            path.write_text(self.render_document(), encoding='utf-8')
        except OSError as e:
            raise PdfGenerationError(f"Failed to write {path}: {e}") from e
        logger.info(f"Wrote HTML document: {path}")
        return str(path)

    def _append(self, fragment: str) -> None:
        if not self._pages:
            self._pages.append([])
        self._pages[-1].append(fragment)

    def _wrap(self, body: List[str], with_style: bool = True) -> str:
        title = html.escape(self.metadata.get('title', ''))
        style = f'<style>{self.css}</style>' if with_style else ''
        parts = [
            '<!DOCTYPE html>',
            '<html>',
            f'<head><meta charset="utf-8"><title>{title}</title>{style}</head>',
            '<body>',
        ]
        parts.extend(body)
        parts.append('</body></html>')
        return '\n'.join(parts)

    def _new_anchor(self) -> str:
        self._anchor_count += 1
        return f'bm-{self._anchor_count}'

    def _render_outline(self) -> str:
        items = ''.join(
            f'<li style="margin-left: {level * 12}pt;"><a href="#{anchor}">{html.escape(title)}</a></li>'
            for level, title, anchor in self.outline
        )
        return f'<nav class="outline" aria-label="Outline"><ul>{items}</ul></nav>'


class PyMuPDFSink(HtmlDocumentSink):
    """
    Paginates the assembled document into a PDF with PyMuPDF.

    Relative image sources (emoji assets) are resolved against
    ``archive_dir``.
    """

    def __init__(
        self,
        css: str = DOCUMENT_CSS,
        paper: str = 'a4',
        margin: float = 56.7,   # 20 mm
        archive_dir=None,
    ):
        super().__init__(css=css, include_outline=False)
        self.paper = paper
        self.margin = margin
        self.archive_dir = archive_dir

    def save(self, path) -> str:
        path = Path(path)
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise PdfGenerationError("PyMuPDF is not installed, cannot write PDF") from e

        try:
            data, positions = self._layout(fitz)
            doc = fitz.open(stream=data, filetype='pdf')
            try:
                doc.set_metadata({
                    'title': self.metadata.get('title', ''),
                    'author': self.metadata.get('author', ''),
                    'subject': self.metadata.get('subject', ''),
                    'keywords': self.metadata.get('keywords', ''),
                    'creator': 'course-exporter',
                })
                toc = self._build_toc(positions)
                if toc:
                    doc.set_toc(toc)
                doc.save(str(path))
            finally:
                doc.close()
        except Exception as e:
            raise PdfGenerationError(f"Failed to generate PDF: {e}") from e

        logger.info(f"Wrote PDF: {path}")
        return str(path)

    def _layout(self, fitz):
        archive = fitz.Archive(str(self.archive_dir)) if self.archive_dir else None
        buffer = io.BytesIO()
        writer = fitz.DocumentWriter(buffer)
        mediabox = fitz.paper_rect(self.paper)
        where = mediabox + (self.margin, self.margin, -self.margin, -self.margin)

        positions = []

        def collect(position):
            positions.append(position)

        # One story per add_page() call, so every page group starts a new sheet
        page_number = 0
        for body in self.page_bodies() or [[]]:
            story = fitz.Story(
                html=self._wrap(body, with_style=False),
                user_css=self.css,
                archive=archive,
            )
            more = 1
            while more:
                page_number += 1
                device = writer.begin_page(mediabox)
                more, _ = story.place(where)
                story.element_positions(collect, {'page': page_number})
                story.draw(device)
                writer.end_page()
        writer.close()
        return buffer.getvalue(), positions

    def _build_toc(self, positions) -> List[list]:
        pages = {}
        for position in positions:
            anchor = getattr(position, 'id', '')
            if anchor and anchor not in pages:
                pages[anchor] = position.page
        toc = []
        for level, title, anchor in self.outline:
            if anchor in pages:
                toc.append([level + 1, title, pages[anchor]])
        return toc

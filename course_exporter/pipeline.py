"""
Fragment pipeline: sanitize, rewrite symbols in text, normalize units.

Each call works on its own parse tree; the rewriter and sanitizer only
hold read-only tables, so one pipeline serves a whole export run.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .rewriter import ContentRewriter
from .sanitizer import DocumentSanitizer

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Configuration options for fragment post-processing."""
    root_font_size: float = 15   # px per rem
    base_font_size: float = 15   # px per em at the start of an attribute
    normalize_units: bool = True


class FragmentPipeline:
    """
    Turns a rendered activity fragment into print-ready HTML.

    Usage:
        pipeline = FragmentPipeline(ContentRewriter(locator), DocumentSanitizer())
        html = pipeline.process(raw_html)
    """

    def __init__(
        self,
        rewriter: Optional[ContentRewriter] = None,
        sanitizer: Optional[DocumentSanitizer] = None,
        options: Optional[PipelineOptions] = None,
    ):
        self.rewriter = rewriter or ContentRewriter()
        self.sanitizer = sanitizer or DocumentSanitizer()
        self.options = options or PipelineOptions()

    def process(self, fragment: str) -> str:
        """
        Args:
            fragment: HTML produced by a renderer or the formatter

        Returns:
            Normalized fragment wrapped in a <div>
        """
        return self.sanitizer.clean(fragment or '', transform=self._transform)

    def _transform(self, soup) -> None:
        substituted = self.rewriter.substitute_in_tree(soup)
        if substituted:
            logger.debug(f"Substituted symbols in {substituted} text nodes")
        if self.options.normalize_units:
            self._normalize_units(soup)

    def _normalize_units(self, soup) -> None:
        rewritten = self.rewriter.normalize_units(
            soup, self.options.root_font_size, self.options.base_font_size
        )
        if rewritten:
            logger.debug(f"Converted relative units in {rewritten} attributes")

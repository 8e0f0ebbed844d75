"""
Document Sanitizer

Parses an HTML fragment, removes the inert <script> nodes left behind by
client-side math rendering and serializes the result for print.
"""

import logging
from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Script types emitted by the TeX filter for MathJax; meaningless in a static PDF.
INERT_SCRIPT_TYPES = frozenset({
    'math/tex',
    'math/tex; mode=display',
})


class DocumentSanitizer:
    """
    Strip inert script nodes from HTML fragments.

    Usage:
        sanitizer = DocumentSanitizer()
        clean_html = sanitizer.clean('<p>x <script type="math/tex">x^2</script></p>')
    """

    def __init__(self, inert_script_types: Iterable[str] = INERT_SCRIPT_TYPES):
        self.inert_script_types = frozenset(t.strip().lower() for t in inert_script_types)

    def parse(self, fragment: str) -> BeautifulSoup:
        """Parse a fragment; html.parser repairs malformed markup silently."""
        return BeautifulSoup(fragment or '', 'html.parser')

    def is_inert(self, script) -> bool:
        script_type = script.get('type')
        if not isinstance(script_type, str):
            return False
        return script_type.strip().lower() in self.inert_script_types

    def strip_inert_scripts(self, soup: BeautifulSoup) -> int:
        """
        Remove inert script nodes.

        Returns:
            Number of nodes removed
        """
        # find_all returns a list, so removing nodes does not disturb the walk
        inert = [script for script in soup.find_all('script') if self.is_inert(script)]
        for script in inert:
            script.decompose()
        return len(inert)

    def serialize(self, soup: BeautifulSoup) -> str:
        """HTML of the tree wrapped in a <div>."""
        return f'<div>{soup}</div>'

    def clean(
        self,
        fragment: str,
        transform: Optional[Callable[[BeautifulSoup], object]] = None,
    ) -> str:
        """
        Parse, strip inert scripts, optionally transform, serialize.

        Args:
            fragment: HTML fragment, possibly malformed
            transform: Called with the parsed tree after stripping

        Returns:
            Cleaned fragment wrapped in a <div>
        """
        soup = self.parse(fragment)
        removed = self.strip_inert_scripts(soup)
        if removed:
            logger.debug(f"Removed {removed} inert script nodes")
        if transform is not None:
            transform(soup)
        return self.serialize(soup)

"""
Content Rewriter

Prepares user-authored HTML for a print layout engine that cannot draw
color emoji, Unicode math or relative CSS lengths:

- Emoji clusters in element text become <img> tags pointing at SVG assets
- Math characters become inline TeX, e.g. α -> \\( \\alpha \\)
- rem/em lengths in style, width and height attributes become px

None of these steps raise on odd input; at worst content is left as is.
"""

import html
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from .assets import AssetLocator, NullAssetLocator
from .symbols import EMOJI_SEQUENCES, MATH_MACROS, emoji_key, order_longest_first

logger = logging.getLogger(__name__)


@dataclass
class RewriteOptions:
    """Configuration options for symbol substitution and unit normalization."""
    replace_emoji: bool = True
    replace_math: bool = True
    emoji_size: str = '1.35em'
    # Ideographic space, put in front of an emoji that had no space before it
    emoji_filler: str = '&#12288;'
    # Per attribute value; None for no limit
    max_unit_tokens: Optional[int] = 1000


class ContentRewriter:
    """
    Symbol substitution and CSS unit normalization.

    Usage:
        rewriter = ContentRewriter(DirectoryAssetLocator('pix/emoji'))
        rewriter.substitute_in_tree(soup)
        rewriter.normalize_units(soup, root_size=15, font_size=15)
    """

    UNIT_ATTRIBUTES = ('style', 'height', 'width')
    RAW_TEXT_TAGS = frozenset({'script', 'style'})

    REM_PATTERN = re.compile(r'(\d*\.?\d+)rem')
    EM_PATTERN = re.compile(r'(\d*\.?\d+)em')

    def __init__(
        self,
        asset_locator: Optional[AssetLocator] = None,
        options: Optional[RewriteOptions] = None,
        emoji_sequences: Iterable[str] = EMOJI_SEQUENCES,
        math_macros: Mapping[str, str] = MATH_MACROS,
    ):
        """
        Args:
            asset_locator: Emoji image lookup (no images when None)
            options: Rewrite configuration
            emoji_sequences: Emoji clusters to substitute
            math_macros: Character to TeX macro table
        """
        self.asset_locator = asset_locator or NullAssetLocator()
        self.options = options or RewriteOptions()
        self.emoji_sequences = order_longest_first(emoji_sequences)
        self._math_translation = str.maketrans({
            char: f'\\( {macro} \\)' for char, macro in math_macros.items()
        })

    # =========================================================================
    # Symbol substitution
    # =========================================================================

    def substitute_symbols(self, content: str) -> str:
        """Apply emoji and math substitution as configured."""
        if not content:
            return content or ''
        if self.options.replace_emoji:
            content = self.replace_emoji_with_images(content)
        if self.options.replace_math:
            content = self.replace_math_characters(content)
        return content

    def substitute_in_tree(self, soup: Tag) -> int:
        """
        Apply symbol substitution to a parsed tree.

        Emoji become <img> markup, so they are only replaced in element
        text. Attribute values, comments and script or style content keep
        their emoji and get the math step alone, whose output is plain text.

        Args:
            soup: Tag or BeautifulSoup document

        Returns:
            Number of text nodes and attribute values rewritten
        """
        rewritten = 0
        for node in soup.find_all(string=True):
            if node.isascii():
                continue
            if type(node) is NavigableString and node.parent.name not in self.RAW_TEXT_TAGS:
                escaped = html.escape(str(node), quote=False)
                new_html = self.substitute_symbols(escaped)
                if new_html == escaped:
                    continue
                node.replace_with(*list(BeautifulSoup(new_html, 'html.parser').contents))
            else:
                new_text = self._replace_math_only(str(node))
                if new_text == node:
                    continue
                node.replace_with(type(node)(new_text))
            rewritten += 1

        for tag in [soup, *soup.find_all(True)]:
            for name, value in list(tag.attrs.items()):
                if isinstance(value, list):
                    new_value = [self._replace_math_only(item) for item in value]
                else:
                    new_value = self._replace_math_only(value)
                if new_value != value:
                    tag[name] = new_value
                    rewritten += 1
        return rewritten

    def _replace_math_only(self, text: str) -> str:
        if not self.options.replace_math:
            return text
        return self.replace_math_characters(text)

    def replace_emoji_with_images(self, content: str) -> str:
        """
        Replace every known emoji cluster with an image tag.

        Longer clusters are replaced first so that a sequence such as
        person + skin tone + ZWJ + object is consumed whole and never
        split by one of its prefixes. An emoji preceded by a space keeps
        that space; any other occurrence gets the filler character in
        front, so wrapping stays the same either way. Emoji without an
        image are dropped.

        Args:
            content: HTML fragment

        Returns:
            HTML fragment with emoji replaced
        """
        replaced = 0
        filler = self.options.emoji_filler
        for cluster in self.emoji_sequences:
            if cluster not in content:
                continue
            replaced += content.count(cluster)
            image = self._emoji_image(cluster)
            content = content.replace(' ' + cluster, ' ' + image)
            content = content.replace(cluster, filler + image)

        if replaced:
            logger.debug(f"Replaced {replaced} emoji")
        return content

    def _emoji_image(self, cluster: str) -> str:
        """Image tag for an emoji cluster, or '' when no asset exists."""
        key = emoji_key(cluster)
        src = self.asset_locator.locate(key)
        if src is None:
            logger.debug(f"No image for emoji {key}, dropping it")
            return ''
        size = self.options.emoji_size
        return f'<img src="{html.escape(src)}" alt="" width="{size}" height="{size}">'

    def replace_math_characters(self, content: str) -> str:
        """
        Replace math characters with inline TeX.

        Done in one pass over the input text, so replacement output is
        never scanned again.
        """
        return content.translate(self._math_translation)

    # =========================================================================
    # CSS units
    # =========================================================================

    def normalize_units(self, node: Tag, root_size, font_size) -> int:
        """
        Convert rem/em lengths to px on a node and all of its descendants.

        Args:
            node: Tag or BeautifulSoup document
            root_size: Pixel size of 1rem
            font_size: Pixel size of 1em at the start of each attribute value

        Returns:
            Number of attributes rewritten
        """
        rewritten = 0
        for tag in [node, *node.find_all(True)]:
            for attribute in self.UNIT_ATTRIBUTES:
                value = tag.get(attribute)
                if not isinstance(value, str):
                    continue
                new_value = self.convert_relative_units(value, root_size, font_size)
                if new_value != value:
                    tag[attribute] = new_value
                    rewritten += 1
        return rewritten

    def convert_relative_units(self, value: str, root_size, font_size) -> str:
        """
        Convert the rem/em lengths of one attribute value to px.

        rem tokens scale the root size. em tokens scale a running font
        size that starts at font_size and becomes the result of each em
        token, left to right. Results are truncated to whole pixels.

        Example:
            >>> ContentRewriter().convert_relative_units('2em 3em', 15, 10)
            '20px 60px'
        """
        limit = self.options.max_unit_tokens
        if limit is not None and limit <= 0:
            return value
        root = Decimal(str(root_size))
        running = Decimal(str(font_size))

        def rem_to_px(match):
            return f'{int(Decimal(match.group(1)) * root)}px'

        def em_to_px(match):
            nonlocal running
            running = Decimal(int(Decimal(match.group(1)) * running))
            return f'{running}px'

        new_value, rem_count = self.REM_PATTERN.subn(rem_to_px, value, count=limit or 0)
        remaining = None if limit is None else limit - rem_count
        if remaining is None or remaining > 0:
            new_value, _ = self.EM_PATTERN.subn(em_to_px, new_value, count=remaining or 0)

        if limit is not None and (self.REM_PATTERN.search(new_value) or self.EM_PATTERN.search(new_value)):
            logger.warning(
                f"More than {limit} relative lengths in one attribute, "
                f"leaving the rest unconverted"
            )
        return new_value

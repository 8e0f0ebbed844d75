"""
Tests for the emoji and math symbol tables.
"""

import pytest
from course_exporter.errors import SymbolTableError
from course_exporter.symbols import (
    EMOJI_SEQUENCES,
    MATH_MACROS,
    emoji_asset_name,
    emoji_key,
    load_emoji_sequences,
    order_longest_first,
)


class TestEmojiKey:
    """Tests for emoji asset keys."""

    def test_single_code_point(self):
        """Test a single emoji maps to its hex code point."""
        assert emoji_key('\U0001F600') == '1f600'

    def test_variation_selector_dropped(self):
        """Test variation selectors are not part of the key."""
        assert emoji_key('\u2764\ufe0f') == '2764'
        assert emoji_key('\u2764') == '2764'

    def test_zwj_and_skin_tone_kept(self):
        """Test joiners and modifiers stay in the key."""
        assert emoji_key('\U0001F44D\U0001F3FD') == '1f44d_1f3fd'
        assert emoji_key('\u2764\ufe0f\u200d\U0001F525') == '2764_200d_1f525'

    def test_short_code_points_padded(self):
        """Test code points below 0x1000 are padded to four digits."""
        assert emoji_key('#\ufe0f\u20e3') == '0023_20e3'

    def test_asset_name(self):
        """Test the image file name."""
        assert emoji_asset_name('\U0001F600') == 'emoji_u1f600.svg'


class TestEmojiTable:
    """Tests for the bundled emoji table."""

    def test_table_not_empty(self):
        """Test the bundled table loads."""
        assert len(EMOJI_SEQUENCES) > 3000

    def test_longest_first(self):
        """Test clusters are ordered by decreasing length."""
        lengths = [len(cluster) for cluster in EMOJI_SEQUENCES]
        assert lengths == sorted(lengths, reverse=True)

    def test_no_duplicates(self):
        """Test every cluster appears once."""
        assert len(set(EMOJI_SEQUENCES)) == len(EMOJI_SEQUENCES)

    def test_contains_common_emoji(self):
        """Test a few well-known clusters are present."""
        assert '\U0001F600' in EMOJI_SEQUENCES
        assert '\u2764\ufe0f' in EMOJI_SEQUENCES
        assert '\U0001F44D\U0001F3FD' in EMOJI_SEQUENCES

    def test_longer_cluster_precedes_its_prefix(self):
        """Test a ZWJ sequence is tried before its first emoji."""
        family = '\U0001F468\u200d\U0001F469\u200d\U0001F467'
        if family in EMOJI_SEQUENCES and '\U0001F468' in EMOJI_SEQUENCES:
            assert EMOJI_SEQUENCES.index(family) < EMOJI_SEQUENCES.index('\U0001F468')

    def test_order_longest_first_is_stable(self):
        """Test clusters of equal length keep their order."""
        assert order_longest_first(['b', 'a', 'ccc', 'dd']) == ('ccc', 'dd', 'b', 'a')


class TestLoadEmojiSequences:
    """Tests for emoji table validation."""

    def test_load_valid_file(self, tmp_path):
        """Test comments and blank lines are skipped."""
        path = tmp_path / 'emoji.txt'
        path.write_text('# header\n\n\U0001F600\n\U0001F44D\U0001F3FD\n', encoding='utf-8')

        table = load_emoji_sequences(path)

        assert table == ('\U0001F44D\U0001F3FD', '\U0001F600')

    def test_keycap_not_treated_as_comment(self, tmp_path):
        """Test a keycap line starting with '#' is loaded."""
        path = tmp_path / 'emoji.txt'
        path.write_text('#\ufe0f\u20e3\n', encoding='utf-8')

        assert load_emoji_sequences(path) == ('#\ufe0f\u20e3',)

    def test_missing_file(self, tmp_path):
        """Test an unreadable file raises."""
        with pytest.raises(SymbolTableError):
            load_emoji_sequences(tmp_path / 'nope.txt')

    def test_empty_table(self, tmp_path):
        """Test a table without entries raises."""
        path = tmp_path / 'emoji.txt'
        path.write_text('# only a comment\n', encoding='utf-8')

        with pytest.raises(SymbolTableError, match='empty'):
            load_emoji_sequences(path)

    def test_duplicate_entry(self, tmp_path):
        """Test a duplicate cluster raises."""
        path = tmp_path / 'emoji.txt'
        path.write_text('\U0001F600\n\U0001F600\n', encoding='utf-8')

        with pytest.raises(SymbolTableError, match='duplicate'):
            load_emoji_sequences(path)

    def test_whitespace_inside_cluster(self, tmp_path):
        """Test a line holding two clusters raises."""
        path = tmp_path / 'emoji.txt'
        path.write_text('\U0001F600 \U0001F601\n', encoding='utf-8')

        with pytest.raises(SymbolTableError, match='whitespace'):
            load_emoji_sequences(path)

    def test_ascii_line(self, tmp_path):
        """Test a plain ASCII line raises."""
        path = tmp_path / 'emoji.txt'
        path.write_text('smile\n', encoding='utf-8')

        with pytest.raises(SymbolTableError):
            load_emoji_sequences(path)

    def test_error_is_value_error(self):
        """Test table errors can be caught as ValueError."""
        assert issubclass(SymbolTableError, ValueError)


class TestMathMacros:
    """Tests for the math character table."""

    def test_common_symbols(self):
        """Test common mappings."""
        assert MATH_MACROS['α'] == r'\alpha'
        assert MATH_MACROS['∑'] == r'\sum'
        assert MATH_MACROS['≤'] == r'\leq'
        assert MATH_MACROS['∞'] == r'\infty'
        assert MATH_MACROS['⊥'] == r'\bot'

    def test_keys_are_single_characters(self):
        """Test every key is one character."""
        assert all(len(char) == 1 for char in MATH_MACROS)

    def test_values_never_contain_keys(self):
        """Test no replacement contains a table character."""
        for macro in MATH_MACROS.values():
            assert not any(char in MATH_MACROS for char in macro)

    def test_table_is_read_only(self):
        """Test the table cannot be modified."""
        with pytest.raises(TypeError):
            MATH_MACROS['x'] = r'\times'

"""Tests for entity and character reference decoding."""

import pytest

from xml_to_json.events import decode_entities


class TestDecodeEntities:
    """Test predefined entities and numeric character references."""

    @pytest.mark.parametrize("raw,expected", [
        ("&lt;", "<"),
        ("&gt;", ">"),
        ("&amp;", "&"),
        ("&quot;", '"'),
        ("&apos;", "'"),
        ("&#65;", "A"),
        ("&#x41;", "A"),
        ("&#X1F600;", "\U0001F600"),
    ])
    def test_known_references(self, raw: str, expected: str) -> None:
        """Test each predefined entity and both numeric forms."""
        assert decode_entities(raw) == expected

    def test_text_without_references_unchanged(self) -> None:
        """Test plain text passes through."""
        assert decode_entities("plain text") == "plain text"

    def test_unknown_entity_left_verbatim(self) -> None:
        """Test that DTD-declared entities are not expanded."""
        assert decode_entities("a &copy; b") == "a &copy; b"

    @pytest.mark.parametrize("raw", ["&#0;", "&#xD800;", "&#x110000;"])
    def test_invalid_code_points_left_verbatim(self, raw: str) -> None:
        """Test NUL, surrogates and out-of-range code points are kept as written."""
        assert decode_entities(raw) == raw

    def test_single_pass(self) -> None:
        """Test that decoded text is not decoded again."""
        assert decode_entities("&amp;lt;") == "&lt;"

    def test_unterminated_reference_left_verbatim(self) -> None:
        """Test that an ampersand without a semicolon is plain text."""
        assert decode_entities("fish & chips &amp") == "fish & chips &amp"

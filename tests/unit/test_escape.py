#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for escaping helpers."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from docrender.utils.escape import escape_html_entities, escape_roff, escape_xml


@pytest.mark.unit
class TestEscapeFunctions:
    """Test escape functions."""

    def test_escape_xml(self):
        """Test XML escaping."""
        assert escape_xml("<script>alert('XSS')</script>") == "&lt;script&gt;alert(&#x27;XSS&#x27;)&lt;/script&gt;"
        assert escape_xml("Hello & World") == "Hello &amp; World"
        assert escape_xml('Test "quotes"') == "Test &quot;quotes&quot;"

    def test_escape_html(self):
        """Test HTML escaping (same as XML)."""
        assert escape_html_entities("<div>test</div>") == "&lt;div&gt;test&lt;/div&gt;"

    def test_empty(self):
        """Empty strings are returned unchanged."""
        assert escape_xml("") == ""
        assert escape_roff("") == ""

    def test_escape_roff(self):
        """Backslashes, hyphens and leading control characters are escaped."""
        assert escape_roff("a\\b") == "a\\eb"
        assert escape_roff("--flag") == "\\-\\-flag"
        assert escape_roff(".TH x\n'quote\nplain") == "\\&.TH x\n\\&'quote\nplain"

    @given(st.text())
    def test_roff_lines_never_start_with_control_character(self, text):
        """No escaped line can be read as a roff request."""
        for line in escape_roff(text).split("\n"):
            assert not line.startswith((".", "'"))

    @given(st.text())
    def test_xml_has_no_markup_characters(self, text):
        """Escaped XML never contains raw markup characters."""
        escaped = escape_xml(text)
        assert "<" not in escaped
        assert ">" not in escaped
        assert '"' not in escaped

"""Tests for inline formatting."""

from inkwell.format.inline import format_inline, truncate


def test_format_bold_italic_code():
    """Test the three inline styles."""
    assert format_inline("**bold**") == "<strong>bold</strong>"
    assert format_inline("*it*") == "<em>it</em>"
    assert format_inline("`x = 1`") == "<code>x = 1</code>"


def test_format_mixed_line():
    """Test styles combined on one line."""
    result = format_inline("a **b** *c* `d`")
    assert result == "a <strong>b</strong> <em>c</em> <code>d</code>"


def test_format_heading_becomes_bold():
    """Test leading heading markers."""
    assert format_inline("# Title") == "<strong>Title</strong>"
    assert format_inline("### Deep") == "<strong>Deep</strong>"


def test_format_deep_heading_untouched():
    """Test that level 4+ headings are left alone."""
    assert format_inline("#### Four") == "#### Four"


def test_format_collapses_newlines():
    """Test newlines become spaces."""
    assert format_inline("# Title\nbody\ntext") == "<strong>Title</strong> body text"


def test_format_escapes_html():
    """Test raw markup is escaped before styling."""
    assert format_inline("<b>x</b> & **y**") == "&lt;b&gt;x&lt;/b&gt; &amp; <strong>y</strong>"


def test_truncate_short_text():
    """Test text under the limit is untouched."""
    assert truncate("short", 10) == ("short", False)


def test_truncate_exact_limit():
    """Test text exactly at the limit is untouched."""
    assert truncate("a" * 200) == ("a" * 200, False)


def test_truncate_long_text():
    """Test long text gets an ellipsis."""
    text, cut = truncate("a" * 201)
    assert cut is True
    assert text == "a" * 200 + "..."

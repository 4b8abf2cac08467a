"""Tests for bold, italic and heading insertion."""

import pytest

from richnote.core import edit
from richnote.core.model import Selection


def test_bold_wraps_selection():
    """Test wrapping a word in bold markers."""
    result = edit.bold("say hello world", Selection(4, 9))
    assert result.text == "say **hello** world"
    assert result.selection == Selection(4, 13)


def test_bold_keeps_surrounding_whitespace_outside():
    """Test that selected leading/trailing spaces stay outside the markers."""
    result = edit.bold("say hello world", Selection(3, 10))
    assert result.text == "say **hello** world"
    assert result.text[result.selection.start : result.selection.stop] == "**hello**"


def test_italic_wraps_selection():
    """Test italic markers."""
    result = edit.italic("a b c", Selection(2, 3))
    assert result.text == "a *b* c"


def test_whitespace_only_selection_is_unchanged():
    """Test that there is nothing to emphasize in blank selections."""
    assert edit.bold("a   b", Selection(1, 4)).text == "a   b"
    assert edit.heading("a   b", Selection(1, 4)).text == "a   b"


def test_heading_whole_line():
    """Test a selection spanning exactly one line."""
    result = edit.heading("title\nbody", Selection(0, 5))
    assert result.text == "# title\nbody"
    assert result.selection == Selection(0, 7)


def test_heading_start_of_line():
    """Test a selection starting a line without spanning it."""
    result = edit.heading("title rest", Selection(0, 5), level=2)
    assert result.text == "## title\n rest"
    assert result.selection == Selection(0, 8)


def test_heading_mid_line():
    """Test that a mid-line selection is moved onto its own line."""
    result = edit.heading("ab title cd", Selection(3, 8))
    assert result.text == "ab \n# title\n cd"
    assert result.selection == Selection(4, 11)
    assert result.text[4:11] == "# title"


def test_heading_on_second_line():
    """Test line classification away from the start of the document."""
    result = edit.heading("intro\nchapter\nend", Selection(6, 13), level=3)
    assert result.text == "intro\n### chapter\nend"


def test_heading_level_out_of_range():
    """Test that heading levels are 1 to 6."""
    with pytest.raises(ValueError):
        edit.heading("x", Selection(0, 1), level=7)

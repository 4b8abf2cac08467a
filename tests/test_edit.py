"""Tests for annotation edit operations and selection predicates."""

import pytest

from richnote.core import edit
from richnote.core.index import OffsetIndex
from richnote.core.model import (
    Alignment,
    Bounds,
    Color,
    Font,
    FontSize,
    Image,
    Selection,
    Styled,
)

TEXT = " [ nuits ]{style| color: dodger blue} : [ 150 ]{style| color: crimson} €"
NUITS = Bounds(1, 10, 10, 37)
PRICE = Bounds(40, 47, 47, 70)


def test_update_prepends_new_category():
    """Test updating a clause with a category it does not have yet."""
    index = OffsetIndex.build(TEXT)
    result = edit.update(TEXT, NUITS, index.get(NUITS), [FontSize(24)])
    assert result.text == (
        " [ nuits ]{style| size: 24, color: dodger blue} : [ 150 ]{style| color: crimson} €"
    )
    assert result.selection == Selection(10, 47)
    assert result.text[10:47] == "{style| size: 24, color: dodger blue}"


def test_update_new_value_wins_per_category():
    """Test that a new color replaces the old one while the font survives."""
    text = "[x]{style| font: Georgia, color: blue}"
    bounds = Bounds(0, 3, 3, len(text))
    node = OffsetIndex.build(text).get(bounds)
    result = edit.update(text, bounds, node, [Color("red")])
    assert result.text == "[x]{style| color: red, font: Georgia}"


def test_update_leaves_one_attribute_per_category():
    """Test that duplicates already in the clause are collapsed."""
    text = "[x]{style| color: blue, color: green}"
    bounds = Bounds(0, 3, 3, len(text))
    node = OffsetIndex.build(text).get(bounds)
    result = edit.update(text, bounds, node, [FontSize(3), FontSize(4)])
    assert result.text == "[x]{style| size: 3, color: blue}"
    rebuilt = OffsetIndex.build(result.text)
    (attrs,) = [n.attributes for n in rebuilt.entries.values()]
    categories = [a.category for a in attrs]
    assert len(categories) == len(set(categories))


def test_update_ignores_image():
    """Test that an image annotation is not restyled."""
    text = "[logo]{image| src: l.png, align: left}"
    bounds = Bounds(0, 6, 6, len(text))
    result = edit.update(text, bounds, Image("logo", "l.png"), [Color("red")])
    assert result.text == text
    assert result.selection == Selection(6, len(text))


def test_update_rejects_bounds_outside_annotation():
    """Test that bounds not delimiting an annotation raise."""
    with pytest.raises(ValueError):
        edit.update(TEXT, Bounds(0, 5, 6, 9), Styled("x"), [Color("red")])


def test_remove_restores_plain_body():
    """Test stripping an annotation back to its text."""
    result = edit.remove(TEXT, PRICE)
    assert result.text == " [ nuits ]{style| color: dodger blue} : 150 €"
    assert result.selection == Selection(43, 43)


def test_insert_wraps_selection():
    """Test creating an annotation around the selected text."""
    text = "3 nuits : 0 €"
    result = edit.insert(text, Selection(10, 13), [Color("red")])
    assert result.text == "3 nuits : [0 €]{style| color: red}"
    assert result.selection == Selection(15, 34)
    index = OffsetIndex.build(result.text)
    assert index.get(Bounds(10, 15, 15, 34)) == Styled("0 €", (Color("red"),))
    found = index.find_enclosing(result.selection.start)
    assert found is not None and found[0] == Bounds(10, 15, 15, 34)


def test_insert_translates_from_selection_start():
    """Test that the new selection is relative to where the markup landed."""
    text = "abc def ghi"
    result = edit.insert(text, Selection(4, 7), [Font("Georgia")])
    assert result.text == "abc [def]{style| font: Georgia} ghi"
    assert result.text[result.selection.start : result.selection.stop] == (
        "{style| font: Georgia}"
    )


def test_insert_dedupes_attributes():
    """Test that the created clause holds one attribute per category."""
    result = edit.insert("abc", Selection(0, 3), [Color("red"), Color("blue")])
    assert result.text == "[abc]{style| color: red}"


def test_insert_collapsed_selection_is_noop():
    """Test that there is nothing to wrap for a cursor."""
    result = edit.insert("abc", Selection(1, 1), [Color("red")])
    assert result.text == "abc"
    assert result.selection == Selection(1, 1)


def test_insert_then_remove_restores_body():
    """Test that removing a fresh annotation gives back the original text."""
    text = "hello wide world"
    inserted = edit.insert(text, Selection(6, 10), [Color("red"), FontSize(18)])
    (bounds,) = list(OffsetIndex.build(inserted.text))
    assert edit.remove(inserted.text, bounds).text == text


@pytest.mark.parametrize(
    "text,selection,expected,body",
    [
        ("hello wide world", Selection(6, 10), Bounds(6, 12, 12, 31), "wide"),
        ("say  hi  now", Selection(3, 9), Bounds(3, 11, 11, 30), "hi"),
        ("[a] b", Selection(4, 5), Bounds(4, 7, 7, 26), "b"),
        ("line one\nline two", Selection(9, 13), Bounds(9, 15, 15, 34), "line"),
        ("end", Selection(0, 3), Bounds(0, 5, 5, 24), "end"),
        ("a [b c", Selection(2, 4), Bounds(2, 6, 6, 25), "[b"),
    ],
)
def test_insert_creates_exactly_one_annotation(text, selection, expected, body):
    """Test that the inserted annotation is found again at its bounds."""
    result = edit.insert(text, selection, [Color("red")])
    index = OffsetIndex.build(result.text)
    assert list(index) == [expected]
    assert index.get(expected) == Styled(body, (Color("red"),))
    assert result.selection == Selection(expected.style_start, expected.style_stop)
    assert edit.remove(result.text, expected).text == (
        text[: selection.start] + body + text[selection.stop :]
    )


@pytest.mark.parametrize(
    "text,selection",
    [
        ("see a]b here", Selection(4, 7)),
        ("ab\ncd", Selection(1, 4)),
    ],
)
def test_insert_refuses_unwrappable_text(text, selection):
    """Test that text which cannot be a body is left alone."""
    result = edit.insert(text, selection, [Color("red")])
    assert result.text == text
    assert result.selection == selection
    assert not edit.can_custom_style(text, selection, OffsetIndex.build(text), None)


@pytest.mark.parametrize(
    "source",
    ["https://x.org/a,b.png", "a}b.png", "a\nb.png", "   ", ""],
)
def test_insert_image_rejects_bad_source(source):
    """Test that a source which would not parse back is an error."""
    with pytest.raises(ValueError):
        edit.insert_image("ab", Selection(1, 1), source, description="c")


def test_attribute_values_must_fit_in_a_clause():
    """Test validation of free-form attribute values."""
    with pytest.raises(ValueError):
        Font("Georgia, serif")
    with pytest.raises(ValueError):
        Color("red}")
    with pytest.raises(ValueError):
        Color(" ")


def test_insert_image_uses_selected_text_as_description():
    """Test replacing a selection with an image annotation."""
    text = "see logo here"
    result = edit.insert_image(
        text, Selection(4, 8), "https://x.org/logo.png", Alignment.CENTER
    )
    assert result.text == "see [logo]{image| src: https://x.org/logo.png, align: center} here"
    index = OffsetIndex.build(result.text)
    found = index.find_enclosing(result.selection.start)
    assert found is not None
    assert found[1] == Image("logo", "https://x.org/logo.png", Alignment.CENTER)


def test_insert_image_at_cursor():
    """Test inserting an image with an explicit description at a cursor."""
    result = edit.insert_image("ab", Selection(1, 1), "c.png", description="cat")
    assert result.text == "a[cat]{image| src: c.png, align: left}b"
    assert result.selection == Selection(6, 38)


def test_merge_article_style():
    """Test that a collapsed-selection style goes to the article style."""
    from richnote.core.model import ArticleStyle

    style = ArticleStyle((Font("Georgia"), Color("black")))
    merged = edit.merge_article_style(style, [Color("red")])
    assert merged.attributes == (Color("red"), Font("Georgia"))
    assert style.attributes == (Font("Georgia"), Color("black"))


def test_resolve_selection_snaps_to_clause():
    """Test that a cursor inside a clause selects the whole clause."""
    index = OffsetIndex.build(TEXT)
    selection, current = edit.resolve_selection(index, Selection(20, 20))
    assert selection == Selection(10, 37)
    assert current is not None and current[0] == NUITS


def test_resolve_selection_outside_clauses():
    """Test that other selections are kept as reported."""
    index = OffsetIndex.build(TEXT)
    selection, current = edit.resolve_selection(index, Selection(4, 6))
    assert selection == Selection(4, 6)
    assert current is None


def test_can_plain_markdown_style():
    """Test legality of markdown emphasis for various selections."""
    index = OffsetIndex.build(TEXT)
    assert not edit.can_plain_markdown_style(Selection(5, 5), index)
    assert not edit.can_plain_markdown_style(Selection(5, 38), index)
    assert edit.can_plain_markdown_style(Selection(0, 72), index)
    assert edit.can_plain_markdown_style(Selection(37, 40), index)


def test_can_custom_style():
    """Test legality of custom styling for various selections."""
    index = OffsetIndex.build(TEXT)
    assert not edit.can_custom_style(TEXT, Selection(5, 5), index, None)
    assert edit.can_custom_style(TEXT, Selection(37, 40), index, None)
    assert not edit.can_custom_style(TEXT, Selection(0, 72), index, None)
    assert not edit.can_custom_style(TEXT, Selection(5, 38), index, None)
    selection, current = edit.resolve_selection(index, Selection(12, 12))
    assert edit.can_custom_style(TEXT, selection, index, current)


def test_can_custom_style_rejects_selection_inside_body():
    """Test that part of an annotation body cannot be wrapped again."""
    index = OffsetIndex.build(TEXT)
    assert not edit.can_custom_style(TEXT, Selection(3, 5), index, None)
    assert not edit.can_custom_style(TEXT, Selection(42, 45), index, None)
    assert not edit.can_custom_style(TEXT, Selection(2, 9), index, None)

"""Edit operations over raw text and selection.

Every operation takes the current raw text (plus a selection or the bounds of
an existing annotation) and returns an `Edit` holding the next raw text and
selection. Offsets in the returned selection are absolute positions in the
new text. The offset index has to be rebuilt on the new text before the next
operation.
"""

import logging
from typing import Iterable

from .index import OffsetIndex
from .model import (
    Alignment,
    ArticleStyle,
    Bounds,
    Edit,
    Image,
    Selection,
    StyleAttribute,
    Styled,
    combine,
    dedupe,
    style_clause,
)
from .scanner import line_spans

logger = logging.getLogger(__name__)

Current = tuple[Bounds, Styled | Image]


def resolve_selection(
    index: OffsetIndex, selection: Selection
) -> tuple[Selection, Current | None]:
    """
    Snap a reported selection to the annotation its start falls inside.

    Returns the effective selection and the current annotation (or None when
    the start position is outside every annotation clause).
    """
    found = index.find_enclosing(selection.start)
    if found is None:
        return selection, None
    bounds, _node = found
    return Selection(bounds.style_start, bounds.style_stop), found


def can_plain_markdown_style(selection: Selection, index: OffsetIndex) -> bool:
    if selection.collapsed:
        return False
    return not index.overlaps_partially(selection.start, selection.stop)


def can_wrap(body: str) -> bool:
    """True if `body` can sit between the brackets of a new annotation."""
    return "]" not in body and "\n" not in body


def can_custom_style(
    text: str, selection: Selection, index: OffsetIndex, current: Current | None
) -> bool:
    """
    True if a style edit on the selection is a whole-annotation operation.

    A selected annotation is updated in place. Otherwise the selection must
    neither cut into nor contain an annotation, and its text must be wrappable.
    """
    if selection.collapsed:
        return False
    if current is not None:
        return True
    if index.cuts(selection.start, selection.stop) or index.encloses(
        selection.start, selection.stop
    ):
        return False
    return can_wrap(text[selection.start : selection.stop])


def _check_bounds(text: str, bounds: Bounds) -> None:
    if (
        bounds.style_stop > len(text)
        or text[bounds.body_start] != "["
        or text[bounds.body_stop - 1] != "]"
        or text[bounds.style_start] != "{"
        or text[bounds.style_stop - 1] != "}"
    ):
        raise ValueError(f"Bounds {bounds} do not delimit an annotation in the text")


def _check_selection(text: str, selection: Selection) -> None:
    if selection.stop > len(text):
        raise ValueError(
            f"Selection [{selection.start}, {selection.stop}) is outside the text"
        )


def _splice(text: str, start: int, stop: int, markup: str, body_len: int) -> Edit:
    new_text = text[:start] + markup + text[stop:]
    # The clause begins after "[" + body + "]"
    clause_start = start + body_len + 2
    return Edit(new_text, Selection(clause_start, start + len(markup)))


def insert(text: str, selection: Selection, attrs: Iterable[StyleAttribute]) -> Edit:
    """Wrap the selected text in a new style annotation.

    The returned selection is the new clause, which is the range a selection
    event inside the annotation snaps to. Text holding `]` or a line break
    cannot be a body and is left unchanged.
    """
    _check_selection(text, selection)
    if selection.collapsed:
        logger.info("insert called with a collapsed selection, text unchanged")
        return Edit(text, selection)
    body = text[selection.start : selection.stop]
    if not can_wrap(body):
        logger.info("Selected text %r cannot be an annotation body", body)
        return Edit(text, selection)
    markup = f"[{body}]{style_clause(dedupe(attrs))}"
    logger.debug("Inserting %r at %d", markup, selection.start)
    return _splice(text, selection.start, selection.stop, markup, len(body))


def insert_image(
    text: str,
    selection: Selection,
    source: str,
    alignment: Alignment = Alignment.LEFT,
    description: str | None = None,
) -> Edit:
    """Replace the selection (or insert at the cursor) with an image annotation.

    Without an explicit description the selected text is used. Raises
    ValueError for a source that cannot be written into the clause.
    """
    _check_selection(text, selection)
    if description is None:
        description = text[selection.start : selection.stop]
    description = description.replace("]", "").replace("\n", " ")
    markup = Image(description, source, alignment).to_markup()
    logger.debug("Inserting image %r at %d", markup, selection.start)
    return _splice(text, selection.start, selection.stop, markup, len(description))


def update(
    text: str,
    bounds: Bounds,
    node: Styled | Image,
    attrs: Iterable[StyleAttribute],
) -> Edit:
    """Rewrite the clause of an existing style annotation, new values winning."""
    _check_bounds(text, bounds)
    if not isinstance(node, Styled):
        logger.info("update ignored for non-style annotation at %d", bounds.body_start)
        return Edit(text, Selection(bounds.style_start, bounds.style_stop))
    clause = style_clause(combine(attrs, node.attributes))
    new_text = text[: bounds.style_start] + clause + text[bounds.style_stop :]
    logger.debug("Replaced clause at %d with %r", bounds.style_start, clause)
    return Edit(
        new_text, Selection(bounds.style_start, bounds.style_start + len(clause))
    )


def remove(text: str, bounds: Bounds) -> Edit:
    """Strip an annotation back to its plain body text."""
    _check_bounds(text, bounds)
    body = text[bounds.text_start : bounds.text_stop].strip()
    new_text = text[: bounds.body_start] + body + text[bounds.style_stop :]
    logger.debug("Removed annotation at %d", bounds.body_start)
    return Edit(new_text, Selection.cursor(bounds.body_start + len(body)))


def merge_article_style(
    style: ArticleStyle, attrs: Iterable[StyleAttribute]
) -> ArticleStyle:
    return style.merge(attrs)


def _wrap(segment: str, before: str, after: str) -> tuple[str, int, int]:
    core = segment.strip()
    lead = segment[: len(segment) - len(segment.lstrip())]
    trail = segment[len(segment.rstrip()) :]
    wrapped = before + core + after
    return lead + wrapped + trail, len(lead), len(lead) + len(wrapped)


def _structural(
    text: str, selection: Selection, before: str, after: str
) -> Edit:
    _check_selection(text, selection)
    segment = text[selection.start : selection.stop]
    if not segment.strip():
        return Edit(text, selection)
    replacement, lo, hi = _wrap(segment, before, after)
    new_text = text[: selection.start] + replacement + text[selection.stop :]
    return Edit(new_text, Selection(selection.start + lo, selection.start + hi))


def bold(text: str, selection: Selection) -> Edit:
    return _structural(text, selection, "**", "**")


def italic(text: str, selection: Selection) -> Edit:
    return _structural(text, selection, "*", "*")


def heading(text: str, selection: Selection, level: int = 1) -> Edit:
    """
    Turn the selection into a heading of the given level.

    A selection spanning a whole line is rewritten in place. One that starts a
    line gets a trailing newline; anything else is moved onto its own line.
    """
    if not 1 <= level <= 6:
        raise ValueError(f"Heading level must be between 1 and 6, got {level}")
    _check_selection(text, selection)
    segment = text[selection.start : selection.stop]
    if not segment.strip():
        return Edit(text, selection)

    spans = line_spans(text)
    span = (selection.start, selection.stop)
    if span in spans:
        prefix, suffix = "", ""
    elif any(start == selection.start for start, _stop in spans):
        prefix, suffix = "", "\n"
    else:
        prefix, suffix = "\n", "\n"

    replacement, lo, hi = _wrap(segment, "#" * level + " ", "")
    new_text = (
        text[: selection.start] + prefix + replacement + suffix + text[selection.stop :]
    )
    base = selection.start + len(prefix)
    return Edit(new_text, Selection(base + lo, base + hi))

"""Editor document state and the transitions driven by host events.

Every handler takes the current `DocumentState` and returns a `Transition`:
the next state plus the effects the host must run on its next frame. States
are never mutated.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable

from . import edit
from .effects import SetSelection
from .history import StyleSnapshot, TextSnapshot, UndoHistory
from .index import OffsetIndex
from .model import Alignment, ArticleStyle, Edit, Selection, StyleAttribute, Styled

logger = logging.getLogger(__name__)

MARKUP_KINDS = ("bold", "italic", "heading")


@dataclass(frozen=True)
class DocumentState:
    text: str = ""
    selection: Selection = Selection(0, 0)
    article_style: ArticleStyle = ArticleStyle()
    history: UndoHistory = UndoHistory()
    current: edit.Current | None = None
    index: OffsetIndex = field(default_factory=OffsetIndex, compare=False, repr=False)
    snap: bool = True

    @classmethod
    def create(
        cls,
        text: str = "",
        article_style: ArticleStyle | None = None,
        undo_depth: int = 5,
        snap: bool = True,
    ) -> DocumentState:
        return cls(
            text=text,
            selection=Selection.cursor(len(text)),
            article_style=article_style or ArticleStyle(),
            history=UndoHistory(depth=undo_depth),
            index=OffsetIndex.build(text),
            snap=snap,
        )

    @property
    def can_plain_markdown_style(self) -> bool:
        return edit.can_plain_markdown_style(self.selection, self.index)

    @property
    def can_custom_style(self) -> bool:
        return edit.can_custom_style(
            self.text, self.selection, self.index, self.current
        )


@dataclass(frozen=True)
class Transition:
    state: DocumentState
    effects: tuple[SetSelection, ...] = ()


def _select(state: DocumentState, reported: Selection, synthesized: bool) -> Transition:
    if state.snap:
        effective, current = edit.resolve_selection(state.index, reported)
    else:
        effective, current = reported, None
    new_state = replace(state, selection=effective, current=current)
    if synthesized or effective != reported:
        return Transition(new_state, (SetSelection(effective.start, effective.stop),))
    return Transition(new_state)


def _clamp(selection: Selection, text: str) -> Selection:
    stop = min(selection.stop, len(text))
    return Selection(min(selection.start, stop), stop)


def _load_text(
    state: DocumentState, text: str, selection: Selection, synthesized: bool
) -> Transition:
    rebuilt = replace(state, text=text, index=OffsetIndex.build(text))
    return _select(rebuilt, _clamp(selection, text), synthesized)


def on_text_change(state: DocumentState, text: str, selection: Selection) -> Transition:
    """Host reported a new full text (typing, paste, ...)."""
    if text != state.text:
        state = replace(
            state, history=state.history.push(TextSnapshot(state.text, state.selection))
        )
    return _load_text(state, text, selection, synthesized=False)


def on_selection_change(state: DocumentState, start: int, stop: int) -> Transition:
    """Host reported a new selection; snap it to an enclosing annotation."""
    selection = _clamp(Selection(min(start, stop), max(start, stop)), state.text)
    return _select(state, selection, synthesized=False)


def _accept(state: DocumentState, result: Edit) -> Transition:
    if result.text == state.text:
        if result.selection == state.selection:
            return Transition(state)
        return _select(state, result.selection, synthesized=True)
    pushed = replace(
        state, history=state.history.push(TextSnapshot(state.text, state.selection))
    )
    return _load_text(pushed, result.text, result.selection, synthesized=True)


def set_article_style(state: DocumentState, attrs: Iterable[StyleAttribute]) -> Transition:
    merged = edit.merge_article_style(state.article_style, attrs)
    if merged == state.article_style:
        return Transition(state)
    history = state.history.push(StyleSnapshot(state.article_style))
    return Transition(replace(state, article_style=merged, history=history))


def apply_style(state: DocumentState, attrs: Iterable[StyleAttribute]) -> Transition:
    """
    Apply style attributes to whatever the selection designates.

    - collapsed selection: the document-wide article style
    - a selected style annotation: its clause is updated
    - otherwise plain text is wrapped in a new annotation, if legal
    """
    attrs = tuple(attrs)
    if state.selection.collapsed:
        return set_article_style(state, attrs)
    if state.current is not None:
        bounds, node = state.current
        if not isinstance(node, Styled):
            logger.info("Selected annotation is not a style annotation")
            return Transition(state)
        return _accept(state, edit.update(state.text, bounds, node, attrs))
    if not state.can_custom_style:
        logger.info(
            "Selection [%d, %d) straddles an annotation or cannot be wrapped",
            state.selection.start,
            state.selection.stop,
        )
        return Transition(state)
    return _accept(state, edit.insert(state.text, state.selection, attrs))


def apply_image(
    state: DocumentState,
    source: str,
    alignment: Alignment = Alignment.LEFT,
    description: str | None = None,
) -> Transition:
    start, stop = state.selection.start, state.selection.stop
    encloses = start != stop and state.index.encloses(start, stop)
    if state.index.cuts(start, stop) or encloses:
        logger.info("Image insertion would cut through an annotation")
        return Transition(state)
    return _accept(
        state,
        edit.insert_image(state.text, state.selection, source, alignment, description),
    )


def apply_remove(state: DocumentState) -> Transition:
    """Strip the currently selected annotation back to plain text."""
    if state.current is None:
        return Transition(state)
    bounds, _node = state.current
    return _accept(state, edit.remove(state.text, bounds))


def apply_markup(state: DocumentState, kind: str, level: int = 1) -> Transition:
    """Apply bold, italic or heading markdown to the selection."""
    if kind not in MARKUP_KINDS:
        raise ValueError(f"Unknown markup kind: {kind}")
    if not state.can_plain_markdown_style:
        logger.info("Markdown %s not allowed for the current selection", kind)
        return Transition(state)
    if kind == "bold":
        result = edit.bold(state.text, state.selection)
    elif kind == "italic":
        result = edit.italic(state.text, state.selection)
    else:
        result = edit.heading(state.text, state.selection, level)
    return _accept(state, result)


def undo(state: DocumentState) -> Transition:
    """Pop one snapshot and replay it; undo itself is not recorded."""
    snapshot, history = state.history.pop()
    if snapshot is None:
        return Transition(state)
    state = replace(state, history=history)
    if isinstance(snapshot, StyleSnapshot):
        return Transition(replace(state, article_style=snapshot.article_style))
    return _load_text(state, snapshot.text, snapshot.selection, synthesized=True)

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from .model import ArticleStyle, Selection

DEFAULT_DEPTH = 5


@dataclass(frozen=True)
class TextSnapshot:
    text: str
    selection: Selection


@dataclass(frozen=True)
class StyleSnapshot:
    article_style: ArticleStyle


Snapshot = Union[TextSnapshot, StyleSnapshot]


@dataclass(frozen=True)
class UndoHistory:
    """Bounded stack of prior snapshots, newest last. Oldest entries drop off."""

    entries: tuple[Snapshot, ...] = ()
    depth: int = DEFAULT_DEPTH

    def __post_init__(self) -> None:
        if self.depth < 1:
            raise ValueError(f"Undo depth must be at least 1, got {self.depth}")

    def __len__(self) -> int:
        return len(self.entries)

    def push(self, snapshot: Snapshot) -> UndoHistory:
        entries = (*self.entries, snapshot)[-self.depth :]
        return UndoHistory(entries, self.depth)

    def pop(self) -> tuple[Snapshot | None, UndoHistory]:
        if not self.entries:
            return None, self
        return self.entries[-1], UndoHistory(self.entries[:-1], self.depth)

"""Offset index mapping annotation bounds in raw text to parsed annotations."""

from typing import Iterator

from .model import Bounds, Image, Styled
from .scanner import scan_lines


class OffsetIndex:
    """
    Derived view of every annotation in a raw text.

    Safe to rebuild at any time; it is never updated incrementally.
    """

    def __init__(self, entries: dict[Bounds, Styled | Image] | None = None):
        self.entries: dict[Bounds, Styled | Image] = dict(entries or {})

    @classmethod
    def build(cls, text: str) -> "OffsetIndex":
        entries: dict[Bounds, Styled | Image] = {}
        for offset, tokens in scan_lines(text):
            for token in tokens:
                if token.bounds is not None:
                    entries[token.bounds.shift(offset)] = token.node  # type: ignore[assignment]
        return cls(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Bounds]:
        return iter(self.entries)

    def items(self):
        return self.entries.items()

    def get(self, bounds: Bounds) -> Styled | Image | None:
        return self.entries.get(bounds)

    def find_enclosing(self, position: int) -> tuple[Bounds, Styled | Image] | None:
        """Return the annotation whose clause `[style_start, style_stop)` holds `position`."""
        for bounds, node in self.entries.items():
            if bounds.style_start <= position < bounds.style_stop:
                return bounds, node
        return None

    def overlaps_partially(self, start: int, stop: int) -> bool:
        """True if exactly one selection end falls strictly inside an annotation."""
        for bounds in self.entries:
            inside_start = bounds.body_start < start < bounds.style_stop
            inside_stop = bounds.body_start < stop < bounds.style_stop
            if inside_start != inside_stop:
                return True
        return False

    def cuts(self, start: int, stop: int) -> bool:
        """True if either selection end falls strictly inside an annotation."""
        return any(
            bounds.body_start < position < bounds.style_stop
            for bounds in self.entries
            for position in (start, stop)
        )

    def encloses(self, start: int, stop: int) -> bool:
        """True if the selection fully contains some annotation."""
        return any(
            start <= bounds.body_start and stop >= bounds.style_stop
            for bounds in self.entries
        )

from typing import Protocol

from .blocks import Block


class BlockParser(Protocol):
    """
    Standard block markdown (paragraphs, headings, lists, quotes, code,
    thematic breaks). Soft line breaks are treated as hard breaks.
    Annotations are never interpreted here; they stay in literal text runs.
    """

    def parse_blocks(self, text: str) -> list[Block]:
        pass


class HostWidget(Protocol):
    """
    The native text input the editor is attached to.
    """

    def set_selection(self, start: int, stop: int) -> None:
        pass

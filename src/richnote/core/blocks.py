"""Block/inline tree exchanged with the block-markdown parser.

Block and inline kinds owned by the markdown parser pass through untouched;
the only kinds this package adds are the annotation nodes themselves (inline
`Plain`/`Styled`/`Image`) and the `"image"` block that lifts an image
annotation out of paragraph flow.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

from .model import Image, Plain, Styled


@dataclass
class Inline:
    kind: str  # "text" | "softbreak" | "hardbreak" | "em" | "strong" | "s" | "link" | "image" | "code" | "html"
    content: str = ""
    children: list[InlineItem] = field(default_factory=list)
    attrs: dict[str, str] = field(default_factory=dict)


InlineItem = Union[Inline, Plain, Styled, Image]

# Containers whose children are re-scanned for annotations
NESTED_KINDS = frozenset({"em", "strong", "s", "link"})


@dataclass
class Block:
    kind: str  # "paragraph" | "heading" | "list" | "item" | "quote" | "code" | "rule" | "html" | "image"
    inlines: list[InlineItem] = field(default_factory=list)
    children: list[Block] = field(default_factory=list)
    level: int | None = None  # heading level
    ordered: bool = False  # list
    info: str | None = None  # code fence info string
    content: str = ""  # raw text for code/html, display text for paragraphs
    image: Image | None = None


def display_text(items: list[InlineItem]) -> str:
    """Concatenate the displayable text of an inline sequence."""
    parts: list[str] = []
    for item in items:
        if isinstance(item, Plain):
            parts.append(item.text)
        elif isinstance(item, Styled):
            parts.append(item.body)
        elif isinstance(item, Image):
            parts.append(item.description)
        elif item.kind in ("softbreak", "hardbreak"):
            parts.append("\n")
        elif item.kind == "image":
            parts.append(item.content)
        elif item.children:
            parts.append(display_text(item.children))
        else:
            parts.append(item.content)
    return "".join(parts)

"""Splice annotations into parsed markdown and lift images out of paragraphs."""

from .blocks import NESTED_KINDS, Block, Inline, InlineItem, display_text
from .model import Image, Plain
from .scanner import scan


def rescan(items: list[InlineItem]) -> list[InlineItem]:
    """
    Replace every literal text run with its annotation decomposition.

    Recurses into emphasis, strikethrough and link labels; code spans and raw
    HTML are left alone. Already scanned `Plain` runs are scanned again, so
    running this twice gives the same result.
    """
    out: list[InlineItem] = []
    pending = ""

    def flush() -> None:
        nonlocal pending
        if pending:
            out.extend(scan(pending))
            pending = ""

    for item in items:
        if isinstance(item, Plain):
            pending += item.text
        elif isinstance(item, Inline) and item.kind == "text":
            pending += item.content
        else:
            flush()
            if isinstance(item, Inline) and item.kind in NESTED_KINDS:
                item = Inline(
                    item.kind,
                    content=item.content,
                    children=rescan(item.children),
                    attrs=dict(item.attrs),
                )
            out.append(item)
    flush()
    return out


def is_block_worthy(item: InlineItem) -> bool:
    return isinstance(item, Image)


def _paragraph(run: list[InlineItem]) -> Block | None:
    text = display_text(run).strip()
    if not text:
        return None
    return Block("paragraph", inlines=run, content=text)


def splice_paragraph(items: list[InlineItem]) -> list[Block]:
    """
    Turn one paragraph's inline sequence into a flat list of blocks.

    Image annotations become standalone `"image"` blocks; the text around them
    stays in paragraphs, in the original order.
    """
    blocks: list[Block] = []
    run: list[InlineItem] = []
    for item in rescan(items):
        if is_block_worthy(item):
            paragraph = _paragraph(run)
            if paragraph is not None:
                blocks.append(paragraph)
            blocks.append(Block("image", image=item))  # type: ignore[arg-type]
            run = []
        else:
            run.append(item)
    paragraph = _paragraph(run)
    if paragraph is not None:
        blocks.append(paragraph)
    return blocks


def splice_blocks(blocks: list[Block]) -> list[Block]:
    """Apply annotation splicing to a whole block tree."""
    out: list[Block] = []
    for block in blocks:
        if block.kind == "paragraph":
            out.extend(splice_paragraph(block.inlines))
        elif block.kind == "heading":
            inlines = rescan(block.inlines)
            out.append(
                Block(
                    "heading",
                    inlines=inlines,
                    level=block.level,
                    content=display_text(inlines).strip(),
                )
            )
        elif block.children:
            out.append(
                Block(
                    block.kind,
                    inlines=block.inlines,
                    children=splice_blocks(block.children),
                    level=block.level,
                    ordered=block.ordered,
                    info=block.info,
                    content=block.content,
                    image=block.image,
                )
            )
        else:
            out.append(block)
    return out

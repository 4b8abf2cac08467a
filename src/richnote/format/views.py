"""JSON-ready views of annotations, bounds and blocks for the CLI and API."""

from typing import Any

from ..core.blocks import Block, Inline, InlineItem
from ..core.model import (
    Annotation,
    ArticleStyle,
    BackgroundColor,
    Bounds,
    Color,
    Font,
    FontSize,
    Plain,
    Selection,
    StyleAttribute,
    Styled,
)


def attribute_view(attr: StyleAttribute) -> dict[str, Any]:
    if isinstance(attr, Font):
        return {"font": attr.name}
    if isinstance(attr, FontSize):
        return {"size": attr.size}
    if isinstance(attr, Color):
        return {"color": attr.key}
    return {"background": attr.key}


def attributes_from(
    font: str | None = None,
    size: int | None = None,
    color: str | None = None,
    background: str | None = None,
) -> list[StyleAttribute]:
    """Build an attribute list from optional per-category values."""
    attrs: list[StyleAttribute] = []
    if font:
        attrs.append(Font(font))
    if size is not None:
        attrs.append(FontSize(size))
    if color:
        attrs.append(Color(color))
    if background:
        attrs.append(BackgroundColor(background))
    return attrs


def style_view(style: ArticleStyle) -> list[dict[str, Any]]:
    return [attribute_view(a) for a in style.attributes]


def node_view(node: Annotation) -> dict[str, Any]:
    if isinstance(node, Plain):
        return {"type": "plain", "text": node.text}
    if isinstance(node, Styled):
        return {
            "type": "style",
            "body": node.body,
            "attributes": [attribute_view(a) for a in node.attributes],
        }
    return {
        "type": "image",
        "description": node.description,
        "src": node.source,
        "align": node.alignment.value,
    }


def bounds_view(bounds: Bounds) -> dict[str, int]:
    return {
        "body_start": bounds.body_start,
        "body_stop": bounds.body_stop,
        "style_start": bounds.style_start,
        "style_stop": bounds.style_stop,
    }


def selection_view(selection: Selection) -> dict[str, int]:
    return {"start": selection.start, "stop": selection.stop}


def inline_view(item: InlineItem) -> dict[str, Any]:
    if not isinstance(item, Inline):
        return node_view(item)
    out: dict[str, Any] = {"type": item.kind}
    if item.content:
        out["content"] = item.content
    if item.children:
        out["children"] = [inline_view(c) for c in item.children]
    if item.attrs:
        out["attrs"] = dict(item.attrs)
    return out


def block_view(block: Block) -> dict[str, Any]:
    out: dict[str, Any] = {"type": block.kind}
    if block.image is not None:
        out["image"] = node_view(block.image)
    if block.level is not None:
        out["level"] = block.level
    if block.kind == "list":
        out["ordered"] = block.ordered
    if block.info:
        out["info"] = block.info
    if block.content:
        out["text"] = block.content
    if block.inlines:
        out["inlines"] = [inline_view(i) for i in block.inlines]
    if block.children:
        out["children"] = [block_view(c) for c in block.children]
    return out

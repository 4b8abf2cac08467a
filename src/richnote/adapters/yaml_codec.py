import re, io
import yaml
from dataclasses import dataclass, field
from typing import Any
from ..core.model import (
    ArticleStyle,
    BackgroundColor,
    Color,
    Font,
    FontSize,
    StyleAttribute,
)

_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*\n?", re.DOTALL)

STYLE_KEY = "style"


@dataclass
class NoteFile:
    body: str
    article_style: ArticleStyle = field(default_factory=ArticleStyle)
    meta: dict[str, Any] = field(default_factory=dict)  # everything but `style`


def style_from_mapping(data: dict[str, Any]) -> ArticleStyle:
    attrs: list[StyleAttribute] = []
    if data.get("font"):
        attrs.append(Font(str(data["font"])))
    if data.get("size") is not None:
        attrs.append(FontSize(int(data["size"])))
    if data.get("color"):
        attrs.append(Color(str(data["color"])))
    if data.get("background"):
        attrs.append(BackgroundColor(str(data["background"])))
    return ArticleStyle(tuple(attrs))


def style_to_mapping(style: ArticleStyle) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for attr in style.attributes:
        if isinstance(attr, Font):
            out["font"] = attr.name
        elif isinstance(attr, FontSize):
            out["size"] = attr.size
        elif isinstance(attr, Color):
            out["color"] = attr.key
        else:
            out["background"] = attr.key
    return out


class YamlNoteCodec:
    """Note files: optional YAML frontmatter whose `style` key is the article style."""

    def decode(self, text: str) -> NoteFile:
        m = _FM.match(text)
        if not m:
            return NoteFile(body=text)
        meta = yaml.safe_load(io.StringIO(m.group(1))) or {}
        if not isinstance(meta, dict):
            raise ValueError("Frontmatter must be a mapping")
        style_data = meta.pop(STYLE_KEY, None) or {}
        if not isinstance(style_data, dict):
            raise ValueError("Frontmatter `style` must be a mapping")
        return NoteFile(
            body=text[m.end() :],
            article_style=style_from_mapping(style_data),
            meta=meta,
        )

    def encode(self, note: NoteFile) -> str:
        meta = dict(note.meta)
        style = style_to_mapping(note.article_style)
        if style:
            meta[STYLE_KEY] = style
        if not meta:
            return note.body
        buf = io.StringIO()
        yaml.safe_dump(meta, buf, sort_keys=False, allow_unicode=True)
        return f"---\n{buf.getvalue()}---\n{note.body}"

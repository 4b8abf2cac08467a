"""Recursive-descent parser for a single `[body]{kind| attrs}` annotation.

Grammar (never crosses a newline)::

    annotation := '[' body ']' ws '{' kind '|' ws attr_list '}'
    kind       := "style" | "image"
    attr_list  := attr (',' ws attr)*
    style_attr := ("font"|"size"|"color"|"background color") ws ':' ws value
    image_attr := ("src"|"align") ws ':' ws value

Duplicate style categories are accepted here; precedence is resolved by the
edit operations.
"""

import logging
from dataclasses import dataclass

from .model import (
    Alignment,
    BackgroundColor,
    Bounds,
    Color,
    Font,
    FontSize,
    Image,
    StyleAttribute,
    Styled,
    VALUE_STOPS,
)

logger = logging.getLogger(__name__)

WHITESPACE = " \t"
STYLE_KEYS = ("background color", "font", "size", "color")
IMAGE_KEYS = ("src", "align")


class AnnotationSyntaxError(ValueError):
    """Raised internally when a candidate annotation does not parse."""

    def __init__(self, reason: str, position: int):
        super().__init__(f"{reason} at {position}")
        self.reason = reason
        self.position = position


@dataclass(frozen=True)
class ParsedAnnotation:
    node: Styled | Image
    bounds: Bounds  # relative to the start of the scanned line
    end: int


class _Parser:
    def __init__(self, line: str, pos: int):
        self.line = line
        self.pos = pos

    def fail(self, reason: str) -> AnnotationSyntaxError:
        return AnnotationSyntaxError(reason, self.pos)

    def peek(self) -> str:
        if self.pos < len(self.line):
            return self.line[self.pos]
        return ""

    def expect(self, ch: str) -> None:
        if self.peek() != ch:
            raise self.fail(f"expected {ch!r}")
        self.pos += 1

    def skip_ws(self) -> None:
        while self.peek() and self.peek() in WHITESPACE:
            self.pos += 1

    def keyword(self, choices: tuple[str, ...], what: str) -> str:
        for word in choices:
            if self.line.startswith(word, self.pos):
                self.pos += len(word)
                return word
        raise self.fail(f"unknown {what}")

    def body(self) -> str:
        self.expect("[")
        start = self.pos
        while self.peek() and self.peek() not in "]\n":
            self.pos += 1
        if self.peek() != "]":
            raise self.fail("unterminated bracket")
        text = self.line[start : self.pos]
        self.pos += 1
        return text

    def value(self) -> str:
        start = self.pos
        while self.peek() and self.peek() not in VALUE_STOPS:
            self.pos += 1
        text = self.line[start : self.pos].rstrip()
        if not text:
            raise AnnotationSyntaxError("empty value", start)
        return text

    def attr_list(self, keys: tuple[str, ...]) -> list[tuple[str, str, int]]:
        attrs = [self.attr(keys)]
        while self.peek() == ",":
            self.pos += 1
            self.skip_ws()
            attrs.append(self.attr(keys))
        return attrs

    def attr(self, keys: tuple[str, ...]) -> tuple[str, str, int]:
        key = self.keyword(keys, "attribute")
        self.skip_ws()
        self.expect(":")
        self.skip_ws()
        position = self.pos
        return key, self.value(), position


def _style_attribute(key: str, value: str, position: int) -> StyleAttribute:
    if key == "font":
        return Font(value)
    if key == "size":
        if not (value.isascii() and value.isdigit()) or int(value) <= 0:
            raise AnnotationSyntaxError("invalid size", position)
        return FontSize(int(value))
    if key == "color":
        return Color(value)
    return BackgroundColor(value)


def _image(description: str, attrs: list[tuple[str, str, int]], raw: str) -> Image:
    found: dict[str, tuple[str, int]] = {}
    for key, value, position in attrs:
        # First occurrence wins, as for style categories
        found.setdefault(key, (value, position))
    if "src" not in found:
        raise AnnotationSyntaxError("missing src", attrs[0][2])
    alignment = Alignment.LEFT
    if "align" in found:
        value, position = found["align"]
        try:
            alignment = Alignment(value)
        except ValueError:
            raise AnnotationSyntaxError("invalid alignment", position) from None
    return Image(description.strip(), found["src"][0], alignment, raw=raw)


def _parse(line: str, pos: int) -> ParsedAnnotation:
    p = _Parser(line, pos)
    body = p.body()
    body_stop = p.pos
    p.skip_ws()
    style_start = p.pos
    p.expect("{")
    kind = p.keyword(("style", "image"), "kind")
    p.expect("|")
    p.skip_ws()
    attrs = p.attr_list(STYLE_KEYS if kind == "style" else IMAGE_KEYS)
    p.expect("}")
    raw = line[pos : p.pos]
    bounds = Bounds(pos, body_stop, style_start, p.pos)

    node: Styled | Image
    if kind == "style":
        node = Styled(
            body.strip(),
            tuple(_style_attribute(k, v, at) for k, v, at in attrs),
            raw=raw,
        )
    else:
        node = _image(body, attrs, raw)
    return ParsedAnnotation(node=node, bounds=bounds, end=p.pos)


def parse_annotation(line: str, pos: int = 0) -> ParsedAnnotation | None:
    """Try to parse an annotation starting at `pos`.

    Returns None when the text at `pos` is not a well-formed annotation; the
    caller then treats the opening bracket as literal text.
    """
    try:
        return _parse(line, pos)
    except AnnotationSyntaxError as e:
        logger.debug("No annotation at %d: %s", pos, e)
        return None

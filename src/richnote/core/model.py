from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union

# Characters that end an attribute value inside a clause
VALUE_STOPS = ",}\n"


def check_value(name: str, value: str) -> None:
    """Raise ValueError unless `value` can be written into a clause and read back."""
    if not value.strip() or any(c in value for c in VALUE_STOPS):
        raise ValueError(f"Invalid {name}: {value!r}")


class Alignment(Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


@dataclass(frozen=True)
class Font:
    name: str
    category = "font"

    def __post_init__(self) -> None:
        check_value("font", self.name)

    def to_markup(self) -> str:
        return f"font: {self.name}"


@dataclass(frozen=True)
class FontSize:
    size: int
    category = "size"

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Font size must be positive, got {self.size}")

    def to_markup(self) -> str:
        return f"size: {self.size}"


@dataclass(frozen=True)
class Color:
    key: str  # named color, resolved by the host's color table
    category = "color"

    def __post_init__(self) -> None:
        check_value("color", self.key)

    def to_markup(self) -> str:
        return f"color: {self.key}"


@dataclass(frozen=True)
class BackgroundColor:
    key: str
    category = "background color"

    def __post_init__(self) -> None:
        check_value("background color", self.key)

    def to_markup(self) -> str:
        return f"background color: {self.key}"


StyleAttribute = Union[Font, FontSize, Color, BackgroundColor]


def dedupe(attributes: Iterable[StyleAttribute]) -> tuple[StyleAttribute, ...]:
    """Keep the first attribute of each category, preserving order."""
    seen: set[str] = set()
    out: list[StyleAttribute] = []
    for attr in attributes:
        if attr.category in seen:
            continue
        seen.add(attr.category)
        out.append(attr)
    return tuple(out)


def combine(
    new: Iterable[StyleAttribute], old: Iterable[StyleAttribute]
) -> tuple[StyleAttribute, ...]:
    """Merge two attribute lists; new values win per category."""
    return dedupe([*new, *old])


@dataclass(frozen=True)
class Plain:
    text: str

    @property
    def raw(self) -> str:
        return self.text


@dataclass(frozen=True)
class Styled:
    body: str
    attributes: tuple[StyleAttribute, ...] = ()
    raw: str = field(default="", compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.raw:
            object.__setattr__(self, "raw", self.to_markup())

    def clause(self) -> str:
        return style_clause(self.attributes)

    def to_markup(self) -> str:
        return f"[{self.body}]{self.clause()}"


@dataclass(frozen=True)
class Image:
    description: str
    source: str
    alignment: Alignment = Alignment.LEFT
    raw: str = field(default="", compare=False, repr=False)

    def __post_init__(self) -> None:
        check_value("image source", self.source)
        if not self.raw:
            object.__setattr__(self, "raw", self.to_markup())

    def clause(self) -> str:
        return image_clause(self.source, self.alignment)

    def to_markup(self) -> str:
        return f"[{self.description}]{self.clause()}"


Annotation = Union[Plain, Styled, Image]


def style_clause(attributes: Iterable[StyleAttribute]) -> str:
    """Serialize a `{style| ...}` clause."""
    return "{style| " + ", ".join(a.to_markup() for a in attributes) + "}"


def image_clause(source: str, alignment: Alignment) -> str:
    """Serialize an `{image| ...}` clause."""
    return f"{{image| src: {source}, align: {alignment.value}}}"


@dataclass(frozen=True)
class Bounds:
    """Offsets of one annotation occurrence in the raw text.

    `[body_start, body_stop)` covers `[body]`, `[style_start, style_stop)`
    covers `{kind| attrs}`. Used as a dictionary key by the offset index.
    """

    body_start: int
    body_stop: int
    style_start: int
    style_stop: int

    def __post_init__(self) -> None:
        if not (
            0 <= self.body_start < self.body_stop <= self.style_start < self.style_stop
        ):
            raise ValueError(f"Malformed bounds: {self}")

    @property
    def text_start(self) -> int:
        return self.body_start + 1

    @property
    def text_stop(self) -> int:
        return self.body_stop - 1

    def shift(self, delta: int) -> Bounds:
        return Bounds(
            self.body_start + delta,
            self.body_stop + delta,
            self.style_start + delta,
            self.style_stop + delta,
        )


@dataclass(frozen=True)
class Selection:
    start: int
    stop: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.stop:
            raise ValueError(f"Malformed selection: [{self.start}, {self.stop})")

    @property
    def collapsed(self) -> bool:
        return self.start == self.stop

    @classmethod
    def cursor(cls, position: int) -> Selection:
        return cls(position, position)


@dataclass(frozen=True)
class ArticleStyle:
    """Document-wide default style used when no annotation is selected."""

    attributes: tuple[StyleAttribute, ...] = ()

    def merge(self, new: Iterable[StyleAttribute]) -> ArticleStyle:
        return ArticleStyle(combine(new, self.attributes))

    def get(self, category: str) -> StyleAttribute | None:
        for attr in self.attributes:
            if attr.category == category:
                return attr
        return None


@dataclass(frozen=True)
class Edit:
    """Result of an edit operation: the next raw text and selection."""

    text: str
    selection: Selection

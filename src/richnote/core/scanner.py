"""Line-scoped tokenizer splitting raw text into literal runs and annotations."""

from dataclasses import dataclass
from typing import Iterable, Iterator

from .grammar import parse_annotation
from .model import Annotation, Bounds, Plain


@dataclass(frozen=True)
class Token:
    node: Annotation
    start: int
    end: int
    bounds: Bounds | None = None  # None for Plain runs


def tokenize_line(line: str) -> list[Token]:
    """
    Decompose one line into an ordered, gap-free list of tokens.

    Offsets are relative to the start of the line. Adjacent literal runs are
    coalesced so no two Plain tokens are ever consecutive.
    """
    tokens: list[Token] = []
    pos = 0
    n = len(line)

    def emit_plain(start: int, end: int) -> None:
        if tokens and tokens[-1].bounds is None:
            start = tokens.pop().start
        tokens.append(Token(Plain(line[start:end]), start, end))

    while pos < n:
        parsed = parse_annotation(line, pos) if line[pos] == "[" else None
        if parsed is not None:
            tokens.append(Token(parsed.node, pos, parsed.end, parsed.bounds))
            pos = parsed.end
        elif line[pos] == "[":
            emit_plain(pos, pos + 1)
            pos += 1
        else:
            nxt = line.find("[", pos)
            end = n if nxt == -1 else nxt
            emit_plain(pos, end)
            pos = end
    return tokens


def scan_line(line: str) -> list[Annotation]:
    return [t.node for t in tokenize_line(line)]


def line_spans(text: str) -> list[tuple[int, int]]:
    """Return the `[start, stop)` span of every line, newline excluded."""
    spans = []
    offset = 0
    for line in text.split("\n"):
        spans.append((offset, offset + len(line)))
        offset += len(line) + 1
    return spans


def scan_lines(text: str) -> Iterator[tuple[int, list[Token]]]:
    """Yield `(line_offset, tokens)` for every line of the document."""
    for start, stop in line_spans(text):
        yield start, tokenize_line(text[start:stop])


def scan(text: str) -> list[Annotation]:
    """
    Scan a whole document into one node sequence.

    Each line is tokenized on its own; newlines become part of the
    surrounding literal runs.
    """
    nodes: list[Annotation] = []
    first = True
    for _offset, tokens in scan_lines(text):
        line_nodes = [t.node for t in tokens]
        if not first:
            line_nodes.insert(0, Plain("\n"))
        first = False
        for node in line_nodes:
            if nodes and isinstance(node, Plain) and isinstance(nodes[-1], Plain):
                nodes[-1] = Plain(nodes[-1].text + node.text)
            else:
                nodes.append(node)
    return nodes


def serialize(nodes: Iterable[Annotation]) -> str:
    """Concatenate nodes back to the exact source text they were scanned from."""
    return "".join(node.raw for node in nodes)

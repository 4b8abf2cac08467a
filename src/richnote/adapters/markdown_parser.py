from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from ..core.blocks import Block, Inline
from ..core.ports import BlockParser

LIST_KINDS = {"bullet_list": False, "ordered_list": True}
CONTAINER_KINDS = {"blockquote": "quote", "list_item": "item"}


class MarkdownParser(BlockParser):
    """Standard block markdown, parsed by markdown-it-py into `Block` trees.

    Only literal text is left for annotation splicing; every other node kind is
    carried through as-is.
    """

    def __init__(self, breaks: bool = True):
        self.breaks = breaks
        self.md = MarkdownIt("commonmark", {"breaks": breaks}).enable("strikethrough")

    def parse_blocks(self, text: str) -> list[Block]:
        root = SyntaxTreeNode(self.md.parse(text))
        return [self._block(node) for node in root.children]

    def _block(self, node: SyntaxTreeNode) -> Block:
        kind = node.type
        if kind == "paragraph":
            inlines = self._inlines(node.children[0].children) if node.children else []
            return Block("paragraph", inlines=inlines)
        if kind == "heading":
            inlines = self._inlines(node.children[0].children) if node.children else []
            return Block("heading", inlines=inlines, level=int(node.tag[1:]))
        if kind in LIST_KINDS:
            return Block(
                "list",
                children=[self._block(child) for child in node.children],
                ordered=LIST_KINDS[kind],
            )
        if kind in CONTAINER_KINDS:
            return Block(
                CONTAINER_KINDS[kind],
                children=[self._block(child) for child in node.children],
            )
        if kind == "fence":
            return Block("code", info=node.info.strip() or None, content=node.content)
        if kind == "code_block":
            return Block("code", content=node.content)
        if kind == "hr":
            return Block("rule")
        if kind == "html_block":
            return Block("html", content=node.content)
        # Anything else the parser knows about is carried through untouched
        return Block(kind, children=[self._block(child) for child in node.children])

    def _inlines(self, nodes: list[SyntaxTreeNode]) -> list[Inline]:
        out: list[Inline] = []
        for node in nodes:
            item = self._inline(node)
            if item.kind == "text" and out and out[-1].kind == "text":
                out[-1].content += item.content
            else:
                out.append(item)
        return out

    def _inline(self, node: SyntaxTreeNode) -> Inline:
        kind = node.type
        if kind in ("text", "text_special"):
            return Inline("text", content=node.content)
        if kind == "softbreak":
            return Inline("hardbreak" if self.breaks else "softbreak")
        if kind == "hardbreak":
            return Inline("hardbreak")
        if kind in ("em", "strong", "s"):
            return Inline(kind, children=self._inlines(node.children))
        if kind == "link":
            attrs = {k: str(v) for k, v in node.attrs.items()}
            return Inline("link", children=self._inlines(node.children), attrs=attrs)
        if kind == "image":
            attrs = {k: str(v) for k, v in node.attrs.items() if k != "alt"}
            return Inline("image", content=node.content, attrs=attrs)
        if kind == "code_inline":
            return Inline("code", content=node.content)
        if kind == "html_inline":
            return Inline("html", content=node.content)
        return Inline(kind, content=node.content)

"""Runtime wiring helper for CLI and API applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.markdown_parser import MarkdownParser
from .adapters.yaml_codec import NoteFile, YamlNoteCodec
from .config import RichnoteConfig, load_config
from .core.blocks import Block
from .core.session import DocumentState
from .core.splicer import splice_blocks


@dataclass
class Runtime:
    """Container for all wired components."""
    parser: MarkdownParser
    codec: YamlNoteCodec
    config: RichnoteConfig

    def render_blocks(self, text: str) -> list[Block]:
        """Parse block markdown and splice annotations into it."""
        return splice_blocks(self.parser.parse_blocks(text))

    def open_state(self, note: NoteFile) -> DocumentState:
        """Start an editing session for a note, its style over the configured default."""
        style = self.config.article.merge(note.article_style.attributes)
        return DocumentState.create(
            note.body,
            article_style=style,
            undo_depth=self.config.editor.undo_depth,
            snap=self.config.editor.snap_selection,
        )


def build_runtime(config_path: Path | None = None) -> Runtime:
    """Build and wire all components."""
    config = load_config(config_path=config_path)
    return Runtime(
        parser=MarkdownParser(breaks=config.markdown.breaks),
        codec=YamlNoteCodec(),
        config=config,
    )

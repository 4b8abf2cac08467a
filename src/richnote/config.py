"""Configuration loader for richnote.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .adapters.yaml_codec import style_from_mapping
from .core.history import DEFAULT_DEPTH
from .core.model import ArticleStyle

CONFIG_NAME = "richnote.toml"


@dataclass
class EditorConfig:
    """Editor behaviour."""
    undo_depth: int = DEFAULT_DEPTH
    snap_selection: bool = True


@dataclass
class MarkdownConfig:
    """Block parser options."""
    breaks: bool = True


@dataclass
class ApiConfig:
    """Local JSON API settings."""
    host: str = "127.0.0.1"
    port: int = 8766


@dataclass
class RichnoteConfig:
    """Complete richnote configuration."""
    editor: EditorConfig = field(default_factory=EditorConfig)
    article: ArticleStyle = field(default_factory=ArticleStyle)
    markdown: MarkdownConfig = field(default_factory=MarkdownConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


def load_config(config_path: Path | None = None) -> RichnoteConfig:
    """
    Load configuration from richnote.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/richnote.toml

    Args:
        config_path: Explicit path to config file

    Returns:
        RichnoteConfig with resolved settings

    Raises:
        ValueError: if a setting is out of range
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    # Parse editor config
    editor_data = toml_data.get("editor", {})
    editor_config = EditorConfig(
        undo_depth=editor_data.get("undo_depth", DEFAULT_DEPTH),
        snap_selection=editor_data.get("snap_selection", True),
    )
    depth = editor_config.undo_depth
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
        raise ValueError(f"editor.undo_depth must be an integer of at least 1, got {depth!r}")

    # Parse article style
    article_data = toml_data.get("article", {})
    try:
        article = style_from_mapping(article_data)
    except ValueError as e:
        raise ValueError(f"article: {e}") from e

    markdown_data = toml_data.get("markdown", {})
    markdown_config = MarkdownConfig(breaks=markdown_data.get("breaks", True))

    api_data = toml_data.get("api", {})
    api_config = ApiConfig(
        host=api_data.get("host", "127.0.0.1"),
        port=api_data.get("port", 8766),
    )

    return RichnoteConfig(
        editor=editor_config,
        article=article,
        markdown=markdown_config,
        api=api_config,
    )

"""Tests for configuration loading."""

import os
import tempfile
from pathlib import Path

import pytest

from richnote.config import load_config
from richnote.core.model import Color, Font, FontSize


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(config_path=Path(tmpdir) / "missing.toml")

    assert config.editor.undo_depth == 5
    assert config.editor.snap_selection is True
    assert config.article.attributes == ()
    assert config.markdown.breaks is True
    assert config.api.port == 8766


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "richnote.toml"
        config_path.write_text("""
[editor]
undo_depth = 10
snap_selection = false

[article]
font = "Georgia"
size = 14
color = "dark grey"

[markdown]
breaks = false

[api]
host = "0.0.0.0"
port = 9000
""")

        config = load_config(config_path=config_path)

        assert config.editor.undo_depth == 10
        assert config.editor.snap_selection is False
        assert config.article.attributes == (Font("Georgia"), FontSize(14), Color("dark grey"))
        assert config.markdown.breaks is False
        assert config.api.host == "0.0.0.0"
        assert config.api.port == 9000


def test_load_config_search_cwd():
    """Test config search in current working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            Path(tmpdir, "richnote.toml").write_text("[editor]\nundo_depth = 3\n")

            config = load_config()
            assert config.editor.undo_depth == 3
        finally:
            os.chdir(orig_cwd)


def test_load_config_rejects_bad_values():
    """Test validation of out-of-range settings."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "richnote.toml"

        config_path.write_text("[editor]\nundo_depth = 0\n")
        with pytest.raises(ValueError, match="undo_depth"):
            load_config(config_path=config_path)

        config_path.write_text("[article]\nsize = -2\n")
        with pytest.raises(ValueError, match="article"):
            load_config(config_path=config_path)


def test_load_config_rejects_non_integer_depth():
    """Test that a non-integer undo depth is a ValueError naming the key."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "richnote.toml"
        config_path.write_text('[editor]\nundo_depth = "five"\n')
        with pytest.raises(ValueError, match="undo_depth"):
            load_config(config_path=config_path)

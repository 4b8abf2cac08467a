"""Tests for note files with YAML frontmatter."""

import pytest

from richnote.adapters.yaml_codec import NoteFile, YamlNoteCodec
from richnote.core.model import ArticleStyle, BackgroundColor, Color, Font, FontSize


def test_decode_style_and_meta():
    """Test that the style key becomes the article style."""
    text = """---
title: Trip
style:
  font: Georgia
  size: 14
  color: dark grey
  background: ivory
---
3 [ nuits ]{style| color: dodger blue}
"""
    note = YamlNoteCodec().decode(text)

    assert note.body == "3 [ nuits ]{style| color: dodger blue}\n"
    assert note.meta == {"title": "Trip"}
    assert note.article_style.attributes == (
        Font("Georgia"),
        FontSize(14),
        Color("dark grey"),
        BackgroundColor("ivory"),
    )


def test_decode_without_frontmatter():
    """Test that a plain markdown file is all body."""
    note = YamlNoteCodec().decode("# Heading\n\ntext")
    assert note.body == "# Heading\n\ntext"
    assert note.article_style == ArticleStyle()
    assert note.meta == {}


def test_decode_rejects_bad_frontmatter():
    """Test that non-mapping frontmatter and style are errors."""
    codec = YamlNoteCodec()
    with pytest.raises(ValueError):
        codec.decode("---\n- a\n- b\n---\nbody")
    with pytest.raises(ValueError):
        codec.decode("---\nstyle: bold\n---\nbody")
    with pytest.raises(ValueError):
        codec.decode("---\nstyle:\n  size: 0\n---\nbody")


def test_encode_keeps_meta_before_style():
    """Test the written frontmatter layout."""
    note = NoteFile(
        body="body\n",
        article_style=ArticleStyle((Font("Georgia"), FontSize(12))),
        meta={"title": "Trip"},
    )
    text = YamlNoteCodec().encode(note)

    assert text == "---\ntitle: Trip\nstyle:\n  font: Georgia\n  size: 12\n---\nbody\n"
    assert YamlNoteCodec().decode(text) == note


def test_encode_without_meta_is_body_only():
    """Test that no frontmatter is written when there is nothing to write."""
    assert YamlNoteCodec().encode(NoteFile(body="just text")) == "just text"

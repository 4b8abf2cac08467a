"""Annotated markdown notes: inline style and image annotations over plain text."""

__version__ = "0.1.0"

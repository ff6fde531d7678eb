"""kvwiki: a Markdown wiki editor over a remote key-value store."""

__version__ = "0.1.0"

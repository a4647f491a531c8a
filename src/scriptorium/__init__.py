"""Scriptorium: a static blog generator for Markdown documents with front matter."""

__version__ = "0.1.0"

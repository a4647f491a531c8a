"""Markdown source handling: front matter and body conversion."""

"""Parsing and validation of YAML front matter.

A document is a Markdown file that starts with a ``---`` delimited YAML
header. :func:`parse_document` never raises: every input maps to exactly one
of three outcomes.

- :class:`ParsedDocument` when the header decodes into valid metadata.
- :class:`NotADocument` when there is no header, or the header is a draft.
- :class:`ParseFailure` when a header is present but unusable.
"""

from __future__ import annotations

import frontmatter
import yaml
from pydantic import ValidationError

from scriptorium.core.types import (
    Metadata,
    NotADocument,
    ParsedDocument,
    ParseFailure,
    ParseOutcome,
)

_HANDLER = frontmatter.YAMLHandler()
_BOM = "\ufeff"


def _leading_trimmed(text: str) -> str:
    return text.lstrip().removeprefix(_BOM).lstrip()


def has_frontmatter(text: str) -> bool:
    """Return True when ``text`` opens with a front matter delimiter."""
    return bool(_HANDLER.detect(_leading_trimmed(text)))


def parse_document(text: str) -> ParseOutcome:
    """Split ``text`` into validated metadata and body."""
    if not has_frontmatter(text):
        return NotADocument()

    try:
        raw_header, body = _HANDLER.split(_leading_trimmed(text))
    except ValueError:
        return ParseFailure("front matter is not terminated by a `---` line")

    try:
        header = _HANDLER.load(raw_header)
    except yaml.YAMLError as exc:
        return ParseFailure(f"front matter is not valid YAML: {exc}")

    if header is None:
        header = {}
    if not isinstance(header, dict):
        return ParseFailure(f"front matter must be a mapping, not {type(header).__name__}")

    if header.get("draft"):
        return NotADocument("draft")

    try:
        metadata = Metadata.model_validate(header)
    except ValidationError as exc:
        return ParseFailure(describe_validation_error(exc))

    return ParsedDocument(metadata=metadata, body=body.strip())


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into one line naming each offending field."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "front matter"
        if error["type"] == "missing":
            problems.append(f"missing required field `{field}`")
        else:
            problems.append(f"`{field}`: {error['msg']}")
    return "; ".join(problems)

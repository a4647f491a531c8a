"""Load a directory of Markdown documents into an ordered collection."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from scriptorium.core.types import Document, LoadFailure, ParsedDocument, ParseFailure
from scriptorium.exceptions import SourceDirectoryError
from scriptorium.markdown.frontmatter import parse_document

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".md",)


@dataclass
class LoadResult:
    """Documents that loaded, newest first, plus every file that was skipped."""

    documents: list[Document] = field(default_factory=list)
    failures: list[LoadFailure] = field(default_factory=list)


def load_documents(source_dir: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> LoadResult:
    """Parse every document in ``source_dir``.

    Files are visited in name order, so documents sharing a timestamp keep a
    stable relative order. Files without front matter are skipped silently;
    malformed ones are skipped with a single warning each.

    Raises:
        SourceDirectoryError: If ``source_dir`` cannot be listed.

    """
    suffixes = {ext.lower() for ext in extensions}
    result = LoadResult()

    for path in _list_candidates(source_dir, suffixes):
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            _reject(result, path, f"cannot be read: {exc}")
            continue

        outcome = parse_document(text)
        if isinstance(outcome, ParsedDocument):
            result.documents.append(Document(source=path, metadata=outcome.metadata, body=outcome.body))
        elif isinstance(outcome, ParseFailure):
            _reject(result, path, outcome.reason)
        else:
            logger.debug("Ignoring %s (%s)", path, outcome.reason)

    result.documents.sort(key=lambda doc: doc.metadata.publish_timestamp, reverse=True)
    result.documents = _drop_slug_collisions(result)
    return result


def _list_candidates(source_dir: Path, suffixes: set[str]) -> list[Path]:
    try:
        entries = sorted(source_dir.iterdir())
    except OSError as exc:
        raise SourceDirectoryError(source_dir, exc.strerror or str(exc)) from exc
    return [entry for entry in entries if entry.suffix.lower() in suffixes and entry.is_file()]


def _drop_slug_collisions(result: LoadResult) -> list[Document]:
    """Keep the newest document for each slug and reject the rest."""
    owners: dict[str, Document] = {}
    kept = []
    for doc in result.documents:
        owner = owners.get(doc.metadata.slug)
        if owner is not None:
            _reject(result, doc.source, f"slug `{doc.metadata.slug}` is already used by `{owner.source}`")
            continue
        owners[doc.metadata.slug] = doc
        kept.append(doc)
    return kept


def _reject(result: LoadResult, path: Path, reason: str) -> None:
    failure = LoadFailure(source=path, reason=reason)
    logger.warning("%s", failure)
    result.failures.append(failure)

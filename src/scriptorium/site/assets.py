"""Copy static assets into the generated site."""

from __future__ import annotations

import logging
import os
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from scriptorium.exceptions import OutputWriteError

logger = logging.getLogger(__name__)

SKIPPED_SUFFIXES = frozenset({".md"})


def discover_assets(assets_dir: Path) -> list[Path]:
    """Return every copyable file below ``assets_dir``, in sorted order.

    Markdown files and hidden files or directories are left out.
    """
    if not assets_dir.is_dir():
        return []

    found = []
    for path in sorted(assets_dir.rglob("*")):
        relative = path.relative_to(assets_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file() and path.suffix.lower() not in SKIPPED_SUFFIXES:
            found.append(path)
    return found


def copy_assets(assets_dir: Path, output_dir: Path, max_workers: int | None = None) -> list[Path]:
    """Mirror the asset tree into ``output_dir`` using a thread pool.

    A missing ``assets_dir`` simply means there is nothing to copy.

    Raises:
        OutputWriteError: If any file cannot be copied.

    """
    sources = discover_assets(assets_dir)
    if not sources:
        logger.debug("No assets to copy from %s", assets_dir)
        return []

    def copy_one(source: Path) -> Path:
        destination = output_dir / source.relative_to(assets_dir)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
        except OSError as exc:
            raise OutputWriteError(destination, str(exc)) from exc
        return destination

    workers = min(max_workers or os.cpu_count() or 1, len(sources))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="assets") as executor:
        copied = list(executor.map(copy_one, sources))

    logger.info("Copied %d asset(s) to %s", len(copied), output_dir)
    return copied

"""Top-level build driver.

Runs every phase in sequence: load, render pages, index, feed, assets. Pages
and assets are each fanned out over a thread pool. Recoverable problems are
collected in the :class:`BuildReport`; fatal ones raise a
:class:`~scriptorium.exceptions.ScriptoriumError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from scriptorium.config import SiteConfig
from scriptorium.core.types import POSTS_DIRNAME, Document, LoadFailure, RenderFailure
from scriptorium.engine.index import write_index
from scriptorium.engine.render import Converter, RenderPipeline, RenderReport, RenderResources
from scriptorium.engine.template_loader import TemplateLoader
from scriptorium.exceptions import ConfigurationError
from scriptorium.feeds.rss import build_feed, write_feed
from scriptorium.ingest.loader import load_documents
from scriptorium.site.assets import copy_assets

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


@dataclass
class BuildReport:
    documents: list[Document] = field(default_factory=list)
    load_failures: list[LoadFailure] = field(default_factory=list)
    render: RenderReport = field(default_factory=RenderReport)
    index_path: Path | None = None
    feed_path: Path | None = None
    assets: list[Path] = field(default_factory=list)

    @property
    def render_failures(self) -> list[RenderFailure]:
        return self.render.failures

    @property
    def ok(self) -> bool:
        """True when no document was skipped and every page rendered."""
        return not self.load_failures and not self.render_failures


def read_style(path: Path | None) -> str:
    """Read a style sheet; an unset path means no styling.

    Raises:
        ConfigurationError: If a configured style sheet cannot be read.

    """
    if path is None:
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot load style sheet: {exc.strerror or exc}", path) from exc


def build_site(
    config: SiteConfig,
    *,
    now: datetime | None = None,
    converter: Converter | None = None,
) -> BuildReport:
    """Generate the whole site described by ``config``."""
    paths = config.paths
    output_dir = paths.abs_output_dir
    now = now or datetime.now().astimezone()

    resources = RenderResources(
        style=read_style(paths.abs_style),
        math_style=read_style(paths.abs_math_style),
    )
    templates = TemplateLoader(paths.abs_template_dir)
    report = BuildReport()

    loaded = load_documents(paths.abs_posts_dir, config.build.extensions)
    report.documents = loaded.documents
    report.load_failures = loaded.failures
    logger.info("Found %d document(s), rendering them...", len(report.documents))

    pipeline = RenderPipeline(
        templates,
        config.site,
        output_dir / POSTS_DIRNAME,
        converter=converter,
        max_workers=config.build.max_workers,
    )
    report.render = pipeline.render_all(report.documents, resources)
    if report.render_failures:
        logger.warning("Failed to render %d document(s):", len(report.render_failures))
        for failure in report.render_failures:
            logger.warning("  %s", failure)
    else:
        logger.info("Pages rendered!")

    report.index_path = write_index(
        report.documents,
        templates,
        resources,
        config.site,
        output_dir / INDEX_FILENAME,
    )

    feed = build_feed(report.documents, config.site, now)
    report.feed_path = write_feed(feed, output_dir / config.site.feed_filename)

    report.assets = copy_assets(paths.abs_assets_dir, output_dir, config.build.max_workers)

    _log_summary(report)
    return report


def _log_summary(report: BuildReport) -> None:
    rendered = len(report.render.successes)
    if report.ok:
        logger.info("Build complete: %d page(s) rendered.", rendered)
        return
    logger.warning(
        "Build complete with problems: %d page(s) rendered, %d document(s) skipped, %d render failure(s).",
        rendered,
        len(report.load_failures),
        len(report.render_failures),
    )

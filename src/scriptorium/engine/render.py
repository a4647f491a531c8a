"""Parallel page rendering.

Every document is rendered by its own task on a thread pool. Tasks share only
read-only inputs (style text, the Jinja environment and the Markdown
converter) and each task writes a single ``<slug>/index.html``. A task never
raises: it returns a :class:`RenderSuccess` or a :class:`RenderFailure`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from markdown_it import MarkdownIt

from scriptorium.core.types import Document, RenderFailure, RenderOutcome, RenderSuccess
from scriptorium.engine.template_loader import PAGE_TEMPLATE, TemplateLoader

if TYPE_CHECKING:
    from scriptorium.config import SiteSettings

logger = logging.getLogger(__name__)

PAGE_FILENAME = "index.html"


class Converter(Protocol):
    """Turns a Markdown body into HTML, raising on failure."""

    def convert(self, text: str) -> str: ...


class MarkdownConverter:
    """CommonMark converter with tables and strikethrough, raw HTML allowed."""

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])

    def convert(self, text: str) -> str:
        return self._md.render(text)


@dataclass(frozen=True)
class RenderResources:
    """Style sheets inlined into every page."""

    style: str = ""
    math_style: str = ""


@dataclass
class RenderReport:
    """Outcomes of one render phase, in collection order."""

    outcomes: list[RenderOutcome] = field(default_factory=list)

    @property
    def successes(self) -> list[RenderSuccess]:
        return [o for o in self.outcomes if isinstance(o, RenderSuccess)]

    @property
    def failures(self) -> list[RenderFailure]:
        return [o for o in self.outcomes if isinstance(o, RenderFailure)]


class RenderPipeline:
    """Renders documents to ``<output_dir>/<slug>/index.html``."""

    def __init__(
        self,
        templates: TemplateLoader,
        site: SiteSettings,
        output_dir: Path,
        converter: Converter | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.templates = templates
        self.site = site
        self.output_dir = Path(output_dir)
        self.converter = converter or MarkdownConverter()
        self.max_workers = max_workers or os.cpu_count() or 1

    def render_document(self, document: Document, resources: RenderResources) -> str:
        """Render the full HTML page of a single document."""
        content = self.converter.convert(document.body)
        metadata = document.metadata
        return self.templates.render_template(
            PAGE_TEMPLATE,
            site_title=self.site.title,
            language=self.site.language,
            base_url=self.site.base_url,
            feed_url=self.site.feed_url,
            post=metadata,
            extras=metadata.extras,
            permalink=self.site.absolute_url(document.url),
            content=content,
            style=resources.style,
            math_style=resources.math_style,
            include_math_css=bool(metadata.extras.get("math", False)),
        )

    def page_path(self, document: Document) -> Path:
        return self.output_dir / document.metadata.slug / PAGE_FILENAME

    def render_all(self, documents: Sequence[Document], resources: RenderResources) -> RenderReport:
        """Render every document concurrently and collect the outcomes."""
        if not documents:
            return RenderReport()

        task = partial(self._render_one, resources=resources)
        workers = min(self.max_workers, len(documents))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="render") as executor:
            outcomes = list(executor.map(task, documents))

        report = RenderReport(outcomes=outcomes)
        logger.debug("Rendered %d page(s), %d failure(s)", len(report.successes), len(report.failures))
        return report

    def _render_one(self, document: Document, resources: RenderResources) -> RenderOutcome:
        try:
            html = self.render_document(document, resources)
        except Exception as exc:  # noqa: BLE001 - converter and templates are opaque
            return RenderFailure(source=document.source, detail=f"{type(exc).__name__}: {exc}")

        path = self.page_path(document)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
        except OSError as exc:
            return RenderFailure(source=document.source, detail=f"cannot write {path}: {exc}")

        return RenderSuccess(document=document, path=path)

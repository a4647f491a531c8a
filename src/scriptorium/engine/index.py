"""Index page rendering."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import TemplateError

from scriptorium.core.types import Document
from scriptorium.engine.grouping import group_by_category
from scriptorium.engine.render import RenderResources
from scriptorium.engine.template_loader import INDEX_TEMPLATE, TemplateLoader
from scriptorium.exceptions import OutputWriteError

if TYPE_CHECKING:
    from scriptorium.config import SiteSettings

logger = logging.getLogger(__name__)


def render_index(
    documents: Sequence[Document],
    templates: TemplateLoader,
    resources: RenderResources,
    site: SiteSettings,
) -> str:
    """Render the index page listing ``documents`` grouped by category."""
    return templates.render_template(
        INDEX_TEMPLATE,
        site_title=site.title,
        language=site.language,
        base_url=site.base_url,
        feed_url=site.feed_url,
        posts=group_by_category(documents),
        style=resources.style,
        math_style=resources.math_style,
        include_math_css=False,
    )


def write_index(
    documents: Sequence[Document],
    templates: TemplateLoader,
    resources: RenderResources,
    site: SiteSettings,
    output_path: Path,
) -> Path:
    """Render the index and write it to ``output_path``.

    Raises:
        OutputWriteError: If the index cannot be rendered or written.

    """
    try:
        html = render_index(documents, templates, resources, site)
    except TemplateError as exc:
        raise OutputWriteError(output_path, f"index template failed: {exc}") from exc

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(output_path, str(exc)) from exc

    logger.info("Index written to %s", output_path)
    return output_path

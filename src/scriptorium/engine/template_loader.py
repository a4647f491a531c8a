"""Jinja2 template loader for site pages.

Templates ship with the package under ``scriptorium/engine/templates``; a site
may point at its own directory instead.
"""

from importlib.resources import files
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, select_autoescape

from scriptorium.engine import filters

PAGE_TEMPLATE = "page.html.jinja2"
INDEX_TEMPLATE = "index.html.jinja2"


class TemplateLoader:
    """Loads and renders Jinja2 templates.

    The environment is built once and only read afterwards, so a single loader
    is shared by all render workers.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize TemplateLoader.

        Args:
            template_dir: Path to template directory. Defaults to the templates
                bundled with the package.

        """
        if template_dir is None:
            template_dir = Path(str(files("scriptorium.engine").joinpath("templates")))

        self.template_dir = template_dir

        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(enabled_extensions=("html", "jinja2")),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._register_filters()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters."""
        self.env.filters["format_datetime"] = filters.format_datetime
        self.env.filters["isoformat"] = filters.isoformat

    def load_template(self, template_name: str) -> Template:
        """Load a template by name.

        Raises:
            TemplateNotFound: If template does not exist

        """
        return self.env.get_template(template_name)

    def render_template(self, template_name: str, **context: Any) -> str:
        """Load and render a template with context.

        Raises:
            TemplateNotFound: If template does not exist
            TemplateError: If rendering fails

        """
        template = self.load_template(template_name)
        return template.render(**context)

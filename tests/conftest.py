"""Shared fixtures for Scriptorium tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from scriptorium.config import PathsSettings, SiteConfig, SiteSettings
from scriptorium.engine.template_loader import TemplateLoader


def document_text(
    title: str | None = "A title",
    date: str | None = "2024-01-01T09:00:00+00:00",
    slug: str | None = "a-title",
    category: str | None = "tech",
    summary: str | None = "A short summary.",
    body: str = "Some *body* text.",
    **extra: object,
) -> str:
    """Build a document with front matter; a field set to None is left out."""
    fields = {"title": title, "date": date, "slug": slug, "category": category, "summary": summary, **extra}
    header = "\n".join(f"{key}: {value}" for key, value in fields.items() if value is not None)
    return f"---\n{header}\n---\n\n{body}\n"


@pytest.fixture
def make_document() -> Callable[..., str]:
    return document_text


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    path = tmp_path / "posts"
    path.mkdir()
    return path


@pytest.fixture
def write_document(posts_dir: Path) -> Callable[..., Path]:
    """Write a document named ``<name>.md`` into the posts directory."""

    def _write(name: str, text: str | None = None, **fields: object) -> Path:
        path = posts_dir / f"{name}.md"
        path.write_text(text if text is not None else document_text(**fields), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def site() -> SiteSettings:
    return SiteSettings(
        title="Test Blog",
        base_url="https://blog.example.com/",
        description="Notes from a test",
        language="en-ca",
        author="Jane Writer",
        email="jane@example.com",
    )


@pytest.fixture
def templates() -> TemplateLoader:
    return TemplateLoader()


@pytest.fixture
def site_config(tmp_path: Path, posts_dir: Path, site: SiteSettings) -> SiteConfig:
    """A site rooted at ``tmp_path`` with both style sheets present."""
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "style.css").write_text("body { color: #333; }", encoding="utf-8")
    (docs / "katex.css").write_text(".katex { font-size: 1.1em; }", encoding="utf-8")
    return SiteConfig(site=site, paths=PathsSettings(site_root=tmp_path))

"""End-to-end tests for the build driver."""

import logging
from datetime import UTC, datetime

import pytest
from defusedxml import ElementTree

from scriptorium.engine.render import MarkdownConverter
from scriptorium.exceptions import ConfigurationError, SourceDirectoryError
from scriptorium.orchestration.build import build_site

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


class ExplodingConverter(MarkdownConverter):
    def convert(self, text: str) -> str:
        if "BOOM" in text:
            raise RuntimeError("renderer gave up")
        return super().convert(text)


@pytest.fixture
def three_posts(write_document):
    write_document("one", title="Zeta", slug="zeta", category="tech", date="2024-03-01T00:00:00+00:00")
    write_document("two", title="Beta", slug="beta", category="life", date="2024-02-01T00:00:00+00:00")
    write_document("three", title="Alpha", slug="alpha", category="tech", date="2024-01-01T00:00:00+00:00")


def _feed_links(path):
    root = ElementTree.fromstring(path.read_text(encoding="utf-8"))
    return [item.findtext("link") for item in root.iter("item")]


def test_scenario_orders_groups_and_feed(site_config, three_posts, tmp_path):
    report = build_site(site_config, now=NOW)

    assert report.ok
    assert [d.metadata.slug for d in report.documents] == ["zeta", "beta", "alpha"]

    docs = tmp_path / "docs"
    for slug in ["zeta", "beta", "alpha"]:
        assert (docs / "posts" / slug / "index.html").is_file()

    index = (docs / "index.html").read_text(encoding="utf-8")
    positions = [index.index(f'href="https://blog.example.com/posts/{slug}/"') for slug in ["beta", "alpha", "zeta"]]
    assert positions == sorted(positions)
    assert index.index("<h2>life</h2>") < index.index("<h2>tech</h2>")

    assert _feed_links(docs / "feed.rss") == [
        "https://blog.example.com/posts/zeta/",
        "https://blog.example.com/posts/beta/",
        "https://blog.example.com/posts/alpha/",
    ]
    assert report.feed_path == docs / "feed.rss"
    assert report.index_path == docs / "index.html"


def test_rebuild_is_byte_identical_except_feed_clock(site_config, three_posts, tmp_path):
    docs = tmp_path / "docs"
    build_site(site_config, now=NOW)
    first = {p: p.read_bytes() for p in docs.rglob("*.html")}
    first_links = _feed_links(docs / "feed.rss")

    build_site(site_config, now=datetime(2027, 1, 1, tzinfo=UTC))
    second = {p: p.read_bytes() for p in docs.rglob("*.html")}

    assert first == second
    assert _feed_links(docs / "feed.rss") == first_links


def test_document_without_header_is_silently_excluded(site_config, write_document, caplog, tmp_path):
    write_document("post", slug="post")
    write_document("scratch", text="nothing to see here\n")

    with caplog.at_level(logging.WARNING):
        report = build_site(site_config, now=NOW)

    assert report.ok
    assert [d.metadata.slug for d in report.documents] == ["post"]
    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []


def test_document_missing_title_is_absent_everywhere(site_config, write_document, caplog, tmp_path):
    write_document("post", slug="post")
    bad = write_document("nameless", title=None, slug="nameless", summary="ghost summary")

    with caplog.at_level(logging.WARNING):
        report = build_site(site_config, now=NOW)

    assert not report.ok
    assert [f.source for f in report.load_failures] == [bad]
    naming = [r for r in caplog.records if r.levelno == logging.WARNING and str(bad) in r.getMessage()]
    assert len(naming) == 1

    docs = tmp_path / "docs"
    assert not (docs / "posts" / "nameless").exists()
    assert "ghost summary" not in (docs / "index.html").read_text(encoding="utf-8")
    assert _feed_links(docs / "feed.rss") == ["https://blog.example.com/posts/post/"]


def test_render_failure_keeps_document_in_index_and_feed(site_config, write_document, caplog, tmp_path):
    write_document("good", title="Good", slug="good", date="2024-01-02T00:00:00+00:00")
    bad = write_document("bad", title="Bad", slug="bad", body="BOOM", date="2024-01-03T00:00:00+00:00")

    with caplog.at_level(logging.WARNING):
        report = build_site(site_config, now=NOW, converter=ExplodingConverter())

    assert [f.source for f in report.render_failures] == [bad]
    assert any(str(bad) in r.getMessage() and "renderer gave up" in r.getMessage() for r in caplog.records)

    docs = tmp_path / "docs"
    assert (docs / "posts" / "good" / "index.html").is_file()
    assert not (docs / "posts" / "bad").exists()
    assert 'href="https://blog.example.com/posts/bad/"' in (docs / "index.html").read_text(encoding="utf-8")
    assert _feed_links(docs / "feed.rss") == [
        "https://blog.example.com/posts/bad/",
        "https://blog.example.com/posts/good/",
    ]


def test_assets_are_copied(site_config, write_document, tmp_path):
    write_document("post", slug="post")
    (tmp_path / "assets" / "img").mkdir(parents=True)
    (tmp_path / "assets" / "img" / "me.png").write_bytes(b"png")

    report = build_site(site_config, now=NOW)

    assert report.assets == [tmp_path / "docs" / "img" / "me.png"]


def test_missing_source_directory_is_fatal(site_config, tmp_path):
    (tmp_path / "posts").rmdir()

    with pytest.raises(SourceDirectoryError):
        build_site(site_config, now=NOW)

    assert not (tmp_path / "docs" / "index.html").exists()


def test_missing_style_sheet_is_fatal(site_config, write_document, tmp_path):
    write_document("post", slug="post")
    (tmp_path / "docs" / "style.css").unlink()

    with pytest.raises(ConfigurationError):
        build_site(site_config, now=NOW)


def test_unset_style_sheets_are_allowed(site_config, write_document, tmp_path):
    write_document("post", slug="post")
    site_config.paths.style = None
    site_config.paths.math_style = None

    report = build_site(site_config, now=NOW)

    assert report.ok


def test_links_respect_a_base_url_with_a_path(site_config, write_document, tmp_path):
    write_document("post", slug="post")
    site_config.site = site_config.site.model_copy(update={"base_url": "https://host.example/blog"})

    build_site(site_config, now=NOW)

    docs = tmp_path / "docs"
    index = (docs / "index.html").read_text(encoding="utf-8")
    page = (docs / "posts" / "post" / "index.html").read_text(encoding="utf-8")
    assert 'href="https://host.example/blog/posts/post/"' in index
    assert 'href="https://host.example/blog/"' in index
    assert '<link rel="canonical" href="https://host.example/blog/posts/post/">' in page
    assert _feed_links(docs / "feed.rss") == ["https://host.example/blog/posts/post/"]

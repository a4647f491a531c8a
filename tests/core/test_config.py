from pathlib import Path

import pytest

from scriptorium.config import CONFIG_FILENAME, SiteConfig
from scriptorium.exceptions import ConfigurationError


def test_defaults_resolve_against_site_root(tmp_path):
    config = SiteConfig.load(tmp_path)

    assert config.paths.site_root == tmp_path
    assert config.paths.abs_posts_dir == tmp_path / "posts"
    assert config.paths.abs_output_dir == tmp_path / "docs"
    assert config.paths.abs_style == tmp_path / "docs" / "style.css"
    assert config.paths.abs_template_dir is None
    assert config.build.extensions == [".md"]
    assert config.site.feed_url == "https://example.com/feed.rss"


def test_values_from_toml(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text(
        """
[site]
title = "Field Notes"
base_url = "https://notes.example.org/"
ttl = 60

[paths]
posts_dir = "content"
output_dir = "/srv/www"
math_style = ""

[build]
max_workers = 3
""",
        encoding="utf-8",
    )

    config = SiteConfig.load(tmp_path)

    assert config.site.title == "Field Notes"
    assert config.site.base_url == "https://notes.example.org"
    assert config.site.ttl == 60
    assert config.paths.abs_posts_dir == tmp_path / "content"
    assert config.paths.abs_output_dir == Path("/srv/www")
    assert config.paths.abs_math_style is None
    assert config.build.max_workers == 3


def test_environment_overrides_toml(tmp_path, monkeypatch):
    (tmp_path / CONFIG_FILENAME).write_text('[site]\ntitle = "From file"\nlanguage = "fr"\n', encoding="utf-8")
    monkeypatch.setenv("SCRIPTORIUM_SITE__TITLE", "From env")

    config = SiteConfig.load(tmp_path)

    assert config.site.title == "From env"
    assert config.site.language == "fr"


def test_broken_toml_is_a_configuration_error(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("[site\ntitle =", encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        SiteConfig.load(tmp_path)

    assert excinfo.value.path == tmp_path / CONFIG_FILENAME


def test_invalid_value_is_a_configuration_error(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("[build]\nmax_workers = 0\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        SiteConfig.load(tmp_path)


def test_absolute_url_joins_paths(tmp_path):
    site = SiteConfig.load(tmp_path).site

    assert site.absolute_url("/posts/x/") == "https://example.com/posts/x/"
    assert site.editor == "author@example.com (Anonymous)"

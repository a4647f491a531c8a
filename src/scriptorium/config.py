"""Site configuration.

Settings come from ``scriptorium.toml`` in the site root and from environment
variables named ``SCRIPTORIUM_<SECTION>__<KEY>`` (e.g.
``SCRIPTORIUM_SITE__BASE_URL``). Environment variables win over the file.
"""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scriptorium.exceptions import ConfigurationError

CONFIG_FILENAME = "scriptorium.toml"


def _deep_merge(destination: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge source into destination, with source values overwriting."""
    for key, value in source.items():
        if isinstance(value, Mapping) and key in destination and isinstance(destination[key], Mapping):
            destination[key] = _deep_merge(dict(destination[key]), dict(value))
        else:
            destination[key] = value
    return destination


class SiteSettings(BaseModel):
    """Site identity and RSS channel constants."""

    title: str = Field(default="My Notebook", description="Site and feed title")
    base_url: str = Field(default="https://example.com", description="Absolute URL of the site root")
    description: str = Field(default="Things from my life", description="Feed description")
    language: str = Field(default="en", description="Language tag for pages and feed")
    author: str = Field(default="Anonymous", description="Copyright holder and editor name")
    email: str = Field(default="author@example.com", description="Editorial contact address")
    generator: str = Field(default="scriptorium", description="Feed generator tag")
    ttl: int = Field(default=1440, ge=0, description="Feed refresh interval in minutes")
    feed_filename: str = Field(default="feed.rss", description="Feed file name under the output root")
    image_url: str | None = Field(default=None, description="Optional channel image")
    image_width: int = 144
    image_height: int = 144

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def feed_url(self) -> str:
        return f"{self.base_url}/{self.feed_filename}"

    @property
    def editor(self) -> str:
        """RSS style contact, ``address (name)``."""
        return f"{self.email} ({self.author})"

    def absolute_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


class PathsSettings(BaseModel):
    """Path configuration.

    All paths are relative to ``site_root`` unless absolute.
    """

    site_root: Path = Field(default_factory=Path.cwd, description="Root directory of the site")

    posts_dir: Path = Field(default=Path("posts"), description="Source documents")
    output_dir: Path = Field(default=Path("docs"), description="Generated site")
    assets_dir: Path = Field(default=Path("assets"), description="Static files copied as-is")
    style: Path | None = Field(default=Path("docs/style.css"), description="CSS inlined into pages")
    math_style: Path | None = Field(default=Path("docs/katex.css"), description="Math CSS for pages that ask for it")
    template_dir: Path | None = Field(default=None, description="Overrides the bundled templates")

    @field_validator("style", "math_style", "template_dir", mode="before")
    @classmethod
    def _blank_means_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def abs_posts_dir(self) -> Path:
        return self._resolve(self.posts_dir)

    @property
    def abs_output_dir(self) -> Path:
        return self._resolve(self.output_dir)

    @property
    def abs_assets_dir(self) -> Path:
        return self._resolve(self.assets_dir)

    @property
    def abs_style(self) -> Path | None:
        return self._resolve(self.style) if self.style else None

    @property
    def abs_math_style(self) -> Path | None:
        return self._resolve(self.math_style) if self.math_style else None

    @property
    def abs_template_dir(self) -> Path | None:
        return self._resolve(self.template_dir) if self.template_dir else None

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.site_root / path


class BuildSettings(BaseModel):
    max_workers: int | None = Field(default=None, ge=1, description="Render and copy workers (default: CPU count)")
    extensions: list[str] = Field(default_factory=lambda: [".md"], description="Document file extensions")


class SiteConfig(BaseSettings):
    """Root configuration for a Scriptorium site."""

    site: SiteSettings = Field(default_factory=SiteSettings)
    paths: PathsSettings = Field(default_factory=PathsSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="SCRIPTORIUM_",
        env_nested_delimiter="__",
    )

    @classmethod
    def load(cls, site_root: Path | None = None) -> "SiteConfig":
        """Load configuration from ``scriptorium.toml`` and the environment.

        Priority (highest to lowest):
        1. Environment variables (SCRIPTORIUM_SECTION__KEY)
        2. Config file (scriptorium.toml)
        3. Defaults

        Raises:
            ConfigurationError: If the file is unreadable or a value is invalid.

        """
        root_path = site_root if site_root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        file_settings: dict[str, Any] = {}
        if config_file.is_file():
            try:
                with config_file.open("rb") as f:
                    file_settings = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise ConfigurationError(str(exc), config_file) from exc

        try:
            env_settings = cls().model_dump(exclude_unset=True)
            merged_config = _deep_merge(file_settings, env_settings)
            merged_config.setdefault("paths", {})["site_root"] = root_path
            return cls.model_validate(merged_config)
        except ValidationError as exc:
            raise ConfigurationError(str(exc), config_file) from exc

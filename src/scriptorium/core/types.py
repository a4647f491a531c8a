"""Core data types for Scriptorium."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, AwareDatetime, BaseModel, ConfigDict, Field

# Pages live under a fixed directory-per-slug convention.
POSTS_DIRNAME = "posts"


class Metadata(BaseModel):
    """Validated front matter of a single document.

    Required keys are ``title``, ``date``, ``slug``, ``category`` (or the legacy
    ``section``) and ``summary``. Plain numbers in the text fields are read
    as their string form. Any other key is kept verbatim in :attr:`extras`
    and handed to the page template.
    """

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    title: str
    publish_timestamp: AwareDatetime = Field(
        validation_alias=AliasChoices("date", "publish_timestamp"),
    )
    slug: str = Field(min_length=1)
    category: str = Field(
        min_length=1,
        validation_alias=AliasChoices("category", "section"),
    )
    summary: str

    @property
    def extras(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class Document(BaseModel):
    """A source file whose front matter passed validation."""

    model_config = ConfigDict(frozen=True)

    source: Path
    metadata: Metadata
    body: str

    @property
    def url(self) -> str:
        """Site-relative permalink of the rendered page."""
        return f"/{POSTS_DIRNAME}/{self.metadata.slug}/"


# --- Per-document outcomes ---
@dataclass(frozen=True, slots=True)
class ParsedDocument:
    metadata: Metadata
    body: str


@dataclass(frozen=True, slots=True)
class NotADocument:
    """The text carries no front matter (or is marked as a draft)."""

    reason: str = "no front matter"


@dataclass(frozen=True, slots=True)
class ParseFailure:
    reason: str


ParseOutcome = ParsedDocument | NotADocument | ParseFailure


@dataclass(frozen=True, slots=True)
class LoadFailure:
    """A file that was skipped with a warning while loading."""

    source: Path
    reason: str

    def __str__(self) -> str:
        return f"skipping `{self.source}`: {self.reason}"


@dataclass(frozen=True, slots=True)
class RenderSuccess:
    document: Document
    path: Path


@dataclass(frozen=True, slots=True)
class RenderFailure:
    source: Path
    detail: str

    def __str__(self) -> str:
        return f"failed to render `{self.source}`: {self.detail}"


RenderOutcome = RenderSuccess | RenderFailure

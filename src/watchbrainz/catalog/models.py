"""
Typed MusicBrainz responses.

Responses are validated here, at the client boundary, so the sync engine
only ever sees complete objects: a release group without an ``id`` or a
browse page without a ``release-groups`` list fails validation and becomes
a retryable ``ParseError`` instead of a half-populated record.

Only the fields watchbrainz uses are declared; everything else MusicBrainz
sends is ignored.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from watchbrainz.core.dates import parse_catalog_date


class _CatalogModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class LifeSpan(_CatalogModel):
    """Artist life-span; either bound may be absent or partial."""

    begin: date | None = None
    end: date | None = None

    @field_validator("begin", "end", mode="before")
    @classmethod
    def parse_partial(cls, v: object) -> object:
        if v is None or v == "":
            return None
        if isinstance(v, str):
            return parse_catalog_date(v)
        return v


class CatalogArtistMatch(_CatalogModel):
    """One hit from ``GET /artist?query=...``."""

    id: str = Field(..., min_length=1)
    name: str
    score: int | None = None


class CatalogArtist(_CatalogModel):
    """``GET /artist/<mbid>``."""

    id: str = Field(..., min_length=1)
    name: str
    type: str | None = None
    country: str | None = None
    life_span: LifeSpan = Field(default_factory=LifeSpan, alias="life-span")

    @property
    def date_begin(self) -> date | None:
        return self.life_span.begin

    @property
    def date_end(self) -> date | None:
        return self.life_span.end


class CatalogReleaseGroup(_CatalogModel):
    """One entry of ``GET /release-group?artist=<mbid>``."""

    id: str = Field(..., min_length=1)
    title: str
    disambiguation: str = ""
    primary_type: str | None = Field(default=None, alias="primary-type")
    first_release_date: date = Field(default_factory=lambda: parse_catalog_date(None), alias="first-release-date")

    @field_validator("disambiguation", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("first_release_date", mode="before")
    @classmethod
    def parse_partial(cls, v: object) -> object:
        if v is None or isinstance(v, str):
            return parse_catalog_date(v)
        return v

    @property
    def display_title(self) -> str:
        """Title with the disambiguation comment appended in parentheses."""
        if self.disambiguation:
            return f"{self.title} ({self.disambiguation})"
        return self.title

    @property
    def kind(self) -> str:
        return self.primary_type or ""


class ArtistSearchResponse(_CatalogModel):
    artists: list[CatalogArtistMatch] = Field(default_factory=list)


class ReleaseGroupPage(_CatalogModel):
    """Browse page; the list is required, an absent list is a malformed page."""

    release_groups: list[CatalogReleaseGroup] = Field(..., alias="release-groups")
    count: int | None = Field(default=None, alias="release-group-count")

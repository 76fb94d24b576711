"""Core types and constants for the game lookup.

Types:
    Credential     -- Bearer token minted by the identity endpoint.
    Query          -- Raw input plus derived slug candidate and free-text query.
    CatalogRecord  -- One IGDB game, every field optional. Built once from the
                      decoded JSON via CatalogRecord.from_dict; nothing past that
                      boundary reads raw dicts except to_variables.
    DisplayRecord  -- Normalized, fully-defaulted output fields.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger

log = logger.bind(stage="models")

# Shared marker for any value the catalog did not provide
NOT_AVAILABLE = "N/A"

# Used by the template for empty genre lists and missing images
BLANK = " "

PLOT_PLACEHOLDER = "Plot not available."
PLOT_MAX_LENGTH = 300

# IGDB image URLs carry a size token in the path (t_thumb, t_cover_big, ...).
# Catalog responses always use the thumbnail size.
IMAGE_SOURCE_TOKEN = "thumb"
IMAGE_SIZES: dict[str, str] = {
    "cover": "cover_big",
    "logo": "logo_med",
}


@dataclass(frozen=True)
class Credential:
    token: str


@dataclass(frozen=True)
class Query:
    raw_input: str
    slug_candidate: str | None
    free_text: str


@dataclass(frozen=True)
class Company:
    name: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True)
class InvolvedCompany:
    developer: bool = False
    company: Company | None = None


@dataclass(frozen=True)
class CatalogRecord:
    """A game as returned by the IGDB games endpoint.

    List fields are None when the key was absent and an empty list when the
    catalog sent an empty array -- the normalizer treats those differently.
    """

    id: int | None = None
    name: str | None = None
    slug: str | None = None
    url: str | None = None
    first_release_date: int | None = None
    involved_companies: list[InvolvedCompany] | None = None
    cover_url: str | None = None
    genres: list[str] | None = None
    game_modes: list[str] | None = None
    platforms: list[str] | None = None
    storyline: str | None = None
    summary: str | None = None
    rating: float | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogRecord:
        """Build a record from one decoded catalog entry.

        Values of the wrong type are dropped (treated as absent) rather than
        raising, since the catalog omits and mistypes fields freely.
        """
        companies = None
        if isinstance(data.get("involved_companies"), list):
            companies = [
                _involved_company(entry)
                for entry in data["involved_companies"]
                if isinstance(entry, dict)
            ]

        cover = data.get("cover")
        cover_url = _opt_str(cover.get("url")) if isinstance(cover, dict) else None

        release = _opt_number(data.get("first_release_date"))
        rating = _opt_number(data.get("rating"))

        record_id = data.get("id")
        if isinstance(record_id, bool) or not isinstance(record_id, int):
            record_id = None

        return cls(
            id=record_id,
            name=_opt_str(data.get("name")),
            slug=_opt_str(data.get("slug")),
            url=_opt_str(data.get("url")),
            first_release_date=int(release) if release is not None else None,
            involved_companies=companies,
            cover_url=cover_url,
            genres=_names(data.get("genres")),
            game_modes=_names(data.get("game_modes")),
            platforms=_names(data.get("platforms")),
            storyline=_opt_str(data.get("storyline")),
            summary=_opt_str(data.get("summary")),
            rating=float(rating) if rating is not None else None,
            raw=dict(data),
        )


@dataclass(frozen=True)
class DisplayRecord:
    title_sanitized: str
    genres: str
    developer_name: str
    developer_logo: str
    thumbnail: str
    release_year: str
    plot: str
    rating: str
    platforms: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def to_variables(self, record: CatalogRecord) -> dict[str, Any]:
        """Template variables: the raw catalog fields plus the display fields."""
        return {
            **record.raw,
            "fileName": self.title_sanitized,
            "titleSanitized": self.title_sanitized,
            "genresFormatted": self.genres,
            "developerName": self.developer_name,
            "developerLogo": self.developer_logo,
            "thumbnail": self.thumbnail,
            "release": self.release_year,
            "storylineFormatted": self.plot,
            "rating": self.rating,
            "platformsFormatted": self.platforms,
        }


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _opt_number(value: Any) -> int | float | None:
    """Finite int or float, else None. Drops bools, NaN, inf and ints too big for a float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        log.debug(f"Dropping non-finite number: {value!r}")
        return None
    return value


def _names(entries: Any) -> list[str] | None:
    """Extract the `name` of each entry in an expanded IGDB list field."""
    if not isinstance(entries, list):
        return None
    names = []
    for entry in entries:
        name = entry.get("name") if isinstance(entry, dict) else None
        if isinstance(name, str):
            names.append(name)
        else:
            log.debug(f"Dropping list entry without a name: {entry!r}")
    return names


def _involved_company(entry: dict[str, Any]) -> InvolvedCompany:
    company = entry.get("company")
    if not isinstance(company, dict):
        return InvolvedCompany(developer=entry.get("developer") is True)
    logo = company.get("logo")
    logo_url = _opt_str(logo.get("url")) if isinstance(logo, dict) else None
    return InvolvedCompany(
        developer=entry.get("developer") is True,
        company=Company(name=_opt_str(company.get("name")), logo_url=logo_url),
    )

"""Query building and fuzzy ranking for IGDB lookups.

Turns what the user typed (a game name or an igdb.com URL) into a slug
candidate for an exact lookup plus the free-text fallback, builds the
apicalypse clauses for both, and scores free-text candidates against the
input with rapidfuzz.
"""

import re

from loguru import logger
from rapidfuzz import fuzz

from ..models import CatalogRecord, Query

log = logger.bind(stage="query")

SLUG_LIMIT = 1
SEARCH_LIMIT = 15

_GAME_URL_RE = re.compile(r"/games/([^/?#]+)", re.IGNORECASE)


def extract_slug(text: str) -> str | None:
    """Return the slug from a `.../games/<slug>` URL, or None."""
    match = _GAME_URL_RE.search(text)
    return match.group(1) if match else None


def slugify(text: str) -> str:
    """Approximate IGDB's slug for a typed name.

    Lowercase, trim, drop anything that is not an ASCII word character,
    whitespace or hyphen, then turn whitespace runs into single hyphens.
    """
    s = text.lower().strip()
    s = re.sub(r"[^\w\s-]", "", s, flags=re.ASCII)
    return re.sub(r"\s+", "-", s)


def build_query(raw_input: str) -> Query:
    """Derive the slug candidate and free-text query from raw input.

    A slug found in a URL is used verbatim. An input that slugifies to
    nothing (e.g. only punctuation) has no slug candidate.
    """
    slug = extract_slug(raw_input)
    if slug is None:
        slug = slugify(raw_input) or None
        source = "slugify"
    else:
        source = "url"

    query = Query(raw_input=raw_input, slug_candidate=slug, free_text=raw_input)
    log.debug(f"build_query: raw={raw_input!r} slug={slug!r} ({source})")
    return query


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def slug_filter(slug: str) -> str:
    """Exact-match filter clause for one slug."""
    return f"where slug = {_quote(slug)}; limit {SLUG_LIMIT};"


def text_search(text: str) -> str:
    """Full-text search clause."""
    return f"search {_quote(text)}; limit {SEARCH_LIMIT};"


def rank_candidates(
    records: list[CatalogRecord],
    query_text: str,
) -> list[tuple[CatalogRecord, float]]:
    """Score records by name similarity to the query, best first.

    Uses token_sort_ratio so word order ("Witcher 3, The") does not matter.
    Ties keep the catalog's own relevance order.
    """
    scored = []
    for record in records:
        score = fuzz.token_sort_ratio(query_text.lower(), (record.name or "").lower())
        scored.append((record, round(score, 1)))

    scored.sort(key=lambda pair: pair[1], reverse=True)

    if scored:
        best, best_score = scored[0]
        log.debug(f"Best match: {best.name!r} score={best_score:.0f}")

    return scored

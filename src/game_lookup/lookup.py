"""Lookup orchestration: input -> candidates -> selection -> display record.

Steps run strictly in order and any error aborts the rest:

1. Reject empty input (InputAbortedError)
2. Build the query (slug candidate + free text)
3. Exact slug lookup, limit 1
4. Free-text search, limit 15, only when step 3 found nothing
5. Let the caller choose a candidate (InputAbortedError if none chosen)
6. Normalize the chosen record
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from .api.query import build_query, rank_candidates
from .errors import InputAbortedError, NoResultsError
from .models import IMAGE_SOURCE_TOKEN, CatalogRecord, DisplayRecord, Query
from .normalize import normalize

if TYPE_CHECKING:
    from .api.igdb import MetadataClient

log = logger.bind(stage="lookup")

Chooser = Callable[[list[CatalogRecord]], CatalogRecord | None]


def find_candidates(query: Query, client: MetadataClient) -> list[CatalogRecord]:
    """Exact slug lookup first, then free-text search.

    Raises NoResultsError when both come back empty.
    """
    if query.slug_candidate:
        records = client.search_slug(query.slug_candidate)
        if records:
            log.info(f"Exact slug match for {query.slug_candidate!r}")
            return records
        log.debug(f"No game with slug {query.slug_candidate!r}, falling back to search")

    records = client.search_text(query.free_text)
    if not records:
        raise NoResultsError(query.free_text)

    log.info(f"Search {query.free_text!r} returned {len(records)} candidates")
    return records


def pick_best(
    records: list[CatalogRecord],
    query_text: str,
    threshold: int,
) -> CatalogRecord | None:
    """Top-ranked record if its name score reaches threshold, else None."""
    ranked = rank_candidates(records, query_text)
    if not ranked:
        return None
    best, score = ranked[0]
    if score >= threshold:
        log.info(f"Auto-selected {best.name!r} (score={score:.0f})")
        return best
    log.debug(f"Best candidate {best.name!r} scored {score:.0f} < {threshold}")
    return None


def lookup(
    raw_input: str | None,
    client: MetadataClient,
    choose: Chooser,
    image_sizes: dict[str, str] | None = None,
    source_token: str = IMAGE_SOURCE_TOKEN,
) -> tuple[CatalogRecord, DisplayRecord]:
    """Resolve raw input to the chosen record and its display fields."""
    if not raw_input or not raw_input.strip():
        raise InputAbortedError("No input entered.")

    query = build_query(raw_input)
    candidates = find_candidates(query, client)

    selected = choose(candidates)
    if selected is None:
        raise InputAbortedError("No choice selected.")

    log.info(f"Selected {selected.name!r} (id={selected.id})")
    return selected, normalize(selected, image_sizes, source_token)

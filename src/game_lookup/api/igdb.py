"""IGDB catalog client.

Every query is a POST of an apicalypse body (field selection + clause) to
the games endpoint. A failed attempt -- transport error, unparsable body,
or anything other than a JSON array -- triggers exactly one credential
refresh and one retry. A second failure raises ApiError.

API reference: https://api-docs.igdb.com/#game
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from loguru import logger

from ..errors import ApiError
from ..models import CatalogRecord, Credential
from .query import slug_filter, text_search

if TYPE_CHECKING:
    from ..session import Session

log = logger.bind(stage="igdb")

API_URL = "https://api.igdb.com/v4/games"

FIELDS = (
    "fields name, slug, first_release_date, involved_companies.developer, "
    "involved_companies.company.name, involved_companies.company.logo.url, "
    "url, cover.url, genres.name, game_modes.name, storyline, summary, "
    "rating, platforms.name;"
)


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of one POST: records on success, an error message otherwise."""

    records: list[CatalogRecord] | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.records is not None


class MetadataClient:
    def __init__(
        self,
        session: Session,
        client_id: str,
        api_url: str = API_URL,
        timeout: float = 30.0,
    ) -> None:
        self.session = session
        self.client_id = client_id
        self.api_url = api_url
        self.timeout = timeout

    def search(self, filter_expression: str) -> list[CatalogRecord]:
        """Run a filter clause such as ``where slug = "x"; limit 1;``."""
        return self.execute_query(filter_expression)

    def search_slug(self, slug: str) -> list[CatalogRecord]:
        return self.search(slug_filter(slug))

    def search_text(self, query: str) -> list[CatalogRecord]:
        """Full-text search, up to 15 records in catalog relevance order."""
        return self.execute_query(text_search(query))

    def execute_query(self, clause: str) -> list[CatalogRecord]:
        """Run one query with at most one refresh-and-retry.

        Attempt with the current credential; on failure refresh once and
        retry with the new credential; on a second failure raise ApiError.
        AuthError from the refresh propagates unchanged.
        """
        body = f"{FIELDS} {clause}"

        first = self._attempt(body, self.session.credential)
        if first.ok:
            return first.records

        log.warning(f"IGDB request failed ({first.error}), refreshing token and retrying")
        credential = self.session.refresh()

        retry = self._attempt(body, credential)
        if retry.ok:
            return retry.records

        log.error(f"IGDB request failed after retry: {retry.error}")
        raise ApiError("API request failed after retry.")

    def _attempt(self, body: str, credential: Credential) -> AttemptResult:
        log.debug(f"IGDB query: {body!r}")
        try:
            resp = httpx.post(
                self.api_url,
                content=body,
                headers={
                    "Client-ID": self.client_id,
                    "Authorization": f"Bearer {credential.token}",
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            return AttemptResult(error=str(e))
        except ValueError as e:
            return AttemptResult(error=f"invalid JSON: {e}")

        if not isinstance(data, list):
            return AttemptResult(error=f"expected a JSON array, got {type(data).__name__}")

        records = [CatalogRecord.from_dict(item) for item in data if isinstance(item, dict)]
        log.debug(f"IGDB results: {len(records)} games")
        return AttemptResult(records=records)

"""
Wikidata entity search client.

Wraps the `wbsearchentities` action, which returns items whose label or
alias matches free text, ordered by relevance.
"""

import logging
from typing import Optional, List

import httpx
from pydantic import BaseModel, Field

from person_lookup.config import Settings
from person_lookup.models import SearchHit

logger = logging.getLogger(__name__)


class SearchEntity(BaseModel):
    id: str
    label: str = ""
    description: Optional[str] = None


class SearchResponse(BaseModel):
    search: List[SearchEntity] = Field(default_factory=list)


class WikidataSearchClient:
    """Client for the Wikidata entity search API."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings()
        self.client = httpx.AsyncClient(
            timeout=self.settings.timeout,
            transport=transport,
            headers={"User-Agent": self.settings.user_agent},
        )

    async def search(self, text: str, limit: Optional[int] = None) -> List[SearchHit]:
        """
        Search items by free text.
        Returns [] on any failure.
        """
        logger.info(f"Entity search: {text!r}")
        params = {
            "action": "wbsearchentities",
            "search": text,
            "language": self.settings.language,
            "uselang": self.settings.language,
            "type": "item",
            "format": "json",
            "limit": limit or self.settings.search_limit,
        }
        try:
            resp = await self.client.get(self.settings.search_endpoint, params=params)
            resp.raise_for_status()
            payload = SearchResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Entity search failed: {e}")
            return []

        return [self._parse_hit(item) for item in payload.search]

    def _parse_hit(self, item: SearchEntity) -> SearchHit:
        return SearchHit(
            id=item.id,
            label=item.label or item.id,
            description=item.description or None,
        )

    async def close(self):
        await self.client.aclose()

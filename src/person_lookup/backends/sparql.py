"""
Wikidata SPARQL client.

Runs a query against the public endpoint and flattens the
`results.bindings` table into plain dicts of variable -> value.
Any transport or parse failure yields an empty result instead of raising.
"""

import logging
from typing import Optional, List, Dict

import httpx
from pydantic import BaseModel, Field

from person_lookup.config import Settings

logger = logging.getLogger(__name__)

Row = Dict[str, str]


class BindingValue(BaseModel):
    value: str
    type: Optional[str] = None


class SparqlResults(BaseModel):
    bindings: List[Dict[str, BindingValue]] = Field(default_factory=list)


class SparqlResponse(BaseModel):
    results: SparqlResults


def entity_id_from_uri(uri: str) -> str:
    """http://www.wikidata.org/entity/Q42 -> Q42"""
    return uri.rstrip("/").rsplit("/", 1)[-1]


class SparqlClient:
    """Client for the Wikidata query service."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings()
        self.endpoint = self.settings.sparql_endpoint
        self.client = httpx.AsyncClient(
            timeout=self.settings.timeout,
            transport=transport,
            headers={
                "Accept": "application/sparql-results+json",
                "User-Agent": self.settings.user_agent,
            },
        )

    async def query(self, sparql: str) -> List[Row]:
        """Execute a query. Returns [] on any failure."""
        params = {"query": sparql, "format": "json"}
        try:
            resp = await self.client.get(self.endpoint, params=params)
            resp.raise_for_status()
            payload = SparqlResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"SPARQL query failed: {e}")
            return []

        rows = [
            {name: binding.value for name, binding in row.items()}
            for row in payload.results.bindings
        ]
        logger.debug(f"SPARQL query returned {len(rows)} rows")
        return rows

    async def close(self):
        await self.client.aclose()

"""
Pytest configuration and shared fixtures.
"""

import asyncio
from typing import Dict, List
from unittest.mock import AsyncMock

import pytest

from person_lookup.agent import PersonSearchAgent
from person_lookup.config import Settings
from person_lookup.models import SearchHit

ENTITY = "http://www.wikidata.org/entity/"

# Substrings that identify each kind of query
ENSEMBLE = "wdt:P527"
NARRATIVE = "wdt:P161"
VALIDATE = "VALUES ?person"
LABEL = "?personLabel"
DETAIL = "?ageAtDeath"


def uri(entity_id: str) -> str:
    return ENTITY + entity_id


def member_row(group_id: str, member_id: str, label: str, group_label: str = "") -> Dict[str, str]:
    row = {"group": uri(group_id), "member": uri(member_id), "memberLabel": label}
    if group_label:
        row["groupLabel"] = group_label
    return row


def person_rows(*entity_ids: str) -> List[Dict[str, str]]:
    return [{"person": uri(entity_id)} for entity_id in entity_ids]


class FakeSparqlClient:
    """Answers queries from canned rows, matched by substring."""

    def __init__(self, settings=None):
        self.settings = settings or Settings()
        self.routes = []
        self.queries = []
        self.gates: Dict[str, asyncio.Event] = {}

    def add(self, *needles: str, rows: List[Dict[str, str]]):
        self.routes.append((needles, rows))

    def gate(self, needle: str) -> asyncio.Event:
        """Hold every query containing needle until the event is set."""
        event = asyncio.Event()
        self.gates[needle] = event
        return event

    def count(self, needle: str) -> int:
        return sum(needle in q for q in self.queries)

    async def query(self, sparql: str):
        self.queries.append(sparql)
        for needle, event in self.gates.items():
            if needle in sparql:
                await event.wait()
        for needles, rows in self.routes:
            if all(n in sparql for n in needles):
                return [dict(r) for r in rows]
        return []

    async def close(self):
        pass


@pytest.fixture
def sparql() -> FakeSparqlClient:
    return FakeSparqlClient()


@pytest.fixture
def search_client():
    client = AsyncMock()
    client.search = AsyncMock(return_value=[])
    client.close = AsyncMock()
    return client


@pytest.fixture
def agent(sparql, search_client) -> PersonSearchAgent:
    return PersonSearchAgent(sparql_client=sparql, search_client=search_client)


@pytest.fixture
def band_hits() -> List[SearchHit]:
    return [
        SearchHit(id="Q2", label="Band A"),
        SearchHit(id="Q3", label="Album X", description="1973 album by Band B"),
    ]

"""
Person Search Agent

Runs the pipeline: search -> (validate | expand groups) -> reconcile -> commit (aka orchestrator)
"""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from person_lookup.backends.search import WikidataSearchClient
from person_lookup.backends.sparql import SparqlClient
from person_lookup.config import Settings
from person_lookup.details import fetch_details
from person_lookup.expand import expand_groups
from person_lookup.guard import RunSequencer
from person_lookup.models import AggregationRun, DisplayItem, PersonDetails, SearchHit
from person_lookup.reconcile import build_group_rank, is_entity_id, reconcile
from person_lookup.validate import find_people

logger = logging.getLogger(__name__)


class PersonSearchAgent:
    """Wires together all the pipeline stages."""

    def __init__(
        self,
        sparql_client: Optional[SparqlClient] = None,
        search_client: Optional[WikidataSearchClient] = None,
        settings: Optional[Settings] = None,
        on_commit: Optional[Callable[[List[DisplayItem]], None]] = None,
    ):
        self.settings = settings or Settings()
        self.sparql_client = sparql_client or SparqlClient(self.settings)
        self.search_client = search_client or WikidataSearchClient(self.settings)
        self.on_commit = on_commit
        self.sequencer = RunSequencer()

        # Latest committed candidate list
        self.display: List[DisplayItem] = []

        # Configure logging - suppress noisy httpx logs
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    async def search(self, text: str) -> Optional[List[DisplayItem]]:
        """
        Search free text and commit the candidate list.
        Returns None if a newer search started before this one finished.
        """
        run = self.sequencer.begin()
        text = text.strip()
        if len(text) < self.settings.min_query_length:
            logger.debug(f"Query {text!r} too short, clearing candidates")
        else:
            run.input_batch = await self.search_client.search(text)
        return await self._run(run)

    async def aggregate(self, hits: Sequence[SearchHit]) -> Optional[List[DisplayItem]]:
        """Run the pipeline on an already fetched batch of search hits."""
        return await self._run(self.sequencer.begin(list(hits)))

    async def details(self, entity_id: str) -> Optional[PersonDetails]:
        return await fetch_details(entity_id, self.sparql_client)

    async def _run(self, run: AggregationRun) -> Optional[List[DisplayItem]]:
        if not self.sequencer.is_current(run):
            return self._discard(run)

        hits = [hit for hit in run.input_batch if is_entity_id(hit.id)]
        if len(hits) < len(run.input_batch):
            logger.debug(f"Dropped {len(run.input_batch) - len(hits)} hits with malformed ids")

        people, members = set(), []
        if hits:
            # --- Validate and expand concurrently ---
            people, members = await asyncio.gather(
                find_people([hit.id for hit in hits], self.sparql_client),
                expand_groups(hits, self.sparql_client),
            )

        if not self.sequencer.is_current(run):
            return self._discard(run)

        # --- Reconcile ---
        direct = [hit for hit in hits if hit.id in people]
        items = reconcile(direct, members, build_group_rank(hits))
        self._commit(items)
        return items

    def _discard(self, run: AggregationRun) -> None:
        logger.info(f"Discarding stale run #{run.sequence_number} (latest is #{self.sequencer.latest})")
        return None

    def _commit(self, items: List[DisplayItem]):
        self.display = items
        if self.on_commit:
            self.on_commit(items)

    async def close(self):
        await self.sparql_client.close()
        await self.search_client.close()

"""
End-to-end tests for the search agent: concurrency, staleness and the
search -> reconcile flow, with all network calls faked.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import ENSEMBLE, NARRATIVE, VALIDATE, member_row, person_rows
from person_lookup.guard import RunSequencer
from person_lookup.models import DisplayItem, SearchHit


class TestRunSequencer:

    def test_latest_run_is_current(self):
        seq = RunSequencer()
        first = seq.begin()
        assert seq.is_current(first)
        second = seq.begin([SearchHit("Q1", "a")])
        assert not seq.is_current(first)
        assert seq.is_current(second)
        assert second.sequence_number == first.sequence_number + 1
        assert seq.latest == 2

    def test_batch_is_copied(self):
        batch = [SearchHit("Q1", "a")]
        run = RunSequencer().begin(batch)
        batch.append(SearchHit("Q2", "b"))
        assert len(run.input_batch) == 1


class TestAggregate:

    @pytest.mark.asyncio
    async def test_band_members(self, agent, sparql):
        sparql.add(ENSEMBLE, rows=[
            member_row("Q2", "Q10", "Ann"),
            member_row("Q2", "Q11", "Bob"),
        ])
        items = await agent.aggregate([SearchHit(id="Q2", label="Band A")])

        assert items == [
            DisplayItem(id="Q10", label="Ann", group_label="Band A"),
            DisplayItem(id="Q11", label="Bob", group_label="Band A"),
        ]
        assert agent.display == items

    @pytest.mark.asyncio
    async def test_direct_match_overlaps_member(self, agent, sparql):
        hits = [SearchHit(id="Q2", label="Band A"), SearchHit(id="Q10", label="Ann Solo", description="singer")]
        sparql.add(VALIDATE, rows=person_rows("Q10"))
        sparql.add(ENSEMBLE, rows=[
            member_row("Q2", "Q10", "Ann"),
            member_row("Q2", "Q11", "Bob"),
        ])
        items = await agent.aggregate(hits)

        assert [i.text for i in items] == ["Ann Solo - singer", "Bob (Band A)"]

    @pytest.mark.asyncio
    async def test_narrative_fallback(self, agent, sparql):
        hits = [
            SearchHit(id="Q5", label="Some Show", description="television series"),
            SearchHit(id="Q6", label="Lead Actor", description="actor"),
        ]
        sparql.add(VALIDATE, rows=person_rows("Q6"))
        sparql.add(NARRATIVE, rows=[
            member_row("Q5", "Q6", "Lead Actor"),
            member_row("Q5", "Q30", "Q30"),
            member_row("Q5", "Q31", "Sidekick"),
        ])
        items = await agent.aggregate(hits)

        assert sparql.count(ENSEMBLE) == 1
        assert [(i.id, i.group_label) for i in items] == [("Q6", None), ("Q31", "Some Show")]

    @pytest.mark.asyncio
    async def test_validator_and_expander_run_concurrently(self, agent, sparql):
        # Validation is held until the ensemble query has been issued
        release = sparql.gate(VALIDATE)

        async def open_gate_after_ensemble():
            while sparql.count(ENSEMBLE) == 0:
                await asyncio.sleep(0)
            release.set()

        opener = asyncio.create_task(open_gate_after_ensemble())
        items = await asyncio.wait_for(agent.aggregate([SearchHit("Q2", "Band A")]), timeout=1)
        await opener
        assert items == []

    @pytest.mark.asyncio
    async def test_malformed_ids_never_reach_queries(self, agent, sparql):
        items = await agent.aggregate([SearchHit(id="Q1 } ?x ?y {", label="bad")])
        assert items == []
        assert sparql.queries == []

    @pytest.mark.asyncio
    async def test_everything_failing_commits_empty(self, agent, sparql, band_hits):
        assert await agent.aggregate(band_hits) == []
        assert agent.display == []


class TestStaleness:

    @pytest.mark.asyncio
    async def test_older_run_finishing_last_is_discarded(self, agent, sparql):
        commits = []
        agent.on_commit = commits.append
        slow = sparql.gate("wd:Q100 ")
        sparql.add(ENSEMBLE, "wd:Q100 ", rows=[member_row("Q100", "Q101", "Old")])
        sparql.add(ENSEMBLE, "wd:Q200 ", rows=[member_row("Q200", "Q201", "New")])

        first = asyncio.create_task(agent.aggregate([SearchHit("Q100", "Jo")]))
        await asyncio.sleep(0)
        second = await agent.aggregate([SearchHit("Q200", "John")])
        slow.set()
        stale = await first

        assert stale is None
        assert [i.id for i in second] == ["Q201"]
        assert [i.id for i in agent.display] == ["Q201"]
        assert commits == [second]

    @pytest.mark.asyncio
    async def test_older_run_finishing_first_is_overwritten(self, agent, sparql):
        sparql.add(ENSEMBLE, "wd:Q100 ", rows=[member_row("Q100", "Q101", "Old")])
        sparql.add(ENSEMBLE, "wd:Q200 ", rows=[member_row("Q200", "Q201", "New")])

        await agent.aggregate([SearchHit("Q100", "Jo")])
        await agent.aggregate([SearchHit("Q200", "John")])
        assert [i.id for i in agent.display] == ["Q201"]

    @pytest.mark.asyncio
    async def test_slow_entity_search_is_superseded(self, agent, search_client, sparql):
        release = asyncio.Event()

        async def search(text):
            if text == "Joh":
                await release.wait()
                return [SearchHit("Q100", "Old")]
            return [SearchHit("Q200", "New")]

        search_client.search = AsyncMock(side_effect=search)
        sparql.add(VALIDATE, rows=person_rows("Q100", "Q200"))

        first = asyncio.create_task(agent.search("Joh"))
        await asyncio.sleep(0)
        second = await agent.search("John")
        release.set()

        assert await first is None
        assert [i.id for i in second] == ["Q200"]
        assert [i.id for i in agent.display] == ["Q200"]


class TestSearch:

    @pytest.mark.asyncio
    async def test_short_query_clears_without_network(self, agent, search_client, sparql):
        agent.display = [DisplayItem("Q1", "stale")]
        assert await agent.search(" Jo ") == []
        assert agent.display == []
        search_client.search.assert_not_called()
        assert sparql.queries == []

    @pytest.mark.asyncio
    async def test_search_feeds_pipeline(self, agent, search_client, sparql):
        search_client.search.return_value = [
            SearchHit("Q42", "Douglas Adams", "English writer (1952-2001)"),
        ]
        sparql.add(VALIDATE, rows=person_rows("Q42"))

        items = await agent.search("Douglas")

        search_client.search.assert_awaited_once_with("Douglas")
        assert [i.text for i in items] == ["Douglas Adams - English writer (1952)"]

    @pytest.mark.asyncio
    async def test_close_closes_clients(self, agent, search_client):
        await agent.close()
        search_client.close.assert_awaited_once()

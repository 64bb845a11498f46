"""
Group expansion: turn bands, teams, films and shows into their members.

Two tiers, queried in order:
1. Ensemble - band/team membership, skipping hits that look like music
   releases (an album named after its band would otherwise list the band's
   members under the album's name)
2. Narrative - cast membership over every hit, only when the ensemble tier
   found nobody for the whole batch. A band search should never pick up the
   cast of some film that happened to match too.
"""

import logging
import re
from typing import Dict, List, Sequence

from person_lookup.backends.sparql import Row, SparqlClient, entity_id_from_uri
from person_lookup.models import MemberRecord, SearchHit
from person_lookup.queries import Relation, membership_query
from person_lookup.reconcile import build_group_rank, dedupe_members

logger = logging.getLogger(__name__)

RELEASE_PATTERN = re.compile(r"\b(album|song|single|EP|compilation)\b", re.IGNORECASE)


def is_release(hit: SearchHit) -> bool:
    return bool(hit.description and RELEASE_PATTERN.search(hit.description))


def rows_to_members(rows: List[Row], group_labels: Dict[str, str]) -> List[MemberRecord]:
    """Convert membership rows, labelling each member with the group the search found."""
    members = []
    for row in rows:
        if "member" not in row or "group" not in row:
            continue
        member_id = entity_id_from_uri(row["member"])
        group_id = entity_id_from_uri(row["group"])
        members.append(MemberRecord(
            id=member_id,
            label=row.get("memberLabel") or member_id,
            group_label=group_labels.get(group_id) or row.get("groupLabel") or group_id,
            group_id=group_id,
        ))
    return members


async def query_tier(
    groups: Sequence[SearchHit],
    relation: Relation,
    client: SparqlClient,
    group_rank: Dict[str, int],
) -> List[MemberRecord]:
    """Run one batched membership query and dedupe its members by group rank."""
    if not groups:
        return []
    group_ids = list(dict.fromkeys(hit.id for hit in groups))
    rows = await client.query(membership_query(group_ids, relation, client.settings.language))

    group_labels = {}
    for hit in groups:
        group_labels.setdefault(hit.id, hit.label)
    members = dedupe_members(rows_to_members(rows, group_labels), group_rank)
    logger.info(f"{relation.name.lower()} tier: {len(members)} members from {len(group_ids)} groups")
    return members


async def expand_groups(hits: Sequence[SearchHit], client: SparqlClient) -> List[MemberRecord]:
    """Expand the search hits into member records. Never raises."""
    group_rank = build_group_rank(hits)

    ensemble_groups = [hit for hit in hits if not is_release(hit)]
    members = await query_tier(ensemble_groups, Relation.ENSEMBLE, client, group_rank)
    if members:
        return members

    return await query_tier(hits, Relation.NARRATIVE, client, group_rank)

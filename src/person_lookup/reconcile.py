"""
Result reconciliation: merge direct matches and group members into one list.

1. Dedupe direct matches (first occurrence wins)
2. Drop members that are already direct matches
3. Drop members whose label is a bare entity id (no English label upstream)
4. Dedupe members, keeping the one found via the best-ranked group
5. Direct matches first, then members
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from person_lookup.models import DisplayItem, MemberRecord, SearchHit

logger = logging.getLogger(__name__)

ENTITY_ID_PATTERN = re.compile(r"Q\d+")

# "British singer (1947-2016)" -> "British singer (1947)"
DEATH_YEAR_PATTERN = re.compile(r"[-–]\d{4}")


def is_entity_id(value: str) -> bool:
    return bool(ENTITY_ID_PATTERN.fullmatch(value))


def build_group_rank(hits: Iterable[SearchHit]) -> Dict[str, int]:
    """Map each hit id to its position in the search results (0 = best)."""
    rank: Dict[str, int] = {}
    for i, hit in enumerate(hits):
        rank.setdefault(hit.id, i)
    return rank


def dedupe_members(members: Iterable[MemberRecord], group_rank: Dict[str, int]) -> List[MemberRecord]:
    """
    Keep one record per member id.

    When a member was found through several groups, the record whose group
    ranks best wins; it takes the slot where that member was first seen.
    Groups missing from group_rank rank last.
    """
    worst = len(group_rank)
    best: Dict[str, MemberRecord] = {}
    for record in members:
        current = best.get(record.id)
        if current is None or group_rank.get(record.group_id, worst) < group_rank.get(current.group_id, worst):
            best[record.id] = record
    return list(best.values())


def clean_description(description: Optional[str]) -> Optional[str]:
    """Strip the death year so the dropdown doesn't give the answer away."""
    if not description:
        return None
    return DEATH_YEAR_PATTERN.sub("", description, count=1)


def reconcile(
    direct_hits: Iterable[SearchHit],
    members: Iterable[MemberRecord],
    group_rank: Dict[str, int],
) -> List[DisplayItem]:
    """Produce the final ordered candidate list. Never fails."""
    direct: Dict[str, SearchHit] = {}
    for hit in direct_hits:
        direct.setdefault(hit.id, hit)

    members = list(members)
    remaining = [
        m for m in members
        if m.id not in direct and not is_entity_id(m.label)
    ]
    remaining = dedupe_members(remaining, group_rank)

    items = [
        DisplayItem(id=hit.id, label=hit.label, description=clean_description(hit.description))
        for hit in direct.values()
    ]
    items.extend(
        DisplayItem(id=m.id, label=m.label, group_label=m.group_label)
        for m in remaining
    )

    logger.info(
        f"Reconciled {len(direct)} direct matches and {len(members)} member records "
        f"into {len(items)} candidates"
    )
    return items

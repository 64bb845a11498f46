"""
Detail lookup for a single selected entity.

Fetches the English label first, then dates, gender and article link.
"""

import logging
import re
from typing import Optional

from person_lookup.backends.sparql import SparqlClient
from person_lookup.models import PersonDetails
from person_lookup.queries import detail_query, label_query

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^([+-]?\d+)-(\d{2})-(\d{2})")


def format_date(value: Optional[str], missing: str) -> str:
    """1952-03-11T00:00:00Z -> 11/03/1952"""
    if not value:
        return missing
    m = DATE_PATTERN.match(value.strip())
    if not m:
        return missing
    year, month, day = m.groups()
    return f"{day}/{month}/{int(year)}"


async def fetch_label(entity_id: str, client: SparqlClient) -> Optional[str]:
    rows = await client.query(label_query(entity_id, client.settings.language))
    if rows and rows[0].get("personLabel"):
        return rows[0]["personLabel"]
    return None


async def fetch_details(entity_id: str, client: SparqlClient) -> Optional[PersonDetails]:
    """
    Resolve one entity. Returns None when the detail query finds nothing
    (not a human, or the query failed).
    """
    label = await fetch_label(entity_id, client)
    if label is None:
        logger.info(f"No English label for {entity_id}")
        label = entity_id

    rows = await client.query(detail_query(entity_id, client.settings.language))
    if not rows:
        logger.info(f"No details found for {entity_id}")
        return None

    info = rows[0]
    gender = info.get("genderLabel")
    # A death date that is present but not a plain date ("unknown value") still means dead
    is_deceased = "dateOfDeath" in info
    return PersonDetails(
        entity_id=entity_id,
        label=label,
        date_of_birth=format_date(info.get("dateOfBirth"), "Unknown"),
        date_of_death=format_date(info.get("dateOfDeath"), "Unknown") if is_deceased else "N/A",
        gender=gender.lower() if gender else "unknown",
        age_at_death=info.get("ageAtDeath") or "N/A",
        is_deceased=is_deceased,
        article_url=info.get("article"),
    )

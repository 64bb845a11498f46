"""
Person validation: keep only candidates that have a date of birth.
"""

import logging
from typing import Iterable, Set

from person_lookup.backends.sparql import SparqlClient, entity_id_from_uri
from person_lookup.queries import birth_date_query

logger = logging.getLogger(__name__)


async def find_people(entity_ids: Iterable[str], client: SparqlClient) -> Set[str]:
    """
    Return the subset of entity_ids that denote a person.
    An id missing from the response is simply not a person.
    """
    ids = list(dict.fromkeys(entity_ids))
    if not ids:
        return set()

    rows = await client.query(birth_date_query(ids))
    found = {entity_id_from_uri(row["person"]) for row in rows if "person" in row}
    people = found & set(ids)
    logger.info(f"Validated {len(people)}/{len(ids)} candidates as people")
    return people

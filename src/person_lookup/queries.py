"""
SPARQL query templates.

Pure string production. Identifiers are passed through as-is; callers are
responsible for only handing over well-formed entity ids.
"""

from enum import Enum
from typing import Iterable

MEMBER_LIMIT = 50


class Relation(str, Enum):
    """Membership relations used to expand a group into people."""
    ENSEMBLE = "P527"  # has part(s): band or team members
    NARRATIVE = "P161"  # cast member: film or show


def _values(entity_ids: Iterable[str]) -> str:
    return " ".join(f"wd:{entity_id}" for entity_id in entity_ids)


def label_query(entity_id: str, language: str = "en") -> str:
    return f"""
    SELECT ?personLabel
    WHERE {{
      wd:{entity_id} rdfs:label ?personLabel.
      FILTER(LANG(?personLabel) = "{language}")
    }}"""


def detail_query(entity_id: str, language: str = "en") -> str:
    """Birth/death dates, gender, article link and age at death for a human."""
    return f"""
    SELECT ?dateOfBirth ?dateOfDeath ?genderLabel ?article
           (YEAR(?dateOfDeath) - YEAR(?dateOfBirth) AS ?ageAtDeath)
    WHERE {{
      wd:{entity_id} wdt:P31 wd:Q5 .
      wd:{entity_id} wdt:P569 ?dateOfBirth .
      OPTIONAL {{ wd:{entity_id} wdt:P570 ?dateOfDeath. }}
      OPTIONAL {{ wd:{entity_id} wdt:P21 ?gender. }}
      OPTIONAL {{
        ?article schema:about wd:{entity_id} ;
                 schema:isPartOf <https://{language}.wikipedia.org/> .
      }}
      SERVICE wikibase:label {{ bd:serviceParam wikibase:language "{language}". ?gender rdfs:label ?genderLabel }}
    }}
    LIMIT 1"""


def birth_date_query(entity_ids: Iterable[str]) -> str:
    """Which of the given entities have a date of birth."""
    return f"""
    SELECT DISTINCT ?person
    WHERE {{
      VALUES ?person {{ {_values(entity_ids)} }}
      ?person wdt:P569 ?dateOfBirth .
    }}"""


def membership_query(group_ids: Iterable[str], relation: Relation, language: str = "en") -> str:
    """Members (with a date of birth) of any of the given groups."""
    return f"""
    SELECT DISTINCT ?group ?groupLabel ?member ?memberLabel
    WHERE {{
      VALUES ?group {{ {_values(group_ids)} }}
      ?group wdt:{relation.value} ?member .
      ?member wdt:P569 ?dateOfBirth .
      SERVICE wikibase:label {{ bd:serviceParam wikibase:language "{language}". }}
    }}
    LIMIT {MEMBER_LIMIT}"""

"""
Runtime settings read from the environment.

Every value has a default, so the pipeline runs without any configuration.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "person-lookup/0.1 (https://www.wikidata.org/wiki/Wikidata:Data_access)"


@dataclass(frozen=True)
class Settings:
    sparql_endpoint: str = "https://query.wikidata.org/sparql"
    search_endpoint: str = "https://www.wikidata.org/w/api.php"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    language: str = "en"
    search_limit: int = 10
    min_query_length: int = 3


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def get_settings() -> Settings:
    defaults = Settings()
    return Settings(
        sparql_endpoint=os.environ.get("PERSON_LOOKUP_SPARQL_ENDPOINT", defaults.sparql_endpoint),
        search_endpoint=os.environ.get("PERSON_LOOKUP_SEARCH_ENDPOINT", defaults.search_endpoint),
        user_agent=os.environ.get("PERSON_LOOKUP_USER_AGENT", defaults.user_agent),
        timeout=_env_number("PERSON_LOOKUP_TIMEOUT", defaults.timeout, float),
        language=os.environ.get("PERSON_LOOKUP_LANGUAGE", defaults.language),
        search_limit=_env_number("PERSON_LOOKUP_SEARCH_LIMIT", defaults.search_limit, int),
        min_query_length=_env_number("PERSON_LOOKUP_MIN_QUERY_LENGTH", defaults.min_query_length, int),
    )

"""
Data models for the pipeline.

The data structures passed between the search, expansion and reconciliation stages.
"""

from dataclasses import dataclass, field
from typing import Optional, List


@dataclass(frozen=True)
class SearchHit:
    """One entity returned by the upstream search, in relevance order."""
    id: str  # e.g. "Q42"
    label: str
    description: Optional[str] = None


@dataclass(frozen=True)
class MemberRecord:
    """A person found by expanding a group (band, team, film, show)."""
    id: str
    label: str
    group_label: str
    group_id: str  # back-reference to the SearchHit that produced it


@dataclass(frozen=True)
class DisplayItem:
    """A single entry of the final candidate list."""
    id: str
    label: str
    description: Optional[str] = None  # direct matches only
    group_label: Optional[str] = None  # group members only

    @property
    def text(self) -> str:
        """Text shown for the option in a dropdown."""
        if self.group_label:
            return f"{self.label} ({self.group_label})"
        if self.description:
            return f"{self.label} - {self.description}"
        return self.label

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "group_label": self.group_label,
            "text": self.text,
        }


@dataclass
class AggregationRun:
    """One invocation of the pipeline, tagged with its sequence number."""
    sequence_number: int
    input_batch: List[SearchHit] = field(default_factory=list)


@dataclass
class PersonDetails:
    """Resolved facts for one selected entity."""
    entity_id: str
    label: str
    date_of_birth: str  # DD/MM/YYYY or "Unknown"
    date_of_death: str  # DD/MM/YYYY or "N/A"
    gender: str  # lowercased label or "unknown"
    age_at_death: str  # or "N/A"
    is_deceased: bool = False
    article_url: Optional[str] = None

    @property
    def status(self) -> str:
        return "DEAD" if self.is_deceased else "ALIVE"

    @property
    def entity_url(self) -> str:
        return f"https://www.wikidata.org/wiki/{self.entity_id}"

    def to_dict(self) -> dict:
        return {
            "id": self.entity_id,
            "label": self.label,
            "status": self.status,
            "date_of_birth": self.date_of_birth,
            "date_of_death": self.date_of_death,
            "gender": self.gender,
            "age_at_death": self.age_at_death,
            "article_url": self.article_url,
            "entity_url": self.entity_url,
        }

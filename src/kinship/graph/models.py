"""Edge, relation and query/result models for kinship inference.

Provides:
- Stored relationship rows and their edge types
- Classified relations between two persons (RelationInfo)
- Query and result models for the engine's request-style entry points
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field


class EdgeType(str, Enum):
    """Raw relationship kinds as stored."""
    PARENT = "parent"  # person1 is a parent of person2
    CHILD = "child"  # person1 is a child of person2
    SPOUSE = "spouse"
    SIBLING = "sibling"
    FRIEND = "friend"  # Reserved; never created through the relationship API

    def inverse(self) -> EdgeType:
        """Type of the same link read from the other endpoint."""
        if self is EdgeType.PARENT:
            return EdgeType.CHILD
        if self is EdgeType.CHILD:
            return EdgeType.PARENT
        return self

    @classmethod
    def parse(cls, value: str) -> EdgeType | None:
        """Return the edge type for a stored value, or None if unrecognised."""
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            return None


# Rows written alongside a new relationship so both endpoints can see it.
MIRROR_TYPES: dict[EdgeType, EdgeType] = {
    EdgeType.PARENT: EdgeType.CHILD,
    EdgeType.SPOUSE: EdgeType.SPOUSE,
    EdgeType.SIBLING: EdgeType.SIBLING,
}


class RelationType(str, Enum):
    """Classified kinship between two persons."""
    SELF = "self"
    PARENT = "parent"
    CHILD = "child"
    GRANDPARENT = "grandparent"
    GRANDCHILD = "grandchild"
    SPOUSE = "spouse"
    SIBLING = "sibling"
    AUNT_UNCLE = "aunt_uncle"
    NIECE_NEPHEW = "niece_nephew"
    COUSIN = "cousin"
    SECOND_COUSIN = "second_cousin"  # Declared, not produced by the classifier
    GREAT_GRANDPARENT = "great_grandparent"
    GREAT_GRANDCHILD = "great_grandchild"
    FRIEND = "friend"
    UNKNOWN = "unknown"


@dataclass
class RelationshipEdge:
    """A stored relationship row between two persons."""
    person1_id: int
    person2_id: int
    edge_type: EdgeType
    edge_id: int | None = None

    def other(self, person_id: int) -> int:
        """Endpoint opposite to ``person_id``."""
        return self.person2_id if self.person1_id == person_id else self.person1_id

    def touches(self, person_id: int) -> bool:
        return person_id in (self.person1_id, self.person2_id)

    def links(self, from_id: int, to_id: int) -> bool:
        """True if the row is stored in the from -> to direction."""
        return self.person1_id == from_id and self.person2_id == to_id

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "edge_id": self.edge_id,
            "person1_id": self.person1_id,
            "person2_id": self.person2_id,
            "type": self.edge_type.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelationshipEdge:
        """Deserialize from dictionary."""
        return cls(
            person1_id=int(data["person1_id"]),
            person2_id=int(data["person2_id"]),
            edge_type=EdgeType(data["type"]),
            edge_id=data.get("edge_id"),
        )


@dataclass(frozen=True)
class RelationInfo:
    """How a target person relates to a source person."""
    person_id: int
    relation_type: RelationType
    degree: int  # Edges on the shortest path
    path: tuple[int, ...] = field(default_factory=tuple)
    description: str = ""

    @property
    def is_self(self) -> bool:
        return self.relation_type is RelationType.SELF

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "person_id": self.person_id,
            "type": self.relation_type.value,
            "degree": self.degree,
            "path": list(self.path),
            "description": self.description,
        }


class RelativesQuery(BaseModel):
    """Query for every relative of a person."""
    person_id: int
    max_degree: int | None = Field(default=None, ge=0)


class PathQuery(BaseModel):
    """Query for the shortest path between two persons."""
    person_a_id: int
    person_b_id: int


class KinshipQuery(BaseModel):
    """Query to classify how person B relates to person A."""
    person_a_id: int
    person_b_id: int


class RelativesResult(BaseModel):
    """Result of a relatives traversal."""
    person_id: int
    max_degree: int | None = None
    relatives: dict[int, dict[str, Any]] = Field(default_factory=dict)

    # Query metadata
    query_time_ms: float = 0.0
    cached: bool = False

    @computed_field
    @property
    def count(self) -> int:
        return len(self.relatives)

    def by_degree(self) -> dict[int, list[int]]:
        """Person ids grouped by degree, in ascending degree order."""
        grouped: dict[int, list[int]] = {}
        for person_id, info in self.relatives.items():
            grouped.setdefault(info["degree"], []).append(person_id)
        return dict(sorted(grouped.items()))


class PathResult(BaseModel):
    """Shortest path between two persons."""
    person_a_id: int
    person_b_id: int
    path: list[int] = Field(default_factory=list)

    @computed_field
    @property
    def length(self) -> int:
        return max(len(self.path) - 1, 0)

"""Relationship graph storage consumed by the kinship engine.

The engine only needs ``edges_of``; the write helpers exist for fixtures,
the CLI seed command and tests.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import count
from typing import TYPE_CHECKING, Any

from .models import MIRROR_TYPES, EdgeType, RelationshipEdge

if TYPE_CHECKING:
    from collections.abc import Iterable


def mirrored(person1_id: int, person2_id: int, edge_type: EdgeType) -> list[tuple[int, int, EdgeType]]:
    """Rows to store for a new relationship, mirror row included when one applies."""
    rows = [(person1_id, person2_id, edge_type)]
    mirror = MIRROR_TYPES.get(edge_type)
    if mirror is not None:
        rows.append((person2_id, person1_id, mirror))
    return rows


class RelationshipGraph(ABC):
    """Read side of the relationship store."""

    @abstractmethod
    async def edges_of(self, person_id: int) -> list[RelationshipEdge]:
        """All stored rows with ``person_id`` on either side, in storage order."""
        ...

    async def version(self) -> int | None:
        """Edge-set version, or None when the store does not track one."""
        return None


class InMemoryRelationshipGraph(RelationshipGraph):
    """Dict-backed relationship store for development and testing.

    Keeps rows in insertion order with an adjacency index per person.
    """

    def __init__(self, edges: Iterable[tuple[int, int, EdgeType | str]] | None = None) -> None:
        self._edges: dict[int, RelationshipEdge] = {}
        self._adj: dict[int, list[int]] = {}  # person_id -> edge_ids
        self._persons: dict[int, dict[str, Any]] = {}
        self._ids = count(1)
        self._person_ids = count(1)
        self._version = 0

        for person1_id, person2_id, edge_type in edges or ():
            self.add_edge(person1_id, person2_id, edge_type)

    def __len__(self) -> int:
        return len(self._edges)

    def add_person(
        self,
        first_name: str,
        last_name: str,
        gender: str | None = None,
        birth_year: int | None = None,
    ) -> int:
        """Register a person and return the new id."""
        person_id = next(self._person_ids)
        while person_id in self._adj or person_id in self._persons:
            person_id = next(self._person_ids)
        self._persons[person_id] = {
            "id": person_id,
            "first_name": first_name,
            "last_name": last_name,
            "gender": gender,
            "birth_year": birth_year,
        }
        return person_id

    def get_person(self, person_id: int) -> dict[str, Any] | None:
        person = self._persons.get(person_id)
        return dict(person) if person else None

    def person_exists(self, person_id: int) -> bool:
        return person_id in self._persons or bool(self._adj.get(person_id))

    def add_edge(self, person1_id: int, person2_id: int, edge_type: EdgeType | str) -> RelationshipEdge:
        """Store a single row exactly as given (no mirror)."""
        edge = RelationshipEdge(
            person1_id=person1_id,
            person2_id=person2_id,
            edge_type=EdgeType(edge_type),
            edge_id=next(self._ids),
        )
        self._edges[edge.edge_id] = edge
        self._adj.setdefault(person1_id, []).append(edge.edge_id)
        if person2_id != person1_id:
            self._adj.setdefault(person2_id, []).append(edge.edge_id)
        self._version += 1
        return edge

    def link(self, person1_id: int, person2_id: int, edge_type: EdgeType | str) -> list[RelationshipEdge]:
        """Store a relationship together with its mirror row."""
        return [self.add_edge(p1, p2, t) for p1, p2, t in mirrored(person1_id, person2_id, EdgeType(edge_type))]

    def unlink(self, person1_id: int, person2_id: int, edge_type: EdgeType | str) -> int:
        """Remove a relationship and its mirror row. Returns rows removed."""
        removed = 0
        for p1, p2, t in mirrored(person1_id, person2_id, EdgeType(edge_type)):
            for edge in list(self._iter_rows(p1)):
                if edge.links(p1, p2) and edge.edge_type is t:
                    self._delete(edge)
                    removed += 1
        return removed

    def remove_person(self, person_id: int) -> int:
        """Remove every row touching a person."""
        rows = list(self._iter_rows(person_id))
        for edge in rows:
            self._delete(edge)
        self._adj.pop(person_id, None)
        self._persons.pop(person_id, None)
        return len(rows)

    def persons(self) -> set[int]:
        return {pid for pid, edge_ids in self._adj.items() if edge_ids}

    async def edges_of(self, person_id: int) -> list[RelationshipEdge]:
        return list(self._iter_rows(person_id))

    async def version(self) -> int | None:
        return self._version

    def _iter_rows(self, person_id: int):
        for edge_id in self._adj.get(person_id, ()):
            yield self._edges[edge_id]

    def _delete(self, edge: RelationshipEdge) -> None:
        del self._edges[edge.edge_id]
        for pid in {edge.person1_id, edge.person2_id}:
            ids = self._adj.get(pid)
            if ids and edge.edge_id in ids:
                ids.remove(edge.edge_id)
        self._version += 1

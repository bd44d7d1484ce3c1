"""Error types raised by the kinship engine and its graph stores."""
from __future__ import annotations

from dataclasses import dataclass


class KinshipError(Exception):
    """Base class for kinship errors."""


class GraphAccessError(KinshipError):
    """Relationship storage could not be read or written.

    Raised by graph stores and propagated untouched through the engine;
    retry policy belongs to the caller.
    """

    def __init__(self, message: str, person_id: int | None = None):
        super().__init__(message)
        self.person_id = person_id


@dataclass
class TraversalLimitError(KinshipError):
    """Raised when a traversal visits more persons than allowed."""

    limit: int
    visited: int
    source_id: int | None = None

    def __str__(self) -> str:  # pragma: no cover - human readable
        base = f"traversal visited {self.visited} persons (limit {self.limit})"
        if self.source_id is not None:
            base += f" starting from person {self.source_id}"
        return base

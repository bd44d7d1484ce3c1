"""Kinship graph: relationship storage, traversal and classification.

Provides:
- A storage abstraction exposing per-person edge lookups
- In-memory and SQLite stores
- BFS discovery of relatives, shortest paths and relation classification
"""
from .cache import RelativesCache
from .classifier import LABELS, PathClassifier, relation
from .graph_store import (
    InMemoryRelationshipGraph,
    RelationshipGraph,
    mirrored,
)
from .models import (
    MIRROR_TYPES,
    EdgeType,
    KinshipQuery,
    PathQuery,
    PathResult,
    RelationInfo,
    RelationshipEdge,
    RelationType,
    RelativesQuery,
    RelativesResult,
)
from .sqlite_store import SQLiteRelationshipGraph
from .traversal import KinshipEngine

__all__ = [
    # Storage
    "RelationshipGraph",
    "InMemoryRelationshipGraph",
    "SQLiteRelationshipGraph",
    "mirrored",
    # Models
    "EdgeType",
    "RelationType",
    "RelationshipEdge",
    "RelationInfo",
    "MIRROR_TYPES",
    "RelativesQuery",
    "PathQuery",
    "KinshipQuery",
    "RelativesResult",
    "PathResult",
    # Classification
    "PathClassifier",
    "relation",
    "LABELS",
    # Traversal
    "KinshipEngine",
    "RelativesCache",
]

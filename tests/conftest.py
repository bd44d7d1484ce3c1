from __future__ import annotations

import pytest

from kinship.config import KinshipConfig
from kinship.graph import EdgeType, InMemoryRelationshipGraph, KinshipEngine


def make_config(**overrides) -> KinshipConfig:
    """Config independent of the surrounding environment."""
    values = {
        "db_path": ":memory:",
        "locale": "en",
        "max_visited": 100_000,
        "fetch_concurrency": 4,
        "parallel_fetch": True,
        "cache_size": 0,
        "log_level": "INFO",
    }
    values.update(overrides)
    return KinshipConfig(**values)


@pytest.fixture
def config() -> KinshipConfig:
    return make_config()


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def small_family() -> InMemoryRelationshipGraph:
    """Persons 1..4: 1 is parent of 2 and 3, 2 and 3 are siblings, 4 is married to 2."""
    graph = InMemoryRelationshipGraph()
    graph.link(1, 2, EdgeType.PARENT)
    graph.link(1, 3, EdgeType.PARENT)
    graph.link(2, 3, EdgeType.SIBLING)
    graph.link(2, 4, EdgeType.SPOUSE)
    return graph


@pytest.fixture
def three_generations() -> InMemoryRelationshipGraph:
    """Grandfather 1, father 2, child 3."""
    graph = InMemoryRelationshipGraph()
    graph.link(1, 2, EdgeType.PARENT)
    graph.link(2, 3, EdgeType.PARENT)
    return graph


@pytest.fixture
def engine(small_family, config) -> KinshipEngine:
    return KinshipEngine(small_family, config=config)

"""Tests for the in-memory relationship store."""
from __future__ import annotations

import pytest

from kinship.graph import EdgeType, InMemoryRelationshipGraph, mirrored


def test_mirrored_rows():
    assert mirrored(1, 2, EdgeType.PARENT) == [(1, 2, EdgeType.PARENT), (2, 1, EdgeType.CHILD)]
    assert mirrored(1, 2, EdgeType.SPOUSE) == [(1, 2, EdgeType.SPOUSE), (2, 1, EdgeType.SPOUSE)]
    assert mirrored(1, 2, EdgeType.FRIEND) == [(1, 2, EdgeType.FRIEND)]


class TestInMemoryRelationshipGraph:
    """Tests for InMemoryRelationshipGraph."""

    @pytest.mark.asyncio
    async def test_link_writes_mirror(self):
        graph = InMemoryRelationshipGraph()
        edges = graph.link(1, 2, EdgeType.PARENT)

        assert len(edges) == 2
        assert len(graph) == 2
        rows = await graph.edges_of(2)
        assert [(e.person1_id, e.person2_id, e.edge_type) for e in rows] == [
            (1, 2, EdgeType.PARENT),
            (2, 1, EdgeType.CHILD),
        ]

    @pytest.mark.asyncio
    async def test_edges_in_insertion_order(self):
        graph = InMemoryRelationshipGraph([(1, 3, "sibling"), (1, 2, "spouse")])

        rows = await graph.edges_of(1)
        assert [e.other(1) for e in rows] == [3, 2]
        assert [e.edge_id for e in rows] == [1, 2]

    @pytest.mark.asyncio
    async def test_unknown_person_has_no_edges(self):
        graph = InMemoryRelationshipGraph()
        assert await graph.edges_of(5) == []

    @pytest.mark.asyncio
    async def test_version_tracks_writes(self):
        graph = InMemoryRelationshipGraph()
        v0 = await graph.version()

        graph.link(1, 2, EdgeType.SIBLING)
        v1 = await graph.version()
        graph.unlink(1, 2, EdgeType.SIBLING)
        v2 = await graph.version()

        assert v0 < v1 < v2

    @pytest.mark.asyncio
    async def test_unlink_removes_both_rows(self):
        graph = InMemoryRelationshipGraph()
        graph.link(1, 2, EdgeType.PARENT)
        graph.link(1, 3, EdgeType.PARENT)

        assert graph.unlink(1, 2, EdgeType.PARENT) == 2
        assert await graph.edges_of(2) == []
        assert len(await graph.edges_of(1)) == 2

    def test_remove_person(self):
        graph = InMemoryRelationshipGraph()
        graph.link(1, 2, EdgeType.SPOUSE)
        graph.link(2, 3, EdgeType.PARENT)

        assert graph.remove_person(2) == 4
        assert len(graph) == 0
        assert graph.persons() == set()

    def test_add_person(self):
        graph = InMemoryRelationshipGraph([(1, 2, "spouse")])

        new_id = graph.add_person("Anna", "Petrova", gender="female", birth_year=1910)

        assert new_id == 3
        assert graph.get_person(new_id)["last_name"] == "Petrova"
        assert graph.person_exists(new_id)
        assert graph.person_exists(1)
        assert not graph.person_exists(9)
        assert graph.get_person(9) is None

    def test_invalid_edge_type(self):
        graph = InMemoryRelationshipGraph()
        with pytest.raises(ValueError):
            graph.add_edge(1, 2, "cousin")

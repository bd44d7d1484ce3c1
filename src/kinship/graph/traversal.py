"""Kinship traversal over a relationship graph.

Provides:
- Discovery of every relative reachable from a person (BFS)
- Shortest path between two persons
- Classification of how one person relates to another

Works with any RelationshipGraph; edge lookups for one BFS level may run
concurrently.
"""
from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..config import KinshipConfig
from ..exceptions import TraversalLimitError
from ..logging import get_logger
from .classifier import PathClassifier, relation
from .models import (
    KinshipQuery,
    PathQuery,
    PathResult,
    RelationInfo,
    RelationshipEdge,
    RelativesQuery,
    RelativesResult,
)

if TYPE_CHECKING:
    from .cache import RelativesCache
    from .graph_store import RelationshipGraph

logger = get_logger(__name__)

Frontier = list[tuple[int, tuple[int, ...]]]


class KinshipEngine:
    """Relationship inference engine.

    Holds no traversal state between calls; every call builds its own
    visited set, frontier and adjacency map.

    Example:
        >>> engine = KinshipEngine(graph)
        >>> relatives = await engine.all_relatives(person_id=1)
        >>> for pid, info in relatives.items():
        ...     print(pid, info.relation_type.value, info.degree)
    """

    def __init__(
        self,
        graph: RelationshipGraph,
        config: KinshipConfig | None = None,
        cache: RelativesCache | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            graph: Relationship store to read edges from
            config: Traversal bounds and locale (defaults from environment)
            cache: Optional memoization for all_relatives
        """
        self.graph = graph
        self.config = config or KinshipConfig()
        self.cache = cache
        self.classifier = PathClassifier(self.config.locale)

    async def all_relatives(
        self,
        person_id: int,
        max_degree: int | None = None,
    ) -> dict[int, RelationInfo]:
        """Find every person reachable from ``person_id``.

        Args:
            person_id: Source person (existence is the caller's concern)
            max_degree: Stop expanding past this many edges

        Returns:
            Mapping of person id to its shortest-path RelationInfo, the
            source included as ``self``.
        """
        relatives, _ = await self._relatives(person_id, max_degree)
        return relatives

    async def _relatives(
        self,
        person_id: int,
        max_degree: int | None,
    ) -> tuple[dict[int, RelationInfo], bool]:
        """BFS behind all_relatives; also reports whether the cache answered."""
        key = await self._cache_key(person_id, max_degree)
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("relatives_cache_hit", person_id=person_id, count=len(cached))
                return cached, True

        start_time = time.time()
        relatives: dict[int, RelationInfo] = {person_id: self.classifier.self_info(person_id)}
        visited: set[int] = {person_id}
        adjacency: dict[int, list[RelationshipEdge]] = {}
        frontier: Frontier = [(person_id, (person_id,))]

        while frontier:
            if max_degree is not None:
                frontier = [(pid, path) for pid, path in frontier if len(path) - 1 < max_degree]
                if not frontier:
                    break

            await self._fetch_edges([pid for pid, _ in frontier], adjacency)

            next_frontier: Frontier = []
            for current_id, path in frontier:
                for edge in adjacency[current_id]:
                    other_id = edge.other(current_id)
                    if other_id in visited:
                        continue

                    visited.add(other_id)
                    self._check_limit(len(visited), person_id)

                    new_path = path + (other_id,)
                    relatives[other_id] = self.classifier.classify_path(new_path, adjacency)
                    next_frontier.append((other_id, new_path))

            frontier = next_frontier

        logger.debug(
            "relatives_traversal_complete",
            person_id=person_id,
            max_degree=max_degree,
            count=len(relatives),
            lookups=len(adjacency),
            query_time_ms=round((time.time() - start_time) * 1000, 3),
        )

        if key is not None:
            self.cache.put(key, relatives)
        return relatives, False

    async def path_between(self, person_a_id: int, person_b_id: int) -> list[int] | None:
        """Shortest path from A to B, both included, or None if unreachable."""
        return await self._search(person_a_id, person_b_id, {})

    async def classify(
        self,
        person_a_id: int,
        person_b_id: int,
        path: Sequence[int] | None = None,
    ) -> RelationInfo | None:
        """Classify how person B relates to person A.

        Args:
            person_a_id: Reference person
            person_b_id: Person being described
            path: Precomputed path from A to B; searched for when omitted

        Returns:
            RelationInfo, or None when B cannot be reached from A
        """
        if person_a_id == person_b_id:
            return self.classifier.self_info(person_a_id)

        adjacency: dict[int, list[RelationshipEdge]] = {}
        if path is None:
            path = await self._search(person_a_id, person_b_id, adjacency)
            if path is None:
                return None
        elif len(path) < 2 or path[0] != person_a_id or path[-1] != person_b_id:
            raise ValueError(f"path {list(path)} does not lead from {person_a_id} to {person_b_id}")

        await self._fetch_edges(path[:-1], adjacency)
        for step_from, step_to in zip(path, path[1:]):
            if relation(step_from, step_to, adjacency) is None:
                raise ValueError(f"path {list(path)} has no stored link between {step_from} and {step_to}")
        return self.classifier.classify_path(path, adjacency)

    # ─────────────────────────────────────────
    # Query-object entry points
    # ─────────────────────────────────────────

    async def get_relatives(self, query: RelativesQuery) -> RelativesResult:
        """Relatives of a person in serializable form."""
        start_time = time.time()
        relatives, hit = await self._relatives(query.person_id, query.max_degree)

        return RelativesResult(
            person_id=query.person_id,
            max_degree=query.max_degree,
            relatives={pid: info.to_dict() for pid, info in relatives.items()},
            query_time_ms=(time.time() - start_time) * 1000,
            cached=hit,
        )

    async def find_path(self, query: PathQuery) -> PathResult | None:
        path = await self.path_between(query.person_a_id, query.person_b_id)
        if path is None:
            return None
        return PathResult(person_a_id=query.person_a_id, person_b_id=query.person_b_id, path=path)

    async def find_kinship(self, query: KinshipQuery) -> RelationInfo | None:
        return await self.classify(query.person_a_id, query.person_b_id)

    # ─────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────

    async def _search(
        self,
        start_id: int,
        target_id: int,
        adjacency: dict[int, list[RelationshipEdge]],
    ) -> list[int] | None:
        """Single-target BFS; fills ``adjacency`` with the rows it reads."""
        if start_id == target_id:
            return [start_id]

        start_time = time.time()
        visited: set[int] = {start_id}
        frontier: Frontier = [(start_id, (start_id,))]

        while frontier:
            await self._fetch_edges([pid for pid, _ in frontier], adjacency)

            next_frontier: Frontier = []
            for current_id, path in frontier:
                for edge in adjacency[current_id]:
                    next_id = edge.other(current_id)
                    if next_id == target_id:
                        logger.debug(
                            "path_search_complete",
                            start_id=start_id,
                            target_id=target_id,
                            length=len(path),
                            query_time_ms=round((time.time() - start_time) * 1000, 3),
                        )
                        return [*path, target_id]

                    if next_id not in visited:
                        visited.add(next_id)
                        self._check_limit(len(visited), start_id)
                        next_frontier.append((next_id, path + (next_id,)))

            frontier = next_frontier

        logger.debug("path_not_found", start_id=start_id, target_id=target_id, visited=len(visited))
        return None

    async def _fetch_edges(
        self,
        person_ids: Sequence[int],
        adjacency: dict[int, list[RelationshipEdge]],
    ) -> None:
        """Load rows for every person not yet in ``adjacency``."""
        missing = list(dict.fromkeys(pid for pid in person_ids if pid not in adjacency))
        if not missing:
            return

        if not self.config.parallel_fetch or len(missing) == 1:
            for pid in missing:
                adjacency[pid] = await self.graph.edges_of(pid)
            return

        sem = asyncio.Semaphore(self.config.fetch_concurrency)

        async def fetch_one(pid: int) -> list[RelationshipEdge]:
            async with sem:
                return await self.graph.edges_of(pid)

        # A failed lookup cancels the rest of the level.
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(fetch_one(pid)) for pid in missing]
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None

        for pid, task in zip(missing, tasks):
            adjacency[pid] = task.result()

    def _check_limit(self, visited: int, source_id: int) -> None:
        if visited > self.config.max_visited:
            logger.warning(
                "traversal_limit_exceeded",
                source_id=source_id,
                limit=self.config.max_visited,
            )
            raise TraversalLimitError(limit=self.config.max_visited, visited=visited, source_id=source_id)

    async def _cache_key(self, person_id: int, max_degree: int | None) -> tuple[int, int, int | None] | None:
        if self.cache is None:
            return None
        version = await self.graph.version()
        if version is None:
            return None
        return (person_id, version, max_degree)

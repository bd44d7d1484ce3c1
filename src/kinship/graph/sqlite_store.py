"""SQLite relationship store.

Holds persons and relationship rows; a trigger-maintained counter in
``graph_meta`` versions the edge set for cache invalidation.
"""
from __future__ import annotations

import asyncio
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..exceptions import GraphAccessError
from ..logging import get_logger
from .graph_store import RelationshipGraph, mirrored
from .models import EdgeType, RelationshipEdge

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger(__name__)


class SQLiteRelationshipGraph(RelationshipGraph):
    """SQLite-backed persons and relationships.

    Lookups run in a worker thread so a traversal can overlap several of
    them; each call opens its own connection.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _get_conn(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise GraphAccessError(f"cannot open relationship store {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys=ON;")
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise GraphAccessError(f"relationship store error: {e}") from e
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_conn() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS persons (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    first_name TEXT NOT NULL,
                    last_name TEXT NOT NULL,
                    gender TEXT,
                    birth_year INTEGER,
                    created_at TEXT NOT NULL DEFAULT (datetime('now'))
                );

                CREATE TABLE IF NOT EXISTS relationships (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    person1_id INTEGER NOT NULL REFERENCES persons(id) ON DELETE CASCADE,
                    person2_id INTEGER NOT NULL REFERENCES persons(id) ON DELETE CASCADE,
                    type TEXT NOT NULL,
                    notes TEXT,
                    created_at TEXT NOT NULL DEFAULT (datetime('now')),
                    UNIQUE (person1_id, person2_id, type)
                );

                CREATE INDEX IF NOT EXISTS idx_rel_person1 ON relationships(person1_id);
                CREATE INDEX IF NOT EXISTS idx_rel_person2 ON relationships(person2_id);

                CREATE TABLE IF NOT EXISTS graph_meta (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    version INTEGER NOT NULL
                );
                INSERT OR IGNORE INTO graph_meta (id, version) VALUES (1, 0);

                CREATE TRIGGER IF NOT EXISTS trg_rel_insert AFTER INSERT ON relationships
                BEGIN
                    UPDATE graph_meta SET version = version + 1 WHERE id = 1;
                END;
                CREATE TRIGGER IF NOT EXISTS trg_rel_delete AFTER DELETE ON relationships
                BEGIN
                    UPDATE graph_meta SET version = version + 1 WHERE id = 1;
                END;
                CREATE TRIGGER IF NOT EXISTS trg_rel_update AFTER UPDATE ON relationships
                BEGIN
                    UPDATE graph_meta SET version = version + 1 WHERE id = 1;
                END;
                """
            )

    # ─────────────────────────────────────────
    # Persons
    # ─────────────────────────────────────────

    def add_person(
        self,
        first_name: str,
        last_name: str,
        gender: str | None = None,
        birth_year: int | None = None,
    ) -> int:
        """Insert a person and return the new id."""
        with self._get_conn() as conn:
            cur = conn.execute(
                "INSERT INTO persons (first_name, last_name, gender, birth_year) VALUES (?, ?, ?, ?)",
                (first_name, last_name, gender, birth_year),
            )
            return int(cur.lastrowid)

    def get_person(self, person_id: int) -> dict[str, Any] | None:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT id, first_name, last_name, gender, birth_year FROM persons WHERE id = ?",
                (person_id,),
            ).fetchone()
        return dict(row) if row else None

    def person_exists(self, person_id: int) -> bool:
        with self._get_conn() as conn:
            row = conn.execute("SELECT 1 FROM persons WHERE id = ?", (person_id,)).fetchone()
        return row is not None

    def iter_persons(self) -> list[dict[str, Any]]:
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT id, first_name, last_name, gender, birth_year FROM persons ORDER BY id"
            ).fetchall()
        return [dict(r) for r in rows]

    def display_name(self, person_id: int) -> str:
        person = self.get_person(person_id)
        if person is None:
            return f"#{person_id}"
        return f"{person['first_name']} {person['last_name']}"

    # ─────────────────────────────────────────
    # Relationships
    # ─────────────────────────────────────────

    def add_edge(
        self,
        person1_id: int,
        person2_id: int,
        edge_type: EdgeType | str,
        notes: str | None = None,
    ) -> RelationshipEdge:
        """Store a single row exactly as given (no mirror)."""
        edge_type = EdgeType(edge_type)
        with self._get_conn() as conn:
            cur = conn.execute(
                "INSERT INTO relationships (person1_id, person2_id, type, notes) VALUES (?, ?, ?, ?)",
                (person1_id, person2_id, edge_type.value, notes),
            )
            edge_id = int(cur.lastrowid)
        return RelationshipEdge(person1_id, person2_id, edge_type, edge_id=edge_id)

    def link(
        self,
        person1_id: int,
        person2_id: int,
        edge_type: EdgeType | str,
        notes: str | None = None,
    ) -> list[RelationshipEdge]:
        """Store a relationship and its mirror row in one transaction."""
        rows = mirrored(person1_id, person2_id, EdgeType(edge_type))
        edges = []
        with self._get_conn() as conn:
            for p1, p2, t in rows:
                cur = conn.execute(
                    "INSERT INTO relationships (person1_id, person2_id, type, notes) VALUES (?, ?, ?, ?)",
                    (p1, p2, t.value, notes),
                )
                edges.append(RelationshipEdge(p1, p2, t, edge_id=int(cur.lastrowid)))
        return edges

    def unlink(self, person1_id: int, person2_id: int, edge_type: EdgeType | str) -> int:
        """Remove a relationship and its mirror row. Returns rows removed."""
        removed = 0
        with self._get_conn() as conn:
            for p1, p2, t in mirrored(person1_id, person2_id, EdgeType(edge_type)):
                cur = conn.execute(
                    "DELETE FROM relationships WHERE person1_id = ? AND person2_id = ? AND type = ?",
                    (p1, p2, t.value),
                )
                removed += cur.rowcount
        return removed

    def count_edges(self) -> int:
        with self._get_conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM relationships").fetchone()[0]

    # ─────────────────────────────────────────
    # RelationshipGraph
    # ─────────────────────────────────────────

    async def edges_of(self, person_id: int) -> list[RelationshipEdge]:
        try:
            return await asyncio.to_thread(self._edges_of_sync, person_id)
        except GraphAccessError as e:
            e.person_id = person_id
            raise

    async def version(self) -> int | None:
        return await asyncio.to_thread(self._version_sync)

    def _edges_of_sync(self, person_id: int) -> list[RelationshipEdge]:
        with self._get_conn() as conn:
            rows = conn.execute(
                """
                SELECT id, person1_id, person2_id, type FROM relationships
                WHERE person1_id = ? OR person2_id = ?
                ORDER BY id
                """,
                (person_id, person_id),
            ).fetchall()

        edges = []
        for row in rows:
            edge_type = EdgeType.parse(row["type"])
            if edge_type is None:
                logger.warning("relationship_row_skipped", edge_id=row["id"], type=row["type"])
                continue
            edges.append(
                RelationshipEdge(
                    person1_id=row["person1_id"],
                    person2_id=row["person2_id"],
                    edge_type=edge_type,
                    edge_id=row["id"],
                )
            )
        return edges

    def _version_sync(self) -> int:
        with self._get_conn() as conn:
            return conn.execute("SELECT version FROM graph_meta WHERE id = 1").fetchone()[0]

"""Relationship classification from shortest connecting paths.

A path is a sequence of person ids from the source to the target. The
classifier reads the stored rows between consecutive persons, orients each
one along the path and matches the resulting type pattern.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence

from .models import EdgeType, RelationInfo, RelationshipEdge, RelationType

Adjacency = Mapping[int, Sequence[RelationshipEdge]]

LABELS: dict[str, dict[RelationType, str]] = {
    "en": {
        RelationType.SELF: "the person themself",
        RelationType.PARENT: "Parent",
        RelationType.CHILD: "Child",
        RelationType.GRANDPARENT: "Grandparent",
        RelationType.GRANDCHILD: "Grandchild",
        RelationType.SPOUSE: "Spouse",
        RelationType.SIBLING: "Sibling",
        RelationType.AUNT_UNCLE: "Aunt/Uncle",
        RelationType.NIECE_NEPHEW: "Niece/Nephew",
        RelationType.COUSIN: "Cousin",
        RelationType.SECOND_COUSIN: "Second cousin",
        RelationType.GREAT_GRANDPARENT: "Great-grandparent",
        RelationType.GREAT_GRANDCHILD: "Great-grandchild",
        RelationType.FRIEND: "Acquaintance",
        RelationType.UNKNOWN: "Relative (degree {degree})",
    },
    "ru": {
        RelationType.SELF: "Сам человек",
        RelationType.PARENT: "Родитель",
        RelationType.CHILD: "Ребенок",
        RelationType.GRANDPARENT: "Дедушка/Бабушка",
        RelationType.GRANDCHILD: "Внук/Внучка",
        RelationType.SPOUSE: "Супруг(а)",
        RelationType.SIBLING: "Брат/Сестра",
        RelationType.AUNT_UNCLE: "Тетя/Дядя",
        RelationType.NIECE_NEPHEW: "Племянник/Племянница",
        RelationType.COUSIN: "Двоюродный(ая) брат/сестра",
        RelationType.SECOND_COUSIN: "Троюродный(ая) брат/сестра",
        RelationType.GREAT_GRANDPARENT: "Прадедушка/Прабабушка",
        RelationType.GREAT_GRANDCHILD: "Правнук/Правнучка",
        RelationType.FRIEND: "Знакомый/Знакомая",
        RelationType.UNKNOWN: "Родственник ({degree} степень)",
    },
}

_LINEAL = (EdgeType.PARENT, EdgeType.CHILD)

_TWO_STEP: dict[tuple[EdgeType, EdgeType], RelationType] = {
    (EdgeType.PARENT, EdgeType.PARENT): RelationType.GRANDPARENT,
    (EdgeType.CHILD, EdgeType.CHILD): RelationType.GRANDCHILD,
    (EdgeType.CHILD, EdgeType.PARENT): RelationType.AUNT_UNCLE,
}


def relation(from_id: int, to_id: int, adjacency: Adjacency) -> EdgeType | None:
    """Type of the link between two persons, read from ``from_id``.

    A row stored in the from -> to direction wins; otherwise a reverse row
    is inverted. Returns None when no row links the pair.
    """
    rows = adjacency.get(from_id)
    if rows is None:
        rows = adjacency.get(to_id, ())

    reverse: EdgeType | None = None
    for edge in rows:
        if edge.links(from_id, to_id):
            return edge.edge_type
        if reverse is None and edge.links(to_id, from_id):
            reverse = edge.edge_type.inverse()
    return reverse


class PathClassifier:
    """Classify and describe the relation implied by a path."""

    def __init__(self, locale: str = "en") -> None:
        if locale not in LABELS:
            raise ValueError(f"Unsupported locale {locale!r}; choose from {sorted(LABELS)}")
        self.locale = locale
        self._labels = LABELS[locale]

    def describe(self, relation_type: RelationType, degree: int) -> str:
        """Display label for a classified relation."""
        return self._labels[relation_type].format(degree=degree)

    def self_info(self, person_id: int) -> RelationInfo:
        return RelationInfo(
            person_id=person_id,
            relation_type=RelationType.SELF,
            degree=0,
            path=(person_id,),
            description=self.describe(RelationType.SELF, 0),
        )

    def classify_path(self, path: Sequence[int], adjacency: Adjacency) -> RelationInfo:
        """Build the RelationInfo for the last person on ``path``.

        ``adjacency`` must hold the rows of every person on the path except
        possibly the last one.
        """
        if len(path) == 1:
            return self.self_info(path[0])

        degree = len(path) - 1
        relation_type = self.path_type(path, adjacency)
        return RelationInfo(
            person_id=path[-1],
            relation_type=relation_type,
            degree=degree,
            path=tuple(path),
            description=self.describe(relation_type, degree),
        )

    def path_type(self, path: Sequence[int], adjacency: Adjacency) -> RelationType:
        degree = len(path) - 1
        if degree == 0:
            return RelationType.SELF
        if degree == 1:
            return self._direct(path[0], path[1], adjacency)
        if degree == 2:
            steps = (relation(path[0], path[1], adjacency), relation(path[1], path[2], adjacency))
            return _TWO_STEP.get(steps, RelationType.UNKNOWN)
        if degree == 3:
            return self._three_step(path, adjacency)
        return RelationType.UNKNOWN

    def _direct(self, a: int, b: int, adjacency: Adjacency) -> RelationType:
        edge_type = relation(a, b, adjacency)
        if edge_type is None:
            return RelationType.UNKNOWN
        # Only a parent row is flipped; child rows keep their stored label.
        if edge_type is EdgeType.PARENT:
            return RelationType.CHILD
        return RelationType(edge_type.value)

    def _three_step(self, path: Sequence[int], adjacency: Adjacency) -> RelationType:
        first = relation(path[0], path[1], adjacency)
        last = relation(path[2], path[3], adjacency)
        middle = (relation(path[1], path[2], adjacency), relation(path[2], path[1], adjacency))
        if first in _LINEAL and last in _LINEAL and EdgeType.SIBLING in middle:
            return RelationType.COUSIN
        return RelationType.UNKNOWN

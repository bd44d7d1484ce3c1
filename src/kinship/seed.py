"""Deterministic multi-generation family fixtures.

Builds founding couples, their children and the marriages that join
neighbouring families, writing every relationship through ``link`` so mirror
rows are present.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Protocol

from .graph.models import EdgeType
from .logging import get_logger

logger = get_logger(__name__)

FAMILY_NAMES = ["Ivanov", "Petrov", "Sidorov", "Smirnov", "Kuznetsov", "Popov"]
MALE_NAMES = ["Ivan", "Petr", "Sidor", "Aleksei", "Dmitrii", "Nikolai", "Mikhail", "Andrei"]
FEMALE_NAMES = ["Maria", "Anna", "Elena", "Olga", "Tatiana", "Natalia", "Irina", "Ekaterina"]

FIRST_BIRTH_YEAR = 1880
GENERATION_SPAN = 30


class FamilyStore(Protocol):
    def add_person(
        self,
        first_name: str,
        last_name: str,
        gender: str | None = None,
        birth_year: int | None = None,
    ) -> int: ...

    def get_person(self, person_id: int) -> dict[str, Any] | None: ...

    def link(self, person1_id: int, person2_id: int, edge_type: EdgeType | str) -> list: ...


@dataclass
class SeedReport:
    """What seed_family wrote."""
    generations: list[list[int]] = field(default_factory=list)
    couples: list[tuple[int, int]] = field(default_factory=list)
    relationships: int = 0

    @property
    def total_persons(self) -> int:
        return sum(len(g) for g in self.generations)


def seed_family(
    store: FamilyStore,
    couples: int = 4,
    generations: int = 4,
    children_per_couple: int = 2,
    rng_seed: int = 1880,
) -> SeedReport:
    """Populate ``store`` with a multi-generation family.

    Founding couples are joined by ``spouse``; every child gets ``parent``
    rows from both parents and ``sibling`` rows to the other children of the
    couple. From the second generation on, families are paired outside-in
    (first with last, second with second-to-last) and their children marry
    pairwise, so founding families become related in later generations.
    """
    if couples < 1 or generations < 1 or children_per_couple < 1:
        raise ValueError("couples, generations and children_per_couple must be positive")

    rng = random.Random(rng_seed)
    report = SeedReport()

    def person(gender: str, last_name: str, generation: int) -> int:
        first = rng.choice(MALE_NAMES if gender == "male" else FEMALE_NAMES)
        birth_year = FIRST_BIRTH_YEAR + generation * GENERATION_SPAN + rng.randint(0, 10)
        return store.add_person(first, last_name, gender=gender, birth_year=birth_year)

    def link(p1: int, p2: int, edge_type: EdgeType) -> None:
        report.relationships += len(store.link(p1, p2, edge_type))

    founders: list[int] = []
    current_couples: list[tuple[int, int]] = []
    for _ in range(couples):
        surname = rng.choice(FAMILY_NAMES)
        husband = person("male", surname, 0)
        wife = person("female", surname, 0)
        link(husband, wife, EdgeType.SPOUSE)
        founders.extend((husband, wife))
        current_couples.append((husband, wife))
    report.generations.append(founders)
    report.couples.extend(current_couples)

    for generation in range(1, generations):
        families: list[list[int]] = []
        members: list[int] = []
        for father, mother in current_couples:
            surname = store.get_person(father)["last_name"]
            children = []
            for _ in range(children_per_couple):
                gender = rng.choice(("male", "female"))
                child = person(gender, surname, generation)
                link(father, child, EdgeType.PARENT)
                link(mother, child, EdgeType.PARENT)
                children.append(child)
            for i, older in enumerate(children):
                for younger in children[i + 1:]:
                    link(older, younger, EdgeType.SIBLING)
            families.append(children)
            members.extend(children)
        report.generations.append(members)

        if generation == generations - 1:
            break

        current_couples = []
        for k in range(len(families) // 2):
            for left, right in zip(families[k], families[-1 - k]):
                link(left, right, EdgeType.SPOUSE)
                current_couples.append((left, right))
        report.couples.extend(current_couples)
        if not current_couples:
            break

    logger.info(
        "family_seeded",
        persons=report.total_persons,
        couples=len(report.couples),
        relationships=report.relationships,
    )
    return report


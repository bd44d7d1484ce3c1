from __future__ import annotations

import pytest

from kinship.graph import RelationInfo, RelationType, RelativesCache


def _entry(person_id: int) -> dict[int, RelationInfo]:
    return {person_id: RelationInfo(person_id=person_id, relation_type=RelationType.SELF, degree=0)}


def test_get_put_and_counters():
    cache = RelativesCache(maxsize=2)

    assert cache.get((1, 0, None)) is None
    cache.put((1, 0, None), _entry(1))

    assert cache.get((1, 0, None)) == _entry(1)
    assert cache.hits == 1
    assert cache.misses == 1


def test_lru_eviction():
    cache = RelativesCache(maxsize=2)
    cache.put((1, 0, None), _entry(1))
    cache.put((2, 0, None), _entry(2))
    cache.get((1, 0, None))
    cache.put((3, 0, None), _entry(3))

    assert len(cache) == 2
    assert cache.get((2, 0, None)) is None
    assert cache.get((1, 0, None)) is not None


def test_returned_mapping_is_a_copy():
    cache = RelativesCache()
    cache.put((1, 0, None), _entry(1))

    cache.get((1, 0, None))[99] = "mutated"

    assert 99 not in cache.get((1, 0, None))


def test_clear():
    cache = RelativesCache()
    cache.put((1, 0, None), _entry(1))
    cache.get((1, 0, None))
    cache.clear()

    assert len(cache) == 0
    assert cache.hits == 0


def test_invalid_size():
    with pytest.raises(ValueError):
        RelativesCache(maxsize=0)

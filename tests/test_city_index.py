"""Tests for the city lookup index."""
from cityquiz.core.city_index import CityIndex
from cityquiz.core.models import CityRecord


def test_rebuild_indexes_every_record(sample_cities):
    index = CityIndex(sample_cities)

    assert len(index) == len(sample_cities)
    assert sum(len(group) for group in index.by_name.values()) == len(sample_cities)
    assert [c.state for c in index.by_name["springfield"]] == ["IL", "MO", "MA"]
    assert index.by_label["springfield il"].state == "IL"
    assert index.by_label["san jose ca"].name == "San José"


def test_rebuild_is_idempotent(sample_cities):
    index = CityIndex(sample_cities)
    before = (dict(index.by_label), {k: list(v) for k, v in index.by_name.items()}, dict(index.by_key))

    index.rebuild(sample_cities)

    assert (index.by_label, index.by_name, index.by_key) == before


def test_rebuild_drops_previous_dataset(sample_cities):
    index = CityIndex(sample_cities)
    index.rebuild([CityRecord("Boise", "ID", 43.615, -116.2023, 228959)])

    assert list(index.by_name) == ["boise"]
    assert "springfield il" not in index.by_label
    assert len(index.by_key) == 1


def test_first_label_wins():
    first = CityRecord("Twin", "ZZ", 1.0, 1.0, 10)
    second = CityRecord("Twin", "ZZ", 2.0, 2.0, 20)
    index = CityIndex([first, second])

    assert index.by_label["twin zz"] is first
    assert index.by_name["twin"] == [first, second]
    assert index.get_by_key(second.composite_key) is second


def test_get_by_key(sample_cities):
    index = CityIndex(sample_cities)
    chicago = sample_cities[1]

    assert index.get_by_key(chicago.composite_key) is chicago
    assert index.get_by_key("Nowhere|XX|0.0|0.0") is None
    assert index.get_by_key(None) is None

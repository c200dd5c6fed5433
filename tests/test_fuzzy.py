"""Tests for bounded edit-distance matching."""
from cityquiz.core.fuzzy import distance_threshold, bounded_edit_distance, best_within


def test_distance_threshold():
    assert distance_threshold(3) == 2
    assert distance_threshold(6) == 2
    assert distance_threshold(7) == 3
    assert distance_threshold(10) == 3
    assert distance_threshold(11) == 4


def test_bounded_edit_distance():
    assert bounded_edit_distance("springfield", "springfield", 4) == 0
    assert bounded_edit_distance("sprngfeld", "springfield", 3) == 2
    assert bounded_edit_distance("kitten", "sitting", 3) == 3


def test_bounded_edit_distance_rejects_over_bound():
    assert bounded_edit_distance("kitten", "sitting", 2) == 3
    # length difference alone exceeds the bound
    assert bounded_edit_distance("ab", "abcdef", 2) == 3


def test_best_within():
    choices = [("springfield", 1), ("peoria", 2), ("decatur", 3)]

    matches = list(best_within("sprngfeld", choices))
    assert matches == [("springfield", 1, 2)]

    assert list(best_within("xyz", choices)) == []

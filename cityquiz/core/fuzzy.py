"""Bounded edit-distance matching using RapidFuzz."""
from typing import Iterable, Optional, Tuple, TypeVar
from rapidfuzz.distance import Levenshtein

T = TypeVar("T")


def distance_threshold(length: int) -> int:
    """Maximum accepted edit distance for a query of the given length."""
    if length <= 6:
        return 2
    if length <= 10:
        return 3
    return 4


def bounded_edit_distance(a: str, b: str, max_distance: int) -> int:
    """
    Levenshtein distance with an upper bound.

    Args:
        a: First string
        b: Second string
        max_distance: Bound; anything larger is reported as max_distance + 1

    Returns:
        The edit distance, or max_distance + 1 when it exceeds the bound
    """
    if abs(len(a) - len(b)) > max_distance:
        return max_distance + 1
    return Levenshtein.distance(a, b, score_cutoff=max_distance)


def best_within(
    query: str,
    choices: Iterable[Tuple[str, T]],
    max_distance: Optional[int] = None
) -> Iterable[Tuple[str, T, int]]:
    """
    Yield every choice within the edit-distance bound of the query.

    Args:
        query: Normalized query string
        choices: (key, payload) pairs
        max_distance: Bound; defaults to distance_threshold(len(query))

    Yields:
        (key, payload, distance) for keys within the bound, in input order
    """
    if max_distance is None:
        max_distance = distance_threshold(len(query))
    for key, payload in choices:
        distance = bounded_edit_distance(query, key, max_distance)
        if distance <= max_distance:
            yield key, payload, distance

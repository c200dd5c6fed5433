"""Free-text city resolution: exact, abbreviation, prefix and fuzzy stages."""
from typing import List, Optional

from cityquiz.core.city_index import CityIndex
from cityquiz.core.fuzzy import best_within, distance_threshold
from cityquiz.core.models import CityRecord
from cityquiz.core.normalization import normalize_text, split_region_code, expand_abbreviations
from cityquiz.utils.logging import log_structured

# Largest population bonus subtracted from a fuzzy edit distance. Below one
# edit, so it only breaks ties between equally distant names.
POPULATION_BIAS_CAP = 0.1
POPULATION_BIAS_SCALE = 1e7


def by_population(records: List[CityRecord]) -> List[CityRecord]:
    """Sort descending by population; ties keep dataset order."""
    return sorted(records, key=lambda c: -(c.population or 0))


def in_region(records: List[CityRecord], state: Optional[str]) -> List[CityRecord]:
    if not state:
        return list(records)
    return [c for c in records if c.state.upper() == state]


class CityResolver:
    """Maps user input to zero or more city records."""

    def __init__(self, index: CityIndex):
        """
        Initialize resolver.

        Args:
            index: CityIndex over the active dataset. Rebuilding the index
                in place is picked up on the next call.
        """
        self.index = index

    def resolve(self, text: str) -> List[CityRecord]:
        """
        Resolve free text to city records.

        Resolution order, stopping at the first stage with a result:
        1. Exact "name, state" label
        2. Exact bare name, filtered by a trailing region code
        3. Same after expanding st/ft/mt abbreviations
        4. First label starting with the input
        5. Closest bare name by bounded edit distance

        A bare name shared by several states returns all of them unless a
        region code narrows it down.

        Args:
            text: Raw user input

        Returns:
            List of CityRecord, most populous first (empty if unresolved)
        """
        normalized = normalize_text(text)
        if not normalized:
            return []

        exact = self.index.by_label.get(normalized)
        if exact is not None:
            return [exact]

        name_part, state = split_region_code(normalized)
        found = self._lookup_name(name_part, state)
        if found:
            return found

        expanded = expand_abbreviations(name_part)
        if expanded != name_part:
            found = self._lookup_name(expanded, state)
            if found:
                return found

        for key, city in self.index.by_label.items():
            if key.startswith(normalized):
                return [city]

        found = self._fuzzy_lookup(expanded, state)
        if not found:
            log_structured("debug", "Guess rejected", input_text=text, normalized_text=normalized)
        return found

    def _lookup_name(self, name: str, state: Optional[str]) -> List[CityRecord]:
        candidates = self.index.by_name.get(name)
        if not candidates:
            return []
        return by_population(in_region(candidates, state))

    def _fuzzy_lookup(self, name: str, state: Optional[str]) -> List[CityRecord]:
        best_group = None
        best_score = float("inf")

        threshold = distance_threshold(len(name))
        for _key, group, distance in best_within(name, self.index.by_name.items(), threshold):
            if state and not in_region(group, state):
                continue
            top = by_population(group)[0]
            score = distance - min((top.population or 0) / POPULATION_BIAS_SCALE, POPULATION_BIAS_CAP)
            if score < best_score:
                best_score = score
                best_group = group

        if best_group is None:
            return []
        return by_population(in_region(best_group, state))

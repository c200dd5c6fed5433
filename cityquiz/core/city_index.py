"""Lookup structures over the active city dataset."""
from typing import Dict, Iterable, List, Optional

from cityquiz.core.models import CityRecord
from cityquiz.core.normalization import normalize_text, label_key


class CityIndex:
    """
    Three lookups over a dataset, rebuilt from scratch on every dataset change:

    - ``by_label``: normalized "name, state" -> first record with that label
    - ``by_name``: normalized name -> records sharing it, in dataset order
    - ``by_key``: composite key -> first record (used by restore)

    Plain dicts keep insertion order, so iteration follows dataset order.
    """

    def __init__(self, records: Optional[Iterable[CityRecord]] = None):
        self.records: List[CityRecord] = []
        self.by_label: Dict[str, CityRecord] = {}
        self.by_name: Dict[str, List[CityRecord]] = {}
        self.by_key: Dict[str, CityRecord] = {}
        if records is not None:
            self.rebuild(records)

    def rebuild(self, records: Iterable[CityRecord]):
        """Clear and repopulate every lookup from the given records."""
        self.records = list(records)
        self.by_label = {}
        self.by_name = {}
        self.by_key = {}

        for city in self.records:
            self.by_name.setdefault(normalize_text(city.name), []).append(city)
            self.by_label.setdefault(label_key(city.name, city.state), city)
            self.by_key.setdefault(city.composite_key, city)

    def __len__(self) -> int:
        return len(self.records)

    def get_by_key(self, composite_key: Optional[str]) -> Optional[CityRecord]:
        if not composite_key:
            return None
        return self.by_key.get(composite_key)

"""City dataset loading and population-cutoff selection."""
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import pandas as pd

from cityquiz.core.config import DATASET_CHOICES, DEFAULT_DATASET
from cityquiz.core.models import CityRecord
from cityquiz.utils.logging import log_structured

REQUIRED_COLUMNS = ("name", "state", "lat", "lon")
POPULATION_COLUMNS = ("population", "pop")


class DatasetError(Exception):
    """Raised when a city dataset cannot be loaded."""


def load_cities(csv_path: Path) -> List[CityRecord]:
    """
    Load city records from a CSV file.

    Expected columns: name, state, lat, lon, and optionally population
    (or pop). Missing populations count as 0. Row order is kept.

    Args:
        csv_path: Path to CSV file

    Returns:
        List of CityRecord in file order

    Raises:
        DatasetError: if the file is missing or lacks required columns
    """
    if not Path(csv_path).exists():
        raise DatasetError(f"City dataset not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype={"name": str, "state": str})

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise DatasetError(f"{csv_path} missing required fields: {', '.join(missing)}")

    pop_field = next((col for col in POPULATION_COLUMNS if col in df.columns), None)
    df = df.dropna(subset=list(REQUIRED_COLUMNS))

    records = []
    for row in df.itertuples(index=False):
        population = getattr(row, pop_field) if pop_field else 0
        records.append(CityRecord(
            name=str(row.name).strip(),
            state=str(row.state).strip(),
            lat=float(row.lat),
            lon=float(row.lon),
            population=0 if pd.isna(population) else int(population),
        ))

    log_structured("info", "Loaded city dataset", path=str(csv_path), cities=len(records))
    return records


class DatasetCatalog:
    """Interchangeable city datasets keyed by population cutoff ("50k", "30k")."""

    def __init__(self, sources: Optional[Mapping[str, Path]] = None, default: str = DEFAULT_DATASET):
        self.sources = dict(sources or DATASET_CHOICES)
        self.default = default if default in self.sources else next(iter(self.sources))
        self._cache: Dict[str, List[CityRecord]] = {}

    @property
    def choices(self) -> List[str]:
        return list(self.sources)

    def resolve_choice(self, cutoff: Optional[str]) -> str:
        """Known cutoff name, or the default for anything else."""
        return cutoff if cutoff in self.sources else self.default

    def get(self, cutoff: Optional[str]) -> List[CityRecord]:
        """Records for a cutoff, loaded once and cached."""
        choice = self.resolve_choice(cutoff)
        if choice not in self._cache:
            self._cache[choice] = load_cities(self.sources[choice])
        return self._cache[choice]

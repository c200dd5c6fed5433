"""Pytest configuration and fixtures."""
import pytest
import tempfile
import shutil
from pathlib import Path
from cityquiz.core.coverage_grid import build_grid
from cityquiz.core.models import CityRecord
from cityquiz.core.session import QuizSession
from cityquiz.core.storage import DuckDBProgressStore, MemoryProgressStore


@pytest.fixture
def sample_cities():
    """Small Midwest-heavy dataset with a few shared names."""
    return [
        CityRecord("New York", "NY", 40.7128, -74.006, 8336817),
        CityRecord("Chicago", "IL", 41.8781, -87.6298, 2693976),
        CityRecord("Springfield", "IL", 39.7817, -89.6501, 114230),
        CityRecord("Springfield", "MO", 37.2089, -93.2923, 167882),
        CityRecord("Springfield", "MA", 42.1015, -72.5898, 155929),
        CityRecord("Decatur", "IL", 39.8403, -88.9548, 70522),
        CityRecord("Saint Louis", "MO", 38.627, -90.1994, 300576),
        CityRecord("Fort Worth", "TX", 32.7555, -97.3308, 909585),
        CityRecord("Mount Vernon", "NY", 40.9126, -73.8371, 67345),
        CityRecord("Portland", "OR", 45.5051, -122.675, 654741),
        CityRecord("Portland", "ME", 43.6591, -70.2568, 66215),
        CityRecord("San José", "CA", 37.3382, -121.8863, 1021795),
        CityRecord("Peoria", "IL", 40.6936, -89.589, 113150),
    ]


@pytest.fixture
def small_grid():
    """Unmasked half-degree grid over the central Midwest."""
    return build_grid(36.0, 44.0, -95.0, -85.0, 0.5)


@pytest.fixture
def memory_store():
    return MemoryProgressStore()


@pytest.fixture
def temp_store():
    """Create temporary DuckDB progress store."""
    temp_dir = tempfile.mkdtemp()
    store = DuckDBProgressStore(Path(temp_dir) / "progress.duckdb")
    yield store
    store.close()
    shutil.rmtree(temp_dir)


@pytest.fixture
def session(sample_cities, small_grid, memory_store):
    """Quiz session over the sample cities, saving to memory."""
    return QuizSession(sample_cities, small_grid, memory_store)

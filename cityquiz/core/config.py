"""Configuration management for the city coverage quiz."""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))
PROGRESS_DB_PATH = Path(os.getenv("PROGRESS_DB_PATH", DATA_DIR / "duckdb" / "progress.duckdb"))

# City datasets (population cutoffs)
CITY_DATA_50K = Path(os.getenv("CITY_DATA_50K", DATA_DIR / "us_cities_50k.csv"))
CITY_DATA_30K = Path(os.getenv("CITY_DATA_30K", DATA_DIR / "us_cities_30k.csv"))
DATASET_CHOICES = {
    "50k": CITY_DATA_50K,
    "30k": CITY_DATA_30K,
}
DEFAULT_DATASET: str = os.getenv("DEFAULT_DATASET", "50k")

# Land boundary used to mask the coverage grid (optional)
LAND_BOUNDARY_PATH = Path(os.getenv("LAND_BOUNDARY_PATH", DATA_DIR / "us_land.geojson"))

# Coverage grid over the contiguous US
GRID_LAT_MIN: float = float(os.getenv("GRID_LAT_MIN", "24.0"))
GRID_LAT_MAX: float = float(os.getenv("GRID_LAT_MAX", "49.5"))
GRID_LON_MIN: float = float(os.getenv("GRID_LON_MIN", "-125.0"))
GRID_LON_MAX: float = float(os.getenv("GRID_LON_MAX", "-66.0"))
GRID_STEP_DEG: float = float(os.getenv("GRID_STEP_DEG", "0.25"))

# Difficulty -> circle radius in meters
DIFFICULTY_RADII_M = {
    "mega": 2_000_000,
    "easy": 300_000,
    "medium": 180_000,
    "hard": 100_000,
}
DEFAULT_DIFFICULTY: str = os.getenv("DEFAULT_DIFFICULTY", "medium")

# Map defaults (centered on the contiguous US)
MAP_CENTER_LAT: float = 39.5
MAP_CENTER_LON: float = -98.35
MAP_START_ZOOM: int = 4
MAP_GUESS_ZOOM: int = 6

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
ENABLE_PERSISTENCE: bool = os.getenv("ENABLE_PERSISTENCE", "true").lower() == "true"


def radius_for(difficulty: Optional[str]) -> int:
    """Radius in meters for a difficulty name, falling back to medium."""
    return DIFFICULTY_RADII_M.get(difficulty or "", DIFFICULTY_RADII_M["medium"])

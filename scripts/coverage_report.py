#!/usr/bin/env python3
"""CLI script to replay saved progress and print coverage stats."""
import argparse
import sys
from pathlib import Path
from cityquiz.core.config import (
    PROGRESS_DB_PATH, LAND_BOUNDARY_PATH,
    GRID_LAT_MIN, GRID_LAT_MAX, GRID_LON_MIN, GRID_LON_MAX, GRID_STEP_DEG,
)
from cityquiz.core.coverage_grid import build_grid
from cityquiz.core.datasets import DatasetCatalog
from cityquiz.core.polygon_mask import load_polygon_mask
from cityquiz.core.session import QuizSession
from cityquiz.core.storage import DuckDBProgressStore, CUTOFF_PREFERENCE, DEFAULT_PLAYER


def main():
    parser = argparse.ArgumentParser(description="Report coverage for saved quiz progress")
    parser.add_argument("--db-path", type=Path, default=PROGRESS_DB_PATH,
                       help="Progress DuckDB database path")
    parser.add_argument("--player", default=DEFAULT_PLAYER,
                       help="Player id (the app's ?player= URL parameter)")
    parser.add_argument("--cutoff", default=None,
                       help="Dataset cutoff (default: saved preference)")
    parser.add_argument("--boundary", type=Path, default=LAND_BOUNDARY_PATH,
                       help="Land boundary file used to mask the grid")
    parser.add_argument("--step", type=float, default=GRID_STEP_DEG,
                       help="Grid step in degrees")

    args = parser.parse_args()

    if not args.db_path.exists():
        print(f"Error: File not found: {args.db_path}", file=sys.stderr)
        sys.exit(1)

    store = DuckDBProgressStore(args.db_path, args.player)
    saved = store.load()
    catalog = DatasetCatalog()
    cutoff = catalog.resolve_choice(args.cutoff or store.get_preference(CUTOFF_PREFERENCE))
    store.close()

    if not saved:
        print("No saved progress")
        return

    print(f"Building grid (step {args.step}°)...")
    grid = build_grid(GRID_LAT_MIN, GRID_LAT_MAX, GRID_LON_MIN, GRID_LON_MAX, args.step,
                      load_polygon_mask(args.boundary))

    # No store: replaying must not rewrite the saved file
    session = QuizSession(catalog.get(cutoff), grid)
    session.restore(saved)
    stats = session.stats()

    print(f"Dataset:         {cutoff}")
    print(f"Circles:         {stats.circles}")
    print(f"Cities revealed: {stats.revealed}")
    print(f"Map covered:     {stats.covered_text}")


if __name__ == "__main__":
    main()

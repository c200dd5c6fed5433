#!/usr/bin/env python3
"""CLI script to check how city names resolve against a dataset."""
import argparse
from cityquiz.core.city_index import CityIndex
from cityquiz.core.datasets import DatasetCatalog
from cityquiz.core.resolver import CityResolver


def main():
    parser = argparse.ArgumentParser(description="Resolve city names")
    parser.add_argument("names", nargs="+", help="City names, e.g. 'Springfield, IL'")
    parser.add_argument("--cutoff", default=None, help="Dataset cutoff (50k or 30k)")

    args = parser.parse_args()

    resolver = CityResolver(CityIndex(DatasetCatalog().get(args.cutoff)))
    for name in args.names:
        matches = resolver.resolve(name)
        if not matches:
            print(f"{name!r}: no match")
            continue
        print(f"{name!r}:")
        for city in matches:
            print(f"  {city.label:<30} ({city.lat:.4f}, {city.lon:.4f})  pop {city.population:,}")


if __name__ == "__main__":
    main()

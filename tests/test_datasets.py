"""Tests for city dataset loading."""
import pytest
from cityquiz.core.config import CITY_DATA_50K, CITY_DATA_30K
from cityquiz.core.datasets import load_cities, DatasetCatalog, DatasetError


def write_csv(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_load_cities(tmp_path):
    path = write_csv(tmp_path / "cities.csv", (
        "name,state,lat,lon,population\n"
        "Springfield,IL,39.7817,-89.6501,114230\n"
        "San José,CA,37.3382,-121.8863,\n"
    ))

    cities = load_cities(path)

    assert [c.name for c in cities] == ["Springfield", "San José"]
    assert cities[0].population == 114230
    assert cities[0].lat == 39.7817
    assert cities[1].population == 0


def test_pop_column_alias(tmp_path):
    path = write_csv(tmp_path / "cities.csv", "name,state,lat,lon,pop\nBoise,ID,43.615,-116.2023,228959\n")
    assert load_cities(path)[0].population == 228959


def test_population_is_optional(tmp_path):
    path = write_csv(tmp_path / "cities.csv", "name,state,lat,lon\nBoise,ID,43.615,-116.2023\n")
    assert load_cities(path)[0].population == 0


def test_missing_columns(tmp_path):
    path = write_csv(tmp_path / "cities.csv", "name,lat,lon\nBoise,43.615,-116.2023\n")
    with pytest.raises(DatasetError):
        load_cities(path)


def test_missing_file(tmp_path):
    with pytest.raises(DatasetError):
        load_cities(tmp_path / "missing.csv")


def test_catalog_choices(tmp_path):
    big = write_csv(tmp_path / "big.csv", "name,state,lat,lon\nBoise,ID,43.615,-116.2023\n")
    small = write_csv(tmp_path / "small.csv", (
        "name,state,lat,lon\nBoise,ID,43.615,-116.2023\nHelena,MT,46.5891,-112.0391\n"
    ))
    catalog = DatasetCatalog({"50k": big, "30k": small}, default="50k")

    assert catalog.choices == ["50k", "30k"]
    assert catalog.resolve_choice("30k") == "30k"
    assert catalog.resolve_choice("10k") == "50k"
    assert catalog.resolve_choice(None) == "50k"
    assert len(catalog.get("30k")) == 2
    assert catalog.get("bogus") is catalog.get("50k")


def test_bundled_datasets():
    if not (CITY_DATA_50K.exists() and CITY_DATA_30K.exists()):
        pytest.skip("bundled datasets not available")

    large = load_cities(CITY_DATA_30K)
    small = load_cities(CITY_DATA_50K)

    assert len(large) > len(small)
    assert {c.composite_key for c in small} <= {c.composite_key for c in large}

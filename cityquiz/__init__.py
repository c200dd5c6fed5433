"""City coverage quiz: guess cities, cover the map."""

__version__ = "0.1.0"

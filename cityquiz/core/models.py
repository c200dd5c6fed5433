"""Data models for cities, circles, draw events and guess outcomes."""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple


@dataclass(frozen=True)
class CityRecord:
    """A city as loaded from a dataset. Never mutated."""
    name: str
    state: str
    lat: float
    lon: float
    population: int = 0

    @property
    def label(self) -> str:
        return f"{self.name}, {self.state}"

    @property
    def composite_key(self) -> str:
        """Exact identity key: name, state and coordinates as loaded."""
        return f"{self.name}|{self.state}|{self.lat!r}|{self.lon!r}"

    @property
    def center(self) -> Tuple[float, float]:
        return (self.lat, self.lon)


@dataclass(frozen=True)
class PlacedCircle:
    """A tolerance circle placed on the map."""
    lat: float
    lon: float
    radius_m: float
    city_key: Optional[str] = None

    @property
    def center(self) -> Tuple[float, float]:
        return (self.lat, self.lon)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted shape."""
        return {
            "lat": self.lat,
            "lon": self.lon,
            "radius": self.radius_m,
            "guessedKey": self.city_key,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacedCircle":
        """
        Build a circle from its persisted shape.

        Raises:
            KeyError, TypeError, ValueError: if the entry is malformed
        """
        key = data.get("guessedKey")
        return cls(
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            radius_m=float(data["radius"]),
            city_key=str(key) if key else None,
        )


# Draw events. The core returns these; the UI turns them into map layers.

@dataclass(frozen=True)
class DrawCircle:
    lat: float
    lon: float
    radius_m: float


@dataclass(frozen=True)
class DrawPoint:
    lat: float
    lon: float
    city_key: str
    label: Optional[str] = None


@dataclass(frozen=True)
class LabelPoint:
    """Attach a persistent label to an already drawn point."""
    city_key: str
    label: str


@dataclass(frozen=True)
class PanTo:
    lat: float
    lon: float
    zoom: int


@dataclass(frozen=True)
class ClearCircles:
    pass


@dataclass(frozen=True)
class ClearPoints:
    pass


@dataclass
class PlacementResult:
    """Result of placing a single circle."""
    placed: bool
    circle: Optional[PlacedCircle] = None
    revealed: List[CityRecord] = field(default_factory=list)
    newly_covered_weight: float = 0.0
    events: List[Any] = field(default_factory=list)


@dataclass
class GuessOutcome:
    """Result of submitting a guess."""
    status: str  # "rejected" | "placed"
    input_text: str = ""
    records: List[CityRecord] = field(default_factory=list)
    new_count: int = 0
    newly_covered_weight: float = 0.0
    events: List[Any] = field(default_factory=list)

    @property
    def rejected(self) -> bool:
        return self.status == "rejected"


@dataclass(frozen=True)
class SessionStats:
    circles: int
    revealed: int
    covered_percent: float
    covered_text: str

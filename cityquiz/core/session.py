"""Quiz session state: placed circles, revealed cities and covered area."""
from typing import Iterable, List, Optional, Sequence, Set

from cityquiz.core.city_index import CityIndex
from cityquiz.core.config import MAP_GUESS_ZOOM
from cityquiz.core.coverage_grid import CoverageGrid
from cityquiz.core.geodesy import distance_meters
from cityquiz.core.models import (
    CityRecord, PlacedCircle, PlacementResult, GuessOutcome, SessionStats,
    DrawCircle, DrawPoint, LabelPoint, PanTo, ClearCircles, ClearPoints,
)
from cityquiz.core.resolver import CityResolver
from cityquiz.core.storage import ProgressStore
from cityquiz.utils.error_handler import safe_execute
from cityquiz.utils.logging import log_structured

CENTER_TOLERANCE_DEG = 1e-6
RADIUS_TOLERANCE_M = 1e-6


def format_percent(value: float) -> str:
    """One decimal place, dropping a trailing ".0" (30.0 -> "30%")."""
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text}%"


class QuizSession:
    """
    Owns all mutable quiz state for one player.

    Operations return draw events instead of touching a map, so the
    session runs without any rendering surface. Persistence is best
    effort: a failing store is logged and ignored.
    """

    def __init__(
        self,
        records: Iterable[CityRecord],
        grid: CoverageGrid,
        store: Optional[ProgressStore] = None
    ):
        """
        Initialize session.

        Args:
            records: Active city dataset
            grid: Coverage grid, fixed for the session
            store: Optional progress store
        """
        self.index = CityIndex(records)
        self.resolver = CityResolver(self.index)
        self.grid = grid
        self.store = store

        self.circles: List[PlacedCircle] = []
        self.revealed_keys: Set[str] = set()
        self.labeled_keys: Set[str] = set()
        self.covered_indices: Set[int] = set()
        self.covered_weight: float = 0.0

    @property
    def cities(self) -> List[CityRecord]:
        return self.index.records

    def submit_guess(self, text: str, radius_m: float) -> GuessOutcome:
        """
        Resolve a guess and place a circle on every matching city.

        Args:
            text: Raw user input
            radius_m: Circle radius for the current difficulty

        Returns:
            GuessOutcome; status "rejected" when nothing matched
        """
        records = self.resolver.resolve(text)
        if not records:
            return GuessOutcome(status="rejected", input_text=text)

        outcome = GuessOutcome(status="placed", input_text=text, records=records)
        for record in records:
            result = self.place_circle(record, radius_m)
            outcome.new_count += len(result.revealed)
            outcome.newly_covered_weight += result.newly_covered_weight
            outcome.events.extend(result.events)

        first = records[0]
        outcome.events.append(PanTo(first.lat, first.lon, MAP_GUESS_ZOOM))
        log_structured(
            "info",
            "Guess placed",
            input_text=text,
            matches=len(records),
            new_cities=outcome.new_count,
            covered=self.stats().covered_text,
        )
        return outcome

    def place_circle(self, record: CityRecord, radius_m: float) -> PlacementResult:
        """
        Place a circle around a city: reveal, then cover, then persist.

        A circle with the same center and radius as an existing one is
        skipped without side effects.
        """
        if self._is_duplicate(record.lat, record.lon, radius_m):
            return PlacementResult(placed=False)

        circle = PlacedCircle(record.lat, record.lon, radius_m, record.composite_key)
        self.circles.append(circle)

        result = PlacementResult(placed=True, circle=circle)
        result.events.append(DrawCircle(circle.lat, circle.lon, radius_m))
        result.revealed = self._reveal(circle, result.events)
        result.newly_covered_weight = self._cover(circle)
        self._persist()
        return result

    def _is_duplicate(self, lat: float, lon: float, radius_m: float) -> bool:
        return any(
            abs(c.lat - lat) < CENTER_TOLERANCE_DEG
            and abs(c.lon - lon) < CENTER_TOLERANCE_DEG
            and abs(c.radius_m - radius_m) < RADIUS_TOLERANCE_M
            for c in self.circles
        )

    def _reveal(self, circle: PlacedCircle, events: list) -> List[CityRecord]:
        """Reveal unrevealed cities inside the circle; label the guessed one."""
        revealed = []
        for city in self.index.records:
            if distance_meters(circle.center, city.center) > circle.radius_m:
                continue
            key = city.composite_key
            is_guess = circle.city_key is not None and key == circle.city_key
            if key not in self.revealed_keys:
                self.revealed_keys.add(key)
                revealed.append(city)
                label = city.label if is_guess else None
                if label:
                    self.labeled_keys.add(key)
                events.append(DrawPoint(city.lat, city.lon, key, label))
            elif is_guess and key not in self.labeled_keys:
                self.labeled_keys.add(key)
                events.append(LabelPoint(key, city.label))
        return revealed

    def _cover(self, circle: PlacedCircle) -> float:
        added = 0.0
        for idx in self.grid.indices_within(circle.center, circle.radius_m):
            if idx in self.covered_indices:
                continue
            self.covered_indices.add(idx)
            weight = self.grid.weights[idx]
            self.covered_weight += weight
            added += weight
        return added

    def _persist(self):
        if self.store is not None:
            safe_execute(self.store.save, list(self.circles))

    def reset(self) -> list:
        """Clear all session state and saved progress. Dataset and grid stay."""
        self.circles = []
        self.revealed_keys = set()
        self.labeled_keys = set()
        self.covered_indices = set()
        self.covered_weight = 0.0
        if self.store is not None:
            safe_execute(self.store.clear)
        log_structured("info", "Session reset")
        return [ClearCircles(), ClearPoints()]

    def switch_dataset(self, records: Iterable[CityRecord]) -> list:
        """
        Swap the active dataset and recompute revealed cities.

        Every placed circle's reveal step is replayed in placement order
        against the new dataset. Coverage depends only on geometry and is
        left untouched.

        Args:
            records: New city dataset

        Returns:
            Draw events: ClearPoints followed by the replayed points
        """
        self.index.rebuild(records)
        self.revealed_keys = set()
        self.labeled_keys = set()

        events: list = [ClearPoints()]
        for circle in self.circles:
            self._reveal(circle, events)

        log_structured(
            "info",
            "Dataset switched",
            cities=len(self.index),
            revealed=len(self.revealed_keys),
        )
        return events

    def restore(self, saved: Optional[Sequence[PlacedCircle]]) -> list:
        """
        Replay saved circles as if they had just been submitted.

        Circles whose city is not in the current dataset are placed around
        a nameless placeholder at the saved center.

        Args:
            saved: Circles from ProgressStore.load(), or None

        Returns:
            Draw events for everything placed
        """
        events: list = []
        for entry in saved or ():
            city = self.index.get_by_key(entry.city_key)
            if city is None:
                city = CityRecord(name="", state="", lat=entry.lat, lon=entry.lon)
            events.extend(self.place_circle(city, entry.radius_m).events)
        return events

    def covered_percent(self) -> float:
        if not self.grid.total_weight:
            return 0.0
        return 100.0 * self.covered_weight / self.grid.total_weight

    def stats(self) -> SessionStats:
        percent = self.covered_percent()
        return SessionStats(
            circles=len(self.circles),
            revealed=len(self.revealed_keys),
            covered_percent=percent,
            covered_text=format_percent(percent),
        )

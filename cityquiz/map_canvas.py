"""Map collaborator: applies session draw events and renders pydeck layers."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import pydeck as pdk

from cityquiz.core.config import MAP_CENTER_LAT, MAP_CENTER_LON, MAP_START_ZOOM
from cityquiz.core.models import DrawCircle, DrawPoint, LabelPoint, PanTo, ClearCircles, ClearPoints

CIRCLE_FILL = [255, 107, 107, 38]
CIRCLE_LINE = [255, 143, 107, 230]
POINT_FILL = [63, 164, 255, 204]
POINT_LINE = [106, 209, 255, 255]
POINT_RADIUS_PX = 3


@dataclass
class MapCanvas:
    """What is currently drawn on the map."""
    circles: List[DrawCircle] = field(default_factory=list)
    points: Dict[str, DrawPoint] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    view: PanTo = field(default_factory=lambda: PanTo(MAP_CENTER_LAT, MAP_CENTER_LON, MAP_START_ZOOM))

    def apply(self, events: Iterable):
        """Apply draw events in order."""
        for event in events:
            if isinstance(event, DrawCircle):
                self.circles.append(event)
            elif isinstance(event, DrawPoint):
                self.points[event.city_key] = event
                if event.label:
                    self.labels[event.city_key] = event.label
            elif isinstance(event, LabelPoint):
                if event.city_key in self.points:
                    self.labels[event.city_key] = event.label
            elif isinstance(event, PanTo):
                self.view = PanTo(event.lat, event.lon, max(event.zoom, self.view.zoom))
            elif isinstance(event, ClearCircles):
                self.circles = []
            elif isinstance(event, ClearPoints):
                self.points = {}
                self.labels = {}

    def layers(self) -> List[pdk.Layer]:
        layers = [
            pdk.Layer(
                "ScatterplotLayer",
                data=[{"lon": c.lon, "lat": c.lat, "radius": c.radius_m} for c in self.circles],
                get_position=["lon", "lat"],
                get_radius="radius",
                radius_units="meters",
                get_fill_color=CIRCLE_FILL,
                get_line_color=CIRCLE_LINE,
                stroked=True,
                line_width_min_pixels=2,
            ),
            pdk.Layer(
                "ScatterplotLayer",
                data=[
                    {"lon": p.lon, "lat": p.lat, "name": self.labels.get(key, "")}
                    for key, p in self.points.items()
                ],
                get_position=["lon", "lat"],
                get_radius=POINT_RADIUS_PX,
                radius_units="pixels",
                get_fill_color=POINT_FILL,
                get_line_color=POINT_LINE,
                stroked=True,
                line_width_min_pixels=1,
                pickable=True,
            ),
        ]
        if self.labels:
            layers.append(pdk.Layer(
                "TextLayer",
                data=[
                    {"lon": self.points[key].lon, "lat": self.points[key].lat, "name": label}
                    for key, label in self.labels.items()
                    if key in self.points
                ],
                get_position=["lon", "lat"],
                get_text="name",
                get_size=12,
                get_pixel_offset=[0, -12],
                get_color=[40, 40, 40, 255],
            ))
        return layers

    def deck(self, map_style: Optional[str] = None) -> pdk.Deck:
        view_state = pdk.ViewState(
            longitude=self.view.lon,
            latitude=self.view.lat,
            zoom=self.view.zoom,
            pitch=0,
        )
        return pdk.Deck(
            map_style=map_style,
            initial_view_state=view_state,
            layers=self.layers(),
            tooltip={"text": "{name}"},
        )

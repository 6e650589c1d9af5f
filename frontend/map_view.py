"""Click capture and result drawing on the world map.

InteractiveMap holds no game logic. It turns clicks into LocationSelected
events for a single registered handler and projects its three inputs
(selected location, actual location, show_result) onto a MapSurface.
FoliumSurface is the concrete surface, rendered through streamlit-folium.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

import folium
from streamlit_folium import st_folium

from frontend.config import (
    ACTUAL_MARKER_COLOR,
    FIT_PADDING,
    GUESS_MARKER_COLOR,
    LINE_COLOR,
    MAP_CENTER,
    MAP_HEIGHT,
    MAP_MIN_ZOOM,
    MAP_TILES,
)
from frontend.geo import Coordinate

logger = logging.getLogger(__name__)

GUESS = "guess"
ACTUAL = "actual"


@dataclass(frozen=True)
class LocationSelected:
    coordinate: Coordinate


class MapSurface(Protocol):
    def render_marker(self, coordinate: Coordinate, kind: str) -> None: ...

    def render_line(self, start: Coordinate, end: Coordinate) -> None: ...

    def fit_view(self, points: Sequence[Coordinate], padding: Tuple[int, int]) -> None: ...

    def clear(self) -> None: ...

    def dispose(self) -> None: ...


class InteractiveMap:
    def __init__(self, surface: MapSurface):
        self.surface: Optional[MapSurface] = surface
        self.show_result = False
        self.selected_location: Optional[Coordinate] = None
        self._handler: Optional[Callable[[LocationSelected], object]] = None

    def on_location_selected(self, handler: Callable[[LocationSelected], object]) -> None:
        self._handler = handler

    def handle_click(self, coordinate: Coordinate) -> bool:
        """Post a LocationSelected event.

        Clicks during result display are dropped, and so is a click at the
        location already selected: the widget keeps reporting its last click
        on every rerun.
        """
        if self.show_result or self._handler is None or coordinate == self.selected_location:
            logger.debug("Dropping map click at %s", coordinate)
            return False
        self._handler(LocationSelected(coordinate))
        return True

    def update(
        self,
        selected_location: Optional[Coordinate],
        actual_location: Optional[Coordinate],
        show_result: bool,
    ) -> None:
        if self.surface is None:
            raise RuntimeError("InteractiveMap used after dispose()")
        self.show_result = show_result
        self.selected_location = selected_location
        surface = self.surface
        surface.clear()

        # The answer marker and connector supersede the guess marker
        if show_result and selected_location is not None and actual_location is not None:
            surface.render_marker(actual_location, ACTUAL)
            surface.render_line(selected_location, actual_location)
            surface.fit_view([selected_location, actual_location], FIT_PADDING)
        elif not show_result and selected_location is not None:
            surface.render_marker(selected_location, GUESS)

    def dispose(self) -> None:
        if self.surface is not None:
            self.surface.dispose()
        self.surface = None
        self.selected_location = None
        self._handler = None


class FoliumSurface:
    """MapSurface backed by a folium map, rebuilt on every clear()."""

    def __init__(self, center: Tuple[float, float] = MAP_CENTER, zoom: int = MAP_MIN_ZOOM, tiles: str = MAP_TILES):
        self.center = center
        self.zoom = zoom
        self.tiles = tiles
        self.map: Optional[folium.Map] = None
        self.markers: List[folium.Marker] = []
        self.line: Optional[folium.PolyLine] = None
        self.bounds: Optional[List[List[float]]] = None
        self.clear()

    def clear(self) -> None:
        self.map = folium.Map(
            location=list(self.center),
            zoom_start=self.zoom,
            min_zoom=self.zoom,
            tiles=self.tiles,
            world_copy_jump=True,
        )
        self.markers = []
        self.line = None
        self.bounds = None

    def render_marker(self, coordinate: Coordinate, kind: str) -> None:
        if kind == ACTUAL:
            # Answer marker: filled circle in a distinct color
            icon = folium.DivIcon(
                html=(
                    f'<div style="background-color: {ACTUAL_MARKER_COLOR}; width: 20px; height: 20px; '
                    'border-radius: 50%; border: 2px solid white;"></div>'
                ),
                icon_size=(20, 20),
                icon_anchor=(10, 10),
                class_name="actual-marker",
            )
            marker = folium.Marker(location=coordinate.as_list(), icon=icon, tooltip="Actual Location")
        else:
            marker = folium.Marker(
                location=coordinate.as_list(),
                icon=folium.Icon(color=GUESS_MARKER_COLOR),
                tooltip="Your Guess",
            )
        marker.add_to(self.map)
        self.markers.append(marker)

    def render_line(self, start: Coordinate, end: Coordinate) -> None:
        self.line = folium.PolyLine(
            locations=[start.as_list(), end.as_list()],
            color=LINE_COLOR,
            weight=2,
            opacity=0.8,
        )
        self.line.add_to(self.map)

    def fit_view(self, points: Sequence[Coordinate], padding: Tuple[int, int]) -> None:
        lats = [p.latitude for p in points]
        lngs = [p.longitude for p in points]
        self.bounds = [[min(lats), min(lngs)], [max(lats), max(lngs)]]
        self.map.fit_bounds(self.bounds, padding=padding)

    def show(self, key: str, height: int = MAP_HEIGHT) -> Optional[Coordinate]:
        """Render into the current Streamlit page and return the last click, if any."""
        map_data = st_folium(
            self.map,
            key=key,
            height=height,
            use_container_width=True,
            returned_objects=["last_clicked"],
        )
        last_clicked = map_data.get("last_clicked") if map_data else None
        if not last_clicked:
            return None
        return Coordinate.from_click(last_clicked["lat"], last_clicked["lng"])

    def dispose(self) -> None:
        self.map = None
        self.markers = []
        self.line = None
        self.bounds = None

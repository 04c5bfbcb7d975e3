"""Named places per layer, with Skyview Tower launch heights merged in.

The tower markers in the map data only carry the ground anchor. The height a
tower launches the player to was measured in game, see
https://www.reddit.com/r/tearsofthekingdom/comments/154po5t/studied_the_skyview_towers_and_mapped_their/
and is added to the tower's own place as an extra point in the same column.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .aggregate import GroupedPoints, Pipeline
from .emit import render_grouped_lines
from .points import PointSet, points_from_locations
from .records import is_named_place
from .telemetry import TelemetryLogger


OUTPUT_NAME = "data-named-places.txt"
TOWER_LAYER = "Surface"
TOWER_MARKER = "Skyview Tower"

LAUNCH_HEIGHTS = MappingProxyType({
    "Eldin Canyon Skyview Tower": 1366,
    "Gerudo Canyon Skyview Tower": 1453,
    "Gerudo Highlands Skyview Tower": 1054,
    "Hyrule Field Skyview Tower": 754,
    "Lindor's Brow Skyview Tower": 1053,
    "Lookout Landing Skyview Tower": 754,
    "Mount Lanayru Skyview Tower": 1453,
    "Pikida Stonegrove Skyview Tower": 1054,
    "Popla Foothills Skyview Tower": 754,
    "Rospro Pass Skyview Tower": 1053,
    "Sahasra Slope Skyview Tower": 754,
    "Thyphlo Ruins Skyview Tower": 754,
    "Upland Zorana Skyview Tower": 1053,
})  # type: Mapping[str, int]


def place_path(layer: str, name: str) -> str:
    return "{}/{}".format(layer, name)


class PlaceEntry(PointSet):
    def __init__(self, layer: str, name: str):
        super().__init__()
        self.layer = layer
        self.name = name

    @property
    def path(self) -> str:
        return place_path(self.layer, self.name)

    def __repr__(self) -> str:
        return "PlaceEntry({!r}, {} points)".format(self.path, len(self))


class PlaceStats(object):
    def __init__(self):
        self.files = 0
        self.places = 0
        self.points = 0
        self.launches = 0
        self.launched = []  # type: List[str]

    def as_fields(self) -> Dict[str, int]:
        return {
            "files": self.files,
            "places": self.places,
            "points": self.points,
            "launches": self.launches
        }


def launch_height(place: PlaceEntry,
                  heights: Mapping[str, int] = LAUNCH_HEIGHTS) -> Optional[int]:
    if place.layer != TOWER_LAYER:
        return None
    if TOWER_MARKER not in place.name:
        return None
    return heights.get(place.name)


def inject_launch_height(place: PlaceEntry,
                         heights: Mapping[str, int] = LAUNCH_HEIGHTS) -> bool:
    """Add the tower's launch point above its first recorded point.

    Returns True when a new point was added.
    """
    z = launch_height(place, heights)
    if z is None:
        return False
    base = place.first()
    if base is None:
        return False
    return place.add(base.with_z(z))


def extract_named_places(layer: str, records: Iterable[Any], places: GroupedPoints,
                         stats: PlaceStats,
                         heights: Mapping[str, int] = LAUNCH_HEIGHTS) -> int:
    processed = 0
    for record in records:
        if not is_named_place(record):
            continue
        name = record["name"].strip()
        place = places.get_or_create(
            place_path(layer, name), lambda: PlaceEntry(layer, name)
        )

        stats.points += place.update(points_from_locations(record["locations"]))
        if inject_launch_height(place, heights):
            stats.points += 1
            stats.launches += 1
            stats.launched.append(place.name)

        stats.places += 1
        processed += 1
    return processed


class NamedPlacesPipeline(Pipeline):
    name = "named-places"
    output_name = OUTPUT_NAME

    def __init__(self, heights: Mapping[str, int] = LAUNCH_HEIGHTS):
        self.places = GroupedPoints()
        self.stats = PlaceStats()
        self.heights = heights

    def fold_layer(self, layer: str, records: Iterable[Any],
                   telemetry: Optional[TelemetryLogger] = None) -> Dict[str, Any]:
        launches_before = self.stats.launches
        count = extract_named_places(layer, records, self.places, self.stats, self.heights)
        if telemetry is not None:
            for name in self.stats.launched[launches_before:]:
                telemetry.log("+ launch height added", fields={"place": name})
        self.stats.files += 1
        return {
            "layer": layer,
            "places": count,
            "launches": self.stats.launches - launches_before,
            "totalPlaces": len(self.places)
        }

    def render(self) -> List[str]:
        return render_grouped_lines(self.places)

    def summary(self) -> Dict[str, Any]:
        fields = self.stats.as_fields()
        fields["uniquePlaces"] = len(self.places)
        return fields


__all__ = [
    "LAUNCH_HEIGHTS",
    "NamedPlacesPipeline",
    "PlaceEntry",
    "PlaceStats",
    "extract_named_places",
    "inject_launch_height",
    "launch_height",
    "place_path"
]

import math
from typing import Any, Iterable, Iterator, List, Optional

from typing_extensions import TypedDict


class RawLocation(TypedDict, total=False):
    x: float
    y: float
    z: float


def coerce_coordinate(value: Any) -> float:
    # Anything that is not a plain number becomes NaN and is carried through.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return float("nan")
    return value


def round_coordinate(value: Any) -> Any:
    """Round half toward positive infinity: 2.5 -> 3, -2.5 -> -2.

    Non-finite values are returned unchanged so they show up in the output
    as NaN / Infinity tokens.
    """
    value = coerce_coordinate(value)
    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        return value
    # value - floor is exact for finite floats.
    floor = math.floor(value)
    return int(floor) + (1 if value - floor >= 0.5 else 0)


def _format_coordinate(value: Any) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return str(value)


class Point(object):
    """Rounded world coordinate, rendered in (y,x,z) order.

    The stored fields keep the source's own axis names; the only swap is in
    how the string is composed.
    """

    __slots__ = ("y", "x", "z")

    def __init__(self, x: Any, y: Any, z: Any):
        object.__setattr__(self, "y", round_coordinate(y))
        object.__setattr__(self, "x", round_coordinate(x))
        object.__setattr__(self, "z", round_coordinate(z))

    def __setattr__(self, name, value):
        raise AttributeError("Point is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return point_key(self) == point_key(other)

    def __hash__(self) -> int:
        return hash(point_key(self))

    @classmethod
    def from_location(cls, location: RawLocation) -> "Point":
        return cls(location.get("x"), location.get("y"), location.get("z"))

    def with_z(self, z: Any) -> "Point":
        return Point(self.x, self.y, z)

    def __str__(self) -> str:
        return format_point(self)

    def __repr__(self) -> str:
        return "Point{}".format(format_point(self))


def format_point(point: Point) -> str:
    return "({},{},{})".format(
        _format_coordinate(point.y),
        _format_coordinate(point.x),
        _format_coordinate(point.z)
    )


def point_key(point: Point) -> str:
    # Two points are the same point when their rendered forms match.
    return format_point(point)


def points_from_locations(locations: Iterable[Any]) -> List[Point]:
    points = []  # type: List[Point]
    for location in locations:
        if not isinstance(location, dict):
            location = {}
        points.append(Point.from_location(location))
    return points


class PointSet(object):
    """Insertion-ordered set of points, deduplicated by point_key."""

    def __init__(self, points: Optional[Iterable[Point]] = None):
        self._points = {}  # type: dict
        if points:
            self.update(points)

    def add(self, point: Point) -> bool:
        key = point_key(point)
        if key in self._points:
            return False
        self._points[key] = point
        return True

    def update(self, points: Iterable[Point]) -> int:
        added = 0
        for point in points:
            if self.add(point):
                added += 1
        return added

    def first(self) -> Optional[Point]:
        for point in self._points.values():
            return point
        return None

    def __contains__(self, point: object) -> bool:
        if not isinstance(point, Point):
            return False
        return point_key(point) in self._points

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points.values())

    def __len__(self) -> int:
        return len(self._points)

    def tokens(self) -> List[str]:
        return list(self._points.keys())


__all__ = [
    "Point",
    "PointSet",
    "RawLocation",
    "coerce_coordinate",
    "format_point",
    "point_key",
    "points_from_locations",
    "round_coordinate"
]

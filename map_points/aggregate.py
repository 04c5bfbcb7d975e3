from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .points import Point, PointSet
from .telemetry import TelemetryLogger


class GroupedPoints(object):
    """Keyed point sets; every key owns one deduplicated PointSet."""

    def __init__(self):
        self._groups = OrderedDict()  # type: OrderedDict

    def get(self, key: str) -> Optional[PointSet]:
        return self._groups.get(key)

    def get_or_create(self, key: str, create: Callable[[], PointSet] = PointSet) -> PointSet:
        group = self._groups.get(key)
        if group is None:
            group = create()
            self._groups[key] = group
        return group

    def add_points(self, key: str, points: Iterable[Point]) -> int:
        return self.get_or_create(key).update(points)

    def sorted_items(self) -> List[Tuple[str, PointSet]]:
        return [(key, self._groups[key]) for key in sorted(self._groups.keys())]

    def __contains__(self, key: object) -> bool:
        return key in self._groups

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)


class Pipeline(object):
    """One output file built by folding every layer into its own aggregate.

    Subclasses set ``name`` and ``output_name`` and implement fold_layer(),
    render() and summary(). A pipeline instance is used for a single run.
    """

    name = ""
    output_name = ""

    def fold_layer(self, layer: str, records: Iterable[Any],
                   telemetry: Optional[TelemetryLogger] = None) -> Dict[str, Any]:
        # Returns per-layer counts for progress reporting.
        raise NotImplementedError

    def render(self) -> List[str]:
        raise NotImplementedError

    def summary(self) -> Dict[str, Any]:
        return {}


__all__ = ["GroupedPoints", "Pipeline"]

from typing import Any, Dict, Iterable, List, Optional

from .aggregate import GroupedPoints, Pipeline
from .emit import render_grouped_lines
from .points import points_from_locations
from .records import is_object_record, split_labels
from .telemetry import TelemetryLogger


OUTPUT_NAME = "data-object-locations.txt"


def extract_object_locations(records: Iterable[Any], groups: GroupedPoints) -> int:
    """Fold object records into per-label point sets.

    Every label of a record gets every point of that record. Returns the
    number of labels processed.
    """
    added = 0
    for record in records:
        if not is_object_record(record):
            continue
        points = points_from_locations(record["locations"])
        for label in split_labels(record["name"]):
            groups.add_points(label, points)
            added += 1
    return added


class ObjectLocationsPipeline(Pipeline):
    name = "object-locations"
    output_name = OUTPUT_NAME

    def __init__(self):
        self.groups = GroupedPoints()
        self.labels = 0

    def fold_layer(self, layer: str, records: Iterable[Any],
                   telemetry: Optional[TelemetryLogger] = None) -> Dict[str, Any]:
        count = extract_object_locations(records, self.groups)
        self.labels += count
        return {"entries": count}

    def render(self) -> List[str]:
        return render_grouped_lines(self.groups)

    def summary(self) -> Dict[str, Any]:
        return {"labels": self.labels, "objects": len(self.groups)}

from typing import Any, Dict, Iterable, List, Optional, Set

from .aggregate import Pipeline
from .emit import render_flat_lines
from .records import is_inventory_record, split_labels
from .telemetry import TelemetryLogger


OUTPUT_NAME = "data-object-inventory.txt"
DROPPED_ICON_SEGMENTS = ("Icon", "Tag")


def icon_path(icon: str) -> str:
    # "Icon_Weapon_Tag_Sword" -> "Weapon/Sword"
    segments = [s for s in icon.split("_") if s not in DROPPED_ICON_SEGMENTS]
    return "/".join(segments)


def inventory_line(icon: str, label: str) -> str:
    return "{}/{}".format(icon_path(icon), label)


def extract_inventory(records: Iterable[Any], lines: Set[str]) -> int:
    added = 0
    for record in records:
        if not is_inventory_record(record):
            continue
        labels = split_labels(record["name"])
        for icon, label in zip(record["icons"], labels):
            lines.add(inventory_line(icon, label))
            added += 1
    return added


class ObjectInventoryPipeline(Pipeline):
    name = "object-inventory"
    output_name = OUTPUT_NAME

    def __init__(self):
        self.lines = set()  # type: Set[str]

    def fold_layer(self, layer: str, records: Iterable[Any],
                   telemetry: Optional[TelemetryLogger] = None) -> Dict[str, Any]:
        return {"entries": extract_inventory(records, self.lines)}

    def render(self) -> List[str]:
        return render_flat_lines(self.lines)

    def summary(self) -> Dict[str, Any]:
        return {"uniqueEntries": len(self.lines)}

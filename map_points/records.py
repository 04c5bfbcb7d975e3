from typing import Any, List

from typing_extensions import TypedDict

from .points import RawLocation


LABEL_SEPARATOR = " : "
NAMED_PLACE_TYPES = ("LocationArea", "LocationMarker")


class ObjectComponentRecord(TypedDict, total=False):
    name: str
    locations: List[RawLocation]
    icons: List[str]


class NamedPlaceRecord(TypedDict, total=False):
    type: str
    name: str
    locations: List[RawLocation]


def _has_locations(record: Any) -> bool:
    locations = record.get("locations")
    return isinstance(locations, list) and len(locations) > 0


def split_labels(name: str) -> List[str]:
    return name.split(LABEL_SEPARATOR)


def is_object_record(record: Any) -> bool:
    if not isinstance(record, dict):
        return False
    name = record.get("name")
    if not isinstance(name, str) or name == "":
        return False
    return _has_locations(record)


def is_inventory_record(record: Any) -> bool:
    # Icons are paired positionally with labels, so the counts must agree.
    if not is_object_record(record):
        return False
    icons = record.get("icons")
    if not isinstance(icons, list) or not icons:
        return False
    for icon in icons:
        if not isinstance(icon, str):
            return False
    return len(icons) == len(split_labels(record["name"]))


def is_named_place(record: Any) -> bool:
    if not isinstance(record, dict):
        return False
    if record.get("type") not in NAMED_PLACE_TYPES:
        return False
    name = record.get("name")
    if not isinstance(name, str) or name.strip() == "":
        return False
    return _has_locations(record)


__all__ = [
    "LABEL_SEPARATOR",
    "NAMED_PLACE_TYPES",
    "NamedPlaceRecord",
    "ObjectComponentRecord",
    "is_inventory_record",
    "is_named_place",
    "is_object_record",
    "split_labels"
]

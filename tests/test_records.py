from map_points.layers import layer_name_from_path
from map_points.records import (
    is_inventory_record,
    is_named_place,
    is_object_record,
    split_labels,
)


LOC = {"x": 1, "y": 2, "z": 3}


def test_split_labels_uses_spaced_colon():
    assert split_labels("Apple : Banana") == ["Apple", "Banana"]
    assert split_labels("Apple:Banana") == ["Apple:Banana"]


def test_object_record_needs_name_and_locations():
    assert is_object_record({"name": "Apple", "locations": [LOC]})
    assert not is_object_record({"name": "Apple", "locations": []})
    assert not is_object_record({"name": "", "locations": [LOC]})
    assert not is_object_record({"name": 5, "locations": [LOC]})
    assert not is_object_record({"locations": [LOC]})
    assert not is_object_record(None)


def test_inventory_record_needs_matching_icon_count():
    record = {"name": "Apple : Banana", "locations": [LOC], "icons": ["Icon_A", "Icon_B"]}
    assert is_inventory_record(record)
    assert not is_inventory_record(dict(record, icons=["Icon_A"]))
    assert not is_inventory_record(dict(record, icons=["Icon_A", None]))
    assert not is_inventory_record(dict(record, icons=None))
    assert not is_inventory_record(dict(record, locations=[]))


def test_named_place_filters_type_and_blank_names():
    record = {"type": "LocationArea", "name": "Lookout Landing", "locations": [LOC]}
    assert is_named_place(record)
    assert is_named_place(dict(record, type="LocationMarker"))
    assert not is_named_place(dict(record, type="Location"))
    assert not is_named_place(dict(record, name="   "))
    assert not is_named_place(dict(record, locations=[]))


def test_layer_name_from_file_name():
    assert layer_name_from_path("data/v1.2.0/layers/sky.json") == "Sky"
    assert layer_name_from_path("data/v1.2.0/layers/surface.json") == "Surface"
    assert layer_name_from_path("data/v1.2.0/layers/cave.json") == "Cave"
    assert layer_name_from_path("data/v1.2.0/layers/depths.json") == "Depths"
    assert layer_name_from_path("/home/skyler/caves/surface.json") == "Surface"

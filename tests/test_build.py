import json
import os

import pytest

from map_points import run_standalone
from map_points.build import resolve_targets, run_build
from map_points.config import resolve_config
from map_points.layers import DEFAULT_DATA_DIR, LayerDataError


SKY = {
    "a1": {
        "name": "Apple : Banana",
        "locations": [{"x": 1, "y": 2, "z": 3}],
        "icons": ["Icon_Food_Apple", "Icon_Food_Banana"],
    },
    "b2": {
        "type": "LocationMarker",
        "name": "Sky Island",
        "locations": [{"x": 10.4, "y": 20.6, "z": 30.5}],
    },
    "c3": {"name": "Empty", "locations": [], "icons": ["Icon_Empty"]},
}

SURFACE = {
    "t1": {
        "type": "LocationMarker",
        "name": "Hyrule Field Skyview Tower",
        "locations": [{"x": 100, "y": 5, "z": 200}],
    },
    "a2": {
        "name": "Apple",
        "locations": [{"x": 1, "y": 2, "z": 3}, {"x": 4, "y": 5, "z": 6}],
        "icons": ["Icon_Food_Apple"],
    },
}


def _config(data_dir, out_dir, **kwargs):
    return resolve_config(data_dir=str(data_dir), out_dir=str(out_dir), quiet=True,
                          environ={}, **kwargs)


def _read(out_dir, name):
    with open(os.path.join(str(out_dir), name), "rb") as handle:
        return handle.read().decode("utf8")


def test_full_build_writes_all_outputs(data_dir, out_dir, write_layer):
    write_layer("sky.json", SKY)
    write_layer("surface.json", SURFACE)

    results = run_build(_config(data_dir, out_dir))

    assert list(results.keys()) == ["object-locations", "named-places", "object-inventory"]
    assert _read(out_dir, "data-object-locations.txt") == (
        "Apple (2,1,3) (5,4,6)\n"
        "Banana (2,1,3)\n"
        "Hyrule Field Skyview Tower (5,100,200)\n"
        "Sky Island (21,10,31)\n"
    )
    assert _read(out_dir, "data-named-places.txt") == (
        "Sky/Sky Island (21,10,31)\n"
        "Surface/Hyrule Field Skyview Tower (5,100,200) (5,100,754)\n"
    )
    assert _read(out_dir, "data-object-inventory.txt") == (
        "Food/Apple/Apple\n"
        "Food/Banana/Banana\n"
    )
    assert results["named-places"]["files"] == 2
    assert results["named-places"]["launches"] == 1
    assert results["object-inventory"]["lines"] == 2


def test_build_is_idempotent(data_dir, out_dir, write_layer):
    write_layer("surface.json", SURFACE)
    write_layer("depths.json", SKY)
    config = _config(data_dir, out_dir)

    run_build(config)
    first = {name: _read(out_dir, name) for name in os.listdir(str(out_dir))}
    run_build(config)
    second = {name: _read(out_dir, name) for name in os.listdir(str(out_dir))}
    assert first == second


def test_output_is_sorted_and_deduplicated(data_dir, out_dir, write_layer):
    write_layer("sky.json", SKY)
    write_layer("surface.json", SURFACE)
    write_layer("cave.json", SURFACE)
    run_build(_config(data_dir, out_dir), ["object-locations", "named-places"])

    for name in ("data-object-locations.txt", "data-named-places.txt"):
        lines = _read(out_dir, name).splitlines()
        keys = [line.split(" (", 1)[0] for line in lines]
        assert keys == sorted(keys)
        assert len(keys) == len(set(keys))
        for line in lines:
            tokens = line.split(" (", 1)[1].split(" ")
            assert len(tokens) == len(set(tokens))


def test_missing_layers_are_skipped(data_dir, out_dir, write_layer, capsys):
    write_layer("surface.json", SURFACE)
    config = resolve_config(data_dir=str(data_dir), out_dir=str(out_dir), environ={})

    results = run_build(config, ["named-places"])

    assert results["named-places"]["files"] == 1
    output = capsys.readouterr().out
    assert output.count("skipping missing layer file") == 3
    assert "START named-places" in output
    assert ">> START read surface.json" in output


def test_no_layers_writes_single_newline(data_dir, out_dir):
    run_build(_config(data_dir, out_dir), ["object-inventory"])
    assert _read(out_dir, "data-object-inventory.txt") == "\n"


def test_malformed_json_aborts_without_output(data_dir, out_dir, write_layer):
    write_layer("surface.json", SURFACE)
    (data_dir / "sky.json").write_text("{not json", encoding="utf8")

    with pytest.raises(json.JSONDecodeError):
        run_build(_config(data_dir, out_dir), ["object-locations"])
    assert not os.path.exists(os.path.join(str(out_dir), "data-object-locations.txt"))


def test_non_object_layer_is_rejected(data_dir, out_dir, write_layer):
    write_layer("cave.json", [SURFACE["a2"]])
    with pytest.raises(LayerDataError):
        run_build(_config(data_dir, out_dir), ["object-inventory"])


def test_telemetry_json_lists_each_target(data_dir, out_dir, write_layer, tmp_path):
    write_layer("sky.json", SKY)
    summary_path = tmp_path / "telemetry.json"

    run_build(_config(data_dir, out_dir, telemetry_json=str(summary_path)))

    payload = json.loads(summary_path.read_text(encoding="utf-8"))
    assert [s["name"] for s in payload["stages"]] == [
        "object-locations", "named-places", "object-inventory"
    ]
    assert payload["stages"][1]["children"][0]["name"] == "read sky.json"
    assert payload["stages"][1]["fields"]["uniquePlaces"] == 1


def test_resolve_targets_keeps_fixed_order():
    assert resolve_targets(None) == ["object-locations", "named-places", "object-inventory"]
    assert resolve_targets(["object-inventory", "named-places", "named-places"]) == [
        "named-places", "object-inventory"
    ]
    assert resolve_targets(["all", "named-places"]) == [
        "object-locations", "named-places", "object-inventory"
    ]
    with pytest.raises(ValueError):
        resolve_targets(["towers"])


def test_standalone_builds_only_requested_targets(data_dir, out_dir, write_layer):
    write_layer("surface.json", SURFACE)

    run_standalone(["named-places", "--data-dir", str(data_dir), "--out-dir", str(out_dir), "--quiet"])

    assert os.listdir(str(out_dir)) == ["data-named-places.txt"]


def test_standalone_rejects_unknown_target(data_dir, out_dir):
    with pytest.raises(SystemExit) as excinfo:
        run_standalone(["towers", "--data-dir", str(data_dir), "--out-dir", str(out_dir)])
    assert excinfo.value.code == 2


def test_config_prefers_arguments_over_environment():
    environ = {"MAP_POINTS_DATA_DIR": "env-layers", "MAP_POINTS_OUT_DIR": " ", "MAP_POINTS_TELEMETRY_JSON": "t.json"}
    config = resolve_config(environ=environ)
    assert config.data_dir == "env-layers"
    assert config.out_dir == "."
    assert config.telemetry_json == "t.json"

    config = resolve_config(data_dir="cli-layers", environ=environ)
    assert config.data_dir == "cli-layers"


def test_config_defaults():
    config = resolve_config(environ={})
    assert config.data_dir == DEFAULT_DATA_DIR
    assert config.out_dir == "."
    assert config.telemetry_json is None


def test_huge_integer_coordinates_pass_through(data_dir, out_dir, write_layer):
    huge = 10 ** 400
    write_layer("surface.json", {"o1": {"name": "Apple", "locations": [{"x": huge, "y": 2, "z": 3}]}})

    run_build(_config(data_dir, out_dir), ["object-locations"])

    assert _read(out_dir, "data-object-locations.txt") == "Apple (2,{},3)\n".format(huge)


def test_launch_heights_are_reported(data_dir, out_dir, write_layer, capsys):
    write_layer("surface.json", SURFACE)
    config = resolve_config(data_dir=str(data_dir), out_dir=str(out_dir), environ={})

    run_build(config, ["named-places"])

    output = capsys.readouterr().out
    assert '>>>> + launch height added place="Hyrule Field Skyview Tower"' in output

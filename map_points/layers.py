import json
import os
from collections import OrderedDict
from typing import Any, Iterator, List, Optional


DEFAULT_DATA_DIR = os.path.join("data", "v1.2.0", "layers")

# Read order matters: it fixes the insertion order of points within a line.
LAYER_FILES = (
    "sky.json",
    "surface.json",
    "cave.json",
    "depths.json",
)


class LayerDataError(ValueError):
    pass


def layer_paths(data_dir: str) -> List[str]:
    return [os.path.join(data_dir, name) for name in LAYER_FILES]


def layer_name_from_path(path: str) -> str:
    # Only the file name is inspected, so the directory can be anywhere.
    name = os.path.basename(path)
    if "depths" in name:
        return "Depths"
    if "sky" in name:
        return "Sky"
    if "cave" in name:
        return "Cave"
    return "Surface"


def load_layer(path: str) -> Optional[OrderedDict]:
    """Parse one layer file, or return None when it does not exist.

    Unparseable JSON raises json.JSONDecodeError; a top level that is not an
    object raises LayerDataError.
    """
    if not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf8") as handle:
        value = json.load(handle, object_pairs_hook=OrderedDict)
    if not isinstance(value, dict):
        raise LayerDataError("layer file {} must contain a JSON object, got {}".format(
            path, type(value).__name__
        ))
    return value


def iter_records(layer_data: OrderedDict) -> Iterator[Any]:
    return iter(layer_data.values())


__all__ = [
    "DEFAULT_DATA_DIR",
    "LAYER_FILES",
    "LayerDataError",
    "iter_records",
    "layer_name_from_path",
    "layer_paths",
    "load_layer"
]

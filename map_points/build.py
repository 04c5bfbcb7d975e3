import os
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Sequence

from .aggregate import Pipeline
from .config import BuildConfig
from .emit import write_lines
from .layers import iter_records, layer_name_from_path, layer_paths, load_layer
from .named_places import NamedPlacesPipeline
from .object_inventory import ObjectInventoryPipeline
from .object_locations import ObjectLocationsPipeline
from .telemetry import TelemetryLogger


PIPELINES = OrderedDict([
    (ObjectLocationsPipeline.name, ObjectLocationsPipeline),
    (NamedPlacesPipeline.name, NamedPlacesPipeline),
    (ObjectInventoryPipeline.name, ObjectInventoryPipeline),
])

ALL_TARGETS = "all"


def resolve_targets(targets: Optional[Sequence[str]]) -> List[str]:
    # Always returned in the fixed pipeline order, without duplicates.
    if not targets or ALL_TARGETS in targets:
        return list(PIPELINES.keys())
    unknown = [t for t in targets if t not in PIPELINES]
    if unknown:
        raise ValueError("unknown target(s): {}".format(", ".join(unknown)))
    return [name for name in PIPELINES.keys() if name in targets]


def run_pipeline(pipeline: Pipeline, config: BuildConfig,
                 telemetry: TelemetryLogger) -> Dict[str, Any]:
    stage = telemetry.start_stage(pipeline.name)
    files = 0
    for path in layer_paths(config.data_dir):
        layer_data = load_layer(path)
        if layer_data is None:
            telemetry.log("skipping missing layer file", fields={"path": path})
            continue
        layer = layer_name_from_path(path)
        layer_stage = telemetry.start_stage("read " + os.path.basename(path))
        fields = pipeline.fold_layer(layer, iter_records(layer_data), telemetry)
        telemetry.end_stage(layer_stage, fields)
        files += 1

    lines = pipeline.render()
    output_path = write_lines(os.path.join(config.out_dir, pipeline.output_name), lines)

    result = OrderedDict()  # type: Dict[str, Any]
    result["files"] = files
    result.update(pipeline.summary())
    result["lines"] = len(lines)
    result["output"] = output_path
    telemetry.end_stage(stage, result)
    return result


def run_build(config: BuildConfig, targets: Optional[Sequence[str]] = None,
              telemetry: Optional[TelemetryLogger] = None) -> Dict[str, Dict[str, Any]]:
    if telemetry is None:
        telemetry = TelemetryLogger("map-points", quiet=config.quiet)
    results = OrderedDict()  # type: Dict[str, Dict[str, Any]]
    for name in resolve_targets(targets):
        results[name] = run_pipeline(PIPELINES[name](), config, telemetry)
    if config.telemetry_json:
        telemetry.write_json(config.telemetry_json, extra={
            "dataDir": config.data_dir,
            "outDir": config.out_dir,
        })
    return results


__all__ = ["ALL_TARGETS", "PIPELINES", "resolve_targets", "run_build", "run_pipeline"]

import datetime
import json
import re
import time
from typing import Any, Dict, List, Optional


_WHITESPACE_RE = re.compile(r"\s")


def utc_ts_fixed() -> str:
    # Fixed-width UTC timestamp without timezone suffix.
    return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


class TelemetryLogger(object):
    """Console progress for a build: timestamped lines grouped into nested stages.

    Every line looks like ``<ts> [component] >> message key=value``; the
    number of ``>>`` markers is the stage depth. Closed stages are kept as a
    tree that can be dumped with write_json().
    """

    def __init__(self, component: str, base_depth: int = 0, quiet: bool = False):
        self.component = component
        self.base_depth = base_depth
        self.quiet = quiet
        self.started_at_utc = utc_ts_fixed()
        self.ended_at_utc = None  # type: Optional[str]
        self._stack = []  # type: List[Dict[str, Any]]
        self._roots = []  # type: List[Dict[str, Any]]

    def _marker(self, depth: int) -> str:
        if depth <= 0:
            return ""
        return ">>" * depth

    def _line(self, depth: int, message: str) -> None:
        if self.quiet:
            return
        marker = self._marker(depth)
        infix = (" " + marker + " ") if marker else " "
        print("{} [{}]{}{}".format(utc_ts_fixed(), self.component, infix, message))

    def _escape_field_value(self, value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        if _WHITESPACE_RE.search(value):
            return '"' + escaped + '"'
        return escaped

    def _format_fields(self, fields: Optional[Dict[str, Any]]) -> str:
        if not fields:
            return ""
        parts = []  # type: List[str]
        for key in sorted(fields.keys()):
            value = fields[key]
            if value is None:
                continue
            parts.append("{}={}".format(key, self._escape_field_value(str(value))))
        return " ".join(parts)

    def current_depth(self) -> int:
        return self.base_depth + len(self._stack)

    def log(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        rendered = message
        rendered_fields = self._format_fields(fields)
        if rendered_fields:
            rendered = "{} {}".format(rendered, rendered_fields)
        self._line(self.current_depth(), rendered)

    def start_stage(self, name: str) -> Dict[str, Any]:
        depth = self.current_depth()
        stage = {
            "name": name,
            "depth": depth,
            "startedAtUtc": utc_ts_fixed(),
            "startPerf": time.perf_counter(),
            "childSec": 0.0,
            "children": [],
        }  # type: Dict[str, Any]
        self._line(depth, "START " + name)
        self._stack.append(stage)
        return stage

    def end_stage(self, stage: Dict[str, Any], fields: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self._stack or self._stack[-1] is not stage:
            raise RuntimeError("Stage stack mismatch for '{}'".format(stage.get("name")))
        self._stack.pop()

        total_sec = time.perf_counter() - float(stage["startPerf"])
        child_sec = float(stage["childSec"])
        self_sec = max(total_sec - child_sec, 0.0)

        stage_fields = dict(fields or {})
        node = {
            "name": stage["name"],
            "startedAtUtc": stage["startedAtUtc"],
            "endedAtUtc": utc_ts_fixed(),
            "totalSec": total_sec,
            "selfSec": self_sec,
            "childSec": child_sec,
            "fields": stage_fields,
            "children": stage["children"],
        }  # type: Dict[str, Any]

        summary = "DONE {} (total {:.2f}s, self {:.2f}s, child {:.2f}s)".format(
            stage["name"], total_sec, self_sec, child_sec
        )
        rendered_fields = self._format_fields(stage_fields)
        if rendered_fields:
            summary = "{} {}".format(summary, rendered_fields)
        self._line(int(stage["depth"]), summary)

        if self._stack:
            parent = self._stack[-1]
            parent["childSec"] += total_sec
            parent["children"].append(node)
        else:
            self._roots.append(node)
        return node

    def finalize(self) -> None:
        self.ended_at_utc = utc_ts_fixed()

    def summary_payload(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {
            "version": 1,
            "component": self.component,
            "startedAtUtc": self.started_at_utc,
            "endedAtUtc": (self.ended_at_utc or utc_ts_fixed()),
            "stages": self._roots,
        }  # type: Dict[str, Any]
        if extra:
            payload.update(extra)
        return payload

    def write_json(self, output_path: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.finalize()
        payload = self.summary_payload(extra=extra)
        with open(output_path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")

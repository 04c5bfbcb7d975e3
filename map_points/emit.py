import os
import time
from typing import Iterable, List

from .aggregate import GroupedPoints


def render_grouped_lines(groups: GroupedPoints) -> List[str]:
    # Keys are sorted; points keep their insertion order.
    lines = []  # type: List[str]
    for key, points in groups.sorted_items():
        lines.append("{} {}".format(key, " ".join(points.tokens())))
    return lines


def render_flat_lines(lines: Iterable[str]) -> List[str]:
    return sorted(lines)


def render_text(lines: List[str]) -> str:
    return "\n".join(lines) + "\n"


def write_lines(path: str, lines: List[str]) -> str:
    _ensure_dir(os.path.dirname(path))
    tmp_path = path + ".tmp-{}-{}".format(os.getpid(), int(time.time() * 1000))
    with open(tmp_path, "w", encoding="utf8", newline="\n") as handle:
        handle.write(render_text(lines))
    os.replace(tmp_path, path)
    return path


def _ensure_dir(path: str) -> None:
    if not path:
        return
    if os.path.isdir(path):
        return
    os.makedirs(path, exist_ok=True)


__all__ = ["render_flat_lines", "render_grouped_lines", "render_text", "write_lines"]

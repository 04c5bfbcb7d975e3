import os
from typing import Dict, Optional

from .layers import DEFAULT_DATA_DIR


DATA_DIR_ENV = "MAP_POINTS_DATA_DIR"
OUT_DIR_ENV = "MAP_POINTS_OUT_DIR"
TELEMETRY_JSON_ENV = "MAP_POINTS_TELEMETRY_JSON"


def _env_str(name: str, environ: Dict[str, str]) -> Optional[str]:
    raw = environ.get(name)
    if raw is None:
        return None
    value = raw.strip()
    if value == "":
        return None
    return value


class BuildConfig(object):
    def __init__(self, data_dir: str = DEFAULT_DATA_DIR, out_dir: str = ".",
                 telemetry_json: Optional[str] = None, quiet: bool = False):
        self.data_dir = data_dir
        self.out_dir = out_dir
        self.telemetry_json = telemetry_json
        self.quiet = quiet

    def __repr__(self) -> str:
        return "BuildConfig(data_dir={!r}, out_dir={!r}, telemetry_json={!r})".format(
            self.data_dir, self.out_dir, self.telemetry_json
        )


def resolve_config(data_dir: Optional[str] = None, out_dir: Optional[str] = None,
                   telemetry_json: Optional[str] = None, quiet: bool = False,
                   environ: Optional[Dict[str, str]] = None) -> BuildConfig:
    """Command line values win over the environment, which wins over defaults."""
    if environ is None:
        environ = dict(os.environ)
    return BuildConfig(
        data_dir=data_dir or _env_str(DATA_DIR_ENV, environ) or DEFAULT_DATA_DIR,
        out_dir=out_dir or _env_str(OUT_DIR_ENV, environ) or ".",
        telemetry_json=telemetry_json or _env_str(TELEMETRY_JSON_ENV, environ),
        quiet=quiet
    )


__all__ = ["BuildConfig", "resolve_config"]

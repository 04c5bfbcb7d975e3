"""Shared fixtures: write small layer files into a temporary data directory."""
import json

import pytest


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "layers"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def write_layer(data_dir):
    def _write(file_name, records):
        path = data_dir / file_name
        path.write_text(json.dumps(records), encoding="utf8")
        return path
    return _write

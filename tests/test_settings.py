# tests/test_settings.py
"""Tests for config loading and validation."""

import copy
import json

import pytest

from childweight.settings import (
    DEFAULT_CONFIG_PATH,
    read_config,
    req_bool,
    req_float,
    req_int,
    resolve_path,
    validate_config,
)


VALID = {
    "inputs": {"population_csv": "pop.csv", "intake_csv": "ei.csv"},
    "simulation": {"days": 30, "validate": True, "workers": 2, "chunk_size": 64},
    "output": {"dir": "out"},
    "plotting": {"enabled": False, "max_individuals": 5},
}


def _with(keys, value):
    cfg = copy.deepcopy(VALID)
    cur = cfg
    for k in keys[:-1]:
        cur = cur[k]
    cur[keys[-1]] = value
    return cfg


class TestValidateConfig:
    """Tests for required keys and types."""

    def test_valid(self):
        validate_config(copy.deepcopy(VALID))

    def test_repo_config_is_valid(self):
        cfg = read_config(DEFAULT_CONFIG_PATH)
        assert cfg["simulation"]["days"] >= 0

    def test_missing_key(self):
        cfg = copy.deepcopy(VALID)
        del cfg["simulation"]["workers"]

        with pytest.raises(KeyError, match="simulation.workers"):
            validate_config(cfg)

    @pytest.mark.parametrize(
        "keys, value",
        [
            (["simulation", "days"], -5),
            (["simulation", "days"], "a year"),
            (["simulation", "validate"], "yes"),
            (["simulation", "workers"], 0),
            (["simulation", "chunk_size"], 2.5),
            (["output", "dir"], ""),
            (["plotting", "max_individuals"], 0),
        ],
    )
    def test_bad_value(self, keys, value):
        with pytest.raises(ValueError):
            validate_config(_with(keys, value))

    def test_read_from_file(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps(VALID), encoding="utf-8")

        assert read_config(path)["output"]["dir"] == "out"


class TestRequireHelpers:
    """Tests for the typed accessors."""

    def test_req_int_accepts_whole_float(self):
        assert req_int({"n": 4.0}, ["n"]) == 4

    def test_req_int_rejects_bool(self):
        with pytest.raises(ValueError):
            req_int({"n": True}, ["n"])

    def test_req_float_parses_string(self):
        assert req_float({"x": "2.5"}, ["x"]) == 2.5

    def test_req_bool_strict(self):
        assert req_bool({"b": False}, ["b"]) is False
        with pytest.raises(ValueError):
            req_bool({"b": 1}, ["b"])

    def test_resolve_path(self, temp_dir):
        assert resolve_path("a/b.csv", temp_dir) == temp_dir / "a" / "b.csv"
        assert resolve_path(str(temp_dir), DEFAULT_CONFIG_PATH.parent) == temp_dir

"""
Unit tests for parameter loading, land classes and logging setup
"""

import json
import logging

import pytest

from common.config import QueryParams, VisualizeParams, load_yaml
from common.logging_setup import JsonFormatter
from conf_query.land_classes import UNKNOWN_COLOR, land_color, land_name


class TestParams:
    """Test cases for YAML parameters"""

    def test_default_params_file_loads(self):
        P = load_yaml()
        assert "visualize" in P
        vis = VisualizeParams.from_dict(P["visualize"])
        assert vis.boundary_width == 5.0
        assert vis.ref_color == (255, 255, 255)

    def test_unknown_keys_are_ignored(self):
        vis = VisualizeParams.from_dict({"dot_radius": 3, "not_a_field": 1})
        assert vis.dot_radius == 3
        assert VisualizeParams.from_dict(None) == VisualizeParams()

    def test_workers_at_least_one(self):
        assert QueryParams.from_dict({"workers": 0}).workers == 1
        assert QueryParams.from_dict({"workers": "4"}).workers == 4

    def test_load_yaml_path(self, tmp_path):
        p = tmp_path / "p.yaml"
        p.write_text("query:\n  workers: 2\n")
        assert load_yaml(str(p)) == {"query": {"workers": 2}}


class TestLandClasses:
    def test_known_and_unknown(self):
        assert land_color(1) == (255, 0, 0)
        assert land_name(3) == "water"
        assert land_color(200) == UNKNOWN_COLOR
        assert land_name(200) == "land_200"


class TestJsonFormatter:
    def test_extra_fields_are_serialized(self):
        rec = logging.LogRecord("conf_query", logging.INFO, __file__, 1, "hello", None, None)
        rec.extra = {"n": 3}
        out = json.loads(JsonFormatter().format(rec))
        assert out["msg"] == "hello"
        assert out["lvl"] == "INFO"
        assert out["extra"] == {"n": 3}

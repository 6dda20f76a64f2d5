from __future__ import annotations

import json

import pytest

from metricchart.errors import InvalidRequest
from metricchart.metrics import known_kinds, load_catalog, options_for
from metricchart.models import RenderOptions, RenderRequest, TransformKind, ValueFormat


def test_builtin_kinds():
  assert known_kinds() == [
    "cpu_process", "cpu_total", "disk", "network", "postgresql_connections", "ram_process", "ram_total",
  ]


def test_ram_process_divides_to_megabytes():
  opts = options_for("ram_process", "nginx")
  assert opts.resolved_title == "Memory Usage for nginx"
  assert opts.y_axis_label == "Memory (MB)"
  assert opts.value_transform.kind is TransformKind.DIVIDE
  assert opts.value_transform.factor == 1024 * 1024
  assert opts.value_suffix == " MB"


def test_percentage_kinds():
  assert options_for("cpu_total").is_percentage
  assert options_for("ram_total").is_percentage
  assert not options_for("network", "eth0").is_percentage


def test_unknown_kind_falls_back():
  opts = options_for("gpu_temp", "x")
  assert opts.metric_kind == "unknown"
  assert opts.resolved_title == "Metric"
  assert opts.y_axis_label == "Value"
  assert opts.value_transform.kind is TransformKind.NONE
  assert opts.value_format is ValueFormat.TWO_DECIMAL


def test_load_catalog_merges_over_defaults(tmp_path):
  path = tmp_path / "metrics.json"
  path.write_text(json.dumps({"metrics": {
    "gpu_temp": {"title": "GPU %s", "y_label": "Celsius", "value_format": "integer"},
    "cpu_total": {"title": "CPU busy"},
  }}))
  load_catalog(path)
  assert "gpu_temp" in known_kinds()
  assert options_for("gpu_temp", "0").resolved_title == "GPU 0"
  assert options_for("gpu_temp").value_format is ValueFormat.INTEGER
  cpu = options_for("cpu_total")
  assert cpu.title == "CPU busy"
  assert cpu.is_percentage


@pytest.mark.parametrize("payload", [
  [],
  {"metrics": []},
  {"metrics": {"x": {"transform": "divide", "factor": 0}}},
  {"metrics": {"x": {"value_format": "threeDecimal"}}},
])
def test_load_catalog_rejects_malformed(tmp_path, payload):
  path = tmp_path / "metrics.json"
  path.write_text(json.dumps(payload))
  with pytest.raises(ValueError):
    load_catalog(path)


def test_options_from_dict_overrides_catalog():
  opts = RenderOptions.from_dict({
    "metricKind": "network",
    "parameterLabel": "eth0",
    "valueFormat": "integer",
    "valueTransform": {"kind": "multiply", "factor": 8},
  })
  assert opts.resolved_title == "Network Traffic for eth0"
  assert opts.value_format is ValueFormat.INTEGER
  assert opts.value_transform.kind is TransformKind.MULTIPLY


@pytest.mark.parametrize("data", [
  {"series": [{"samples": []}]},
  {"series": [{"name": "A", "samples": "x"}]},
  {"series": [{"name": "A", "samples": [1, 2]}]},
  {"series": [], "options": {"valueFormat": "weird"}},
  {"series": [], "options": {"valueTransform": {"kind": "log"}}},
  {"series": [], "options": "x"},
])
def test_request_from_dict_rejects_malformed(data):
  with pytest.raises(InvalidRequest):
    RenderRequest.from_dict(data)


@pytest.mark.parametrize("fields", [
  {"value_format": "threeDecimal"},
  {"value_format": None},
  {"title": 5},
  {"timezone": None},
  {"value_transform": "divide"},
])
def test_options_reject_bad_field_types(fields):
  with pytest.raises(InvalidRequest):
    RenderOptions(**fields)

from __future__ import annotations

import json

import pytest

from metricchart import cli_render_chart
from metricchart.chart_service import ChartService


def test_cache_returns_same_chart(make_series):
  svc = ChartService()
  series = [make_series("rss", [(0, 1048576), (10, 2097152)])]
  first = svc.render("ram_process", series, "nginx")
  second = svc.render("ram_process", series, "nginx")
  assert second is first
  assert (svc.hits, svc.misses) == (1, 1)
  assert [e.text for e in first.legend] == ["rss: 2.0 MB"]


def test_cache_key_covers_samples_and_options(make_series):
  svc = ChartService()
  a = svc.render("network", [make_series("rx", [(0, 1), (1, 2)])], "eth0")
  b = svc.render("network", [make_series("rx", [(0, 1), (1, 3)])], "eth0")
  c = svc.render("network", [make_series("rx", [(0, 1), (1, 3)])], "eth1")
  assert a.svg != b.svg
  assert b.svg != c.svg
  assert svc.misses == 3


def test_cache_evicts_over_budget(make_series):
  svc = ChartService(max_bytes=10)
  series = [make_series("a", [(0, 1)])]
  svc.render("disk", series, "sda")
  svc.render("disk", series, "sda")
  assert svc.hits == 0
  assert svc._lru.current_bytes == 0


def test_disabled_cache(make_series):
  svc = ChartService(enabled=False)
  series = [make_series("a", [(0, 1)])]
  assert svc.render("disk", series).svg == svc.render("disk", series).svg
  assert (svc.hits, svc.misses) == (0, 0)


def test_error_charts_are_cached_too():
  svc = ChartService()
  assert svc.render("cpu_total", []).error == "no_series"
  svc.clear()
  assert svc._lru.current_bytes == 0


def test_png_export():
  pytest.importorskip("skia")
  from metricchart.raster import svg_to_png
  svc = ChartService()
  chart = svc.render("cpu_total", [])
  png = svg_to_png(chart.svg, 400, 200)
  assert png[:8] == b"\x89PNG\r\n\x1a\n"


def test_cli_renders_svg_and_dump(tmp_path):
  req = tmp_path / "req.json"
  req.write_text(json.dumps({
    "series": [{"name": "conn", "samples": [{"timestamp": 0, "value": 3}, {"timestamp": 60, "value": 5}]}],
  }))
  out = tmp_path / "chart.svg"
  dump = tmp_path / "dump.json"
  rc = cli_render_chart.main([
    "--input", str(req), "--metric", "postgresql_connections", "--out", str(out), "--dump", str(dump),
  ])
  assert rc == 0
  assert out.read_text(encoding="utf-8").startswith("<svg")
  data = json.loads(dump.read_text(encoding="utf-8"))
  assert data["error"] is None
  assert [p["formatted_value"] for p in data["points"]] == ["3", "5"]
  assert data["legend"][0]["text"] == "conn: 5"


def test_cli_bad_input(tmp_path):
  req = tmp_path / "req.json"
  req.write_text("{not json")
  assert cli_render_chart.main(["--input", str(req), "--out", str(tmp_path / "x.svg")]) == 2


def test_cli_param_without_metric(tmp_path):
  req = tmp_path / "req.json"
  req.write_text(json.dumps({
    "series": [{"name": "a", "samples": [{"timestamp": 0, "value": 1}]}],
    "options": {"title": "Disk %s"},
  }))
  out = tmp_path / "chart.svg"
  assert cli_render_chart.main(["--input", str(req), "--param", "sda", "--out", str(out)]) == 0
  assert "Disk sda" in out.read_text(encoding="utf-8")

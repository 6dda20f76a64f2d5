from __future__ import annotations

from zoneinfo import ZoneInfo

import numpy as np
import pytest

from metricchart.axes import format_time_label, format_value, time_step_count, time_ticks, value_ticks
from metricchart.models import Domain, ValueFormat
from metricchart.paths import area_path, build_paths, line_path
from metricchart.scale import ScaleMapper
from metricchart.segment import Segment

UTC = ZoneInfo("UTC")


@pytest.fixture
def mapper():
  return ScaleMapper(graph_width=685.0, graph_height=275.0, domain=Domain(9.0, 21.0, 0.0, 100.0))


def test_scale_maps_corners(mapper):
  assert mapper.map_point(0, 21) == (0.0, 0.0)
  assert mapper.map_point(100, 9) == (685.0, 275.0)


def test_scale_clamps_values(mapper):
  assert mapper.map_point(50, 1000)[1] == 0.0
  assert mapper.map_point(50, 0)[1] == 275.0


def test_scale_is_vectorised(mapper):
  xs, ys = mapper.map([0, 50, 100], [9, 15, 21])
  assert xs.tolist() == [0.0, 342.5, 685.0]
  assert ys.tolist() == [275.0, 137.5, 0.0]


def test_line_and_area_paths():
  xs = np.array([0.0, 685.0])
  ys = np.array([252.0833, 22.9167])
  assert line_path(xs, ys) == "M0.00,252.08 L685.00,22.92"
  assert area_path(xs, ys, 275.0) == "M0.00,275.00 L0.00,252.08 L685.00,22.92 L685.00,275.00 Z"


def test_single_point_segment_builds_no_path(mapper):
  segs = [
    Segment(0, np.array([0.0]), np.array([10.0])),
    Segment(0, np.array([10.0, 20.0, 30.0]), np.array([10.0, 12.0, 14.0])),
  ]
  paths = build_paths(segs, mapper)
  assert len(paths) == 1
  assert paths[0].line.count("L") == 2
  assert paths[0].area.endswith("Z")


@pytest.mark.parametrize(
  "value, fmt, suffix, expected",
  [
    (20, ValueFormat.TWO_DECIMAL, "", "20.00"),
    (1.26, ValueFormat.ONE_DECIMAL, "", "1.3"),
    (2.6, ValueFormat.INTEGER, "", "3"),
    (512.0, ValueFormat.ONE_DECIMAL, " MB", "512.0 MB"),
    (float("nan"), ValueFormat.TWO_DECIMAL, "", "-"),
  ],
)
def test_format_value(value, fmt, suffix, expected):
  assert format_value(value, fmt, suffix) == expected


@pytest.mark.parametrize("width, steps", [(685, 6), (250, 4), (400, 4), (799, 7), (1000, 8), (5000, 8)])
def test_time_step_count(width, steps):
  assert time_step_count(width) == steps


@pytest.mark.parametrize(
  "time_range, expected",
  [
    (8 * 86400, "1/2"),
    (2 * 86400, "1/2 3:04"),
    (7200, "03:04"),
    (3600, "03:04:05"),
    (60, "03:04:05"),
  ],
)
def test_time_label_buckets(time_range, expected):
  ts = 86400 + 3 * 3600 + 4 * 60 + 5  # 1970-01-02 03:04:05 UTC
  assert format_time_label(ts, time_range, UTC) == expected


def test_time_label_uses_timezone():
  assert format_time_label(0, 60, ZoneInfo("Europe/Moscow")) == "03:00:00"


def test_value_ticks_five_steps():
  ticks = value_ticks(Domain(0, 100, 0, 1), 275.0, ValueFormat.TWO_DECIMAL)
  assert [t.label for t in ticks] == ["0.00", "20.00", "40.00", "60.00", "80.00", "100.00"]
  assert ticks[0].position == 275.0
  assert ticks[-1].position == 0.0


def test_time_ticks_cover_domain():
  ticks = time_ticks(Domain(0, 1, 0, 600), 685.0, UTC)
  assert len(ticks) == 7
  assert ticks[0].position == 0.0
  assert ticks[-1].position == pytest.approx(685.0)
  assert ticks[0].label == "00:00:00"
  assert ticks[-1].label == "00:10:00"

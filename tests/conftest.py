from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from metricchart.metrics import reset_catalog
from metricchart.models import RenderOptions, RenderRequest, Sample, Series

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def make_series():
  def _make(name, points):
    return Series(name=name, samples=tuple(Sample(timestamp=float(t), value=float(v)) for t, v in points))
  return _make


@pytest.fixture
def make_request(make_series):
  def _make(series_points, **opts):
    series = tuple(make_series(name, pts) for name, pts in series_points)
    return RenderRequest(series=series, options=RenderOptions(**opts))
  return _make


@pytest.fixture
def parse_svg():
  return ET.fromstring


@pytest.fixture
def svg_ns():
  return SVG_NS


@pytest.fixture(autouse=True)
def _clean_catalog():
  yield
  reset_catalog()

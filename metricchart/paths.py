from __future__ import annotations

import dataclasses
from typing import List

import numpy as np
import numpy.typing as npt

from metricchart.scale import ScaleMapper
from metricchart.segment import Segment


@dataclasses.dataclass(frozen=True)
class SegmentPath:
  series_index: int
  line: str  # stroke geometry
  area: str  # closed fill geometry down to the plot bottom


def _pt(x: float, y: float) -> str:
  return f"{x:.2f},{y:.2f}"


def line_path(xs: npt.NDArray[np.float64], ys: npt.NDArray[np.float64]) -> str:
  parts = [f"M{_pt(float(xs[0]), float(ys[0]))}"]
  for x, y in zip(xs[1:].tolist(), ys[1:].tolist()):
    parts.append(f"L{_pt(x, y)}")
  return " ".join(parts)


def area_path(xs: npt.NDArray[np.float64], ys: npt.NDArray[np.float64], baseline: float) -> str:
  x0 = float(xs[0])
  xn = float(xs[-1])
  parts = [f"M{_pt(x0, baseline)}"]
  for x, y in zip(xs.tolist(), ys.tolist()):
    parts.append(f"L{_pt(x, y)}")
  parts.append(f"L{_pt(xn, baseline)}")
  parts.append("Z")
  return " ".join(parts)


def build_paths(segments: List[Segment], mapper: ScaleMapper) -> List[SegmentPath]:
  out: List[SegmentPath] = []
  for seg in segments:
    if not seg.drawable:
      continue
    xs, ys = mapper.map(seg.timestamps, seg.values)
    out.append(SegmentPath(
      series_index=seg.series_index,
      line=line_path(xs, ys),
      area=area_path(xs, ys, float(mapper.graph_height)),
    ))
  return out

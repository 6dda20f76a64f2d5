from __future__ import annotations

import dataclasses
from typing import Tuple

import numpy as np
import numpy.typing as npt

from metricchart.models import Domain


@dataclasses.dataclass(frozen=True)
class ScaleMapper:
  """Domain -> plot-rectangle pixels; y grows downward."""

  graph_width: float
  graph_height: float
  domain: Domain

  def x(self, timestamps) -> npt.NDArray[np.float64]:
    t = np.asarray(timestamps, dtype=np.float64)
    d = self.domain
    return self.graph_width * (t - d.time_min) / d.time_range

  def y(self, values) -> npt.NDArray[np.float64]:
    d = self.domain
    v = np.clip(np.asarray(values, dtype=np.float64), d.value_min, d.value_max)
    return self.graph_height * (1.0 - (v - d.value_min) / d.value_range)

  def map(self, timestamps, values) -> Tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    return self.x(timestamps), self.y(values)

  def map_point(self, timestamp: float, value: float) -> Tuple[float, float]:
    return float(self.x(timestamp)), float(self.y(value))

  def y_for_fraction(self, fraction: float) -> float:
    return self.graph_height * (1.0 - fraction)

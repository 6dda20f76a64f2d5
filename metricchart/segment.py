from __future__ import annotations

import dataclasses
import math
from typing import List

import numpy as np
import numpy.typing as npt

from metricchart.models import Domain
from metricchart.normalize import NormalizedSeries

GAP_FACTOR = 3.0


@dataclasses.dataclass(frozen=True, eq=False)
class Segment:
  series_index: int
  timestamps: npt.NDArray[np.float64]
  values: npt.NDArray[np.float64]

  def __len__(self) -> int:
    return int(self.timestamps.shape[0])

  @property
  def drawable(self) -> bool:
    # a single point cannot form a path
    return len(self) >= 2


def gap_threshold(series: List[NormalizedSeries], domain: Domain) -> float:
  """
  Chart-wide break threshold: GAP_FACTOR times the average sampling step,
  where the step is the time range over the mean per-series sample count.
  """
  populated = [s for s in series if s.size]
  total = sum(s.size for s in populated)
  if not total:
    return math.inf
  avg_step = domain.time_range / (total / len(populated))
  return GAP_FACTOR * avg_step


def split_segments(series: NormalizedSeries, threshold: float) -> List[Segment]:
  if not series.size:
    return []
  gaps = np.diff(series.timestamps)
  breaks = np.flatnonzero(gaps > threshold) + 1
  return [
    Segment(series_index=series.index, timestamps=t, values=v)
    for t, v in zip(np.split(series.timestamps, breaks), np.split(series.values, breaks))
  ]

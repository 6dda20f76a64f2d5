from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from metricchart.models import Domain, RenderOptions
from metricchart.normalize import NormalizedSeries

logger = logging.getLogger(__name__)

PAD_RATIO = 0.1
VALUE_CEILING = float(np.finfo(np.float64).max)


def value_domain(series: List[NormalizedSeries], is_percentage: bool) -> Tuple[float, float]:
  if is_percentage:
    return 0.0, 100.0

  populated = [s.values for s in series if s.size]
  if not populated:
    return 0.0, 1.0
  values = np.concatenate(populated)
  vmin = float(np.min(values))
  vmax = float(np.max(values))

  pad = (vmax - vmin) * PAD_RATIO
  if pad == 0:
    # single distinct value
    pad = abs(vmax) * PAD_RATIO
    if pad == 0:
      pad = 1.0
    logger.debug("Repaired degenerate value domain at %s with pad %s", vmax, pad)
  top = vmax + pad
  if not np.isfinite(top):
    # padding overflowed near float max
    top = VALUE_CEILING
    logger.debug("Clamped overflowing value domain top at %s", vmax)
  return max(0.0, vmin - pad), top


def time_domain(series: List[NormalizedSeries]) -> Tuple[float, float]:
  populated = [s.timestamps for s in series if s.size]
  if not populated:
    return 0.0, 1.0
  clock = np.concatenate(populated)
  tmin = float(np.min(clock))
  tmax = float(np.max(clock))
  if tmax <= tmin:
    tmax = tmin + 1.0
    logger.debug("Widened zero-width time domain at %s", tmin)
  return tmin, tmax


def compute_domain(series: List[NormalizedSeries], options: RenderOptions) -> Domain:
  vmin, vmax = value_domain(series, options.is_percentage)
  tmin, tmax = time_domain(series)
  return Domain(value_min=vmin, value_max=vmax, time_min=tmin, time_max=tmax)

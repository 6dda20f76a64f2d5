from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional, Sequence

import numpy as np
import numpy.typing as npt

from metricchart.errors import InvalidRequest, NoSeries, NoValidData
from metricchart.models import RenderRequest, Series, TransformKind, ValueTransform

logger = logging.getLogger(__name__)

# Range representable by datetime (years 1..9999), one day inside so any
# timezone offset still lands in range
TS_MIN = -62135596800.0 + 86400.0
TS_MAX = 253402300799.0 - 86400.0


@dataclasses.dataclass(frozen=True, eq=False)
class NormalizedSeries:
  name: str
  index: int  # position in the request, drives color and point ids
  timestamps: npt.NDArray[np.float64]
  values: npt.NDArray[np.float64]
  source_positions: npt.NDArray[np.int64]  # index of each kept sample in the input

  @property
  def size(self) -> int:
    return int(self.values.shape[0])

  def last_value(self) -> Optional[float]:
    if not self.size:
      return None
    return float(self.values[-1])


def apply_transform(values: npt.NDArray[np.float64], transform: ValueTransform) -> npt.NDArray[np.float64]:
  if transform.kind is TransformKind.MULTIPLY:
    return values * float(transform.factor)
  if transform.kind is TransformKind.DIVIDE:
    return values / float(transform.factor)
  return values


def normalize_series(series: Series, index: int, transform: ValueTransform) -> NormalizedSeries:
  """
  Drop samples whose value is NaN, infinite or negative (never clamp), then
  apply the value transform to the survivors. Input order is preserved.
  """
  if not isinstance(series, Series):
    raise InvalidRequest(f"series #{index} is not a Series")
  try:
    clock = np.asarray([s.timestamp for s in series.samples], dtype=np.float64)
    value = np.asarray([s.value for s in series.samples], dtype=np.float64)
  except (TypeError, ValueError, AttributeError) as e:
    raise InvalidRequest(f"series {series.name!r} has malformed samples: {e}") from e

  mask = np.isfinite(clock) & np.isfinite(value) & (value >= 0)
  kept = clock[mask]
  if kept.size and (float(kept.min()) < TS_MIN or float(kept.max()) > TS_MAX):
    raise InvalidRequest(f"series {series.name!r} has timestamps out of range")

  positions = np.flatnonzero(mask).astype(np.int64)
  with np.errstate(over="ignore"):
    scaled = apply_transform(value[mask], transform)
  # a transform may overflow a finite sample
  ok = np.isfinite(scaled)
  if not ok.all():
    logger.debug("Series %r: %d samples overflowed the transform", series.name, int((~ok).sum()))
    kept, scaled, positions = kept[ok], scaled[ok], positions[ok]

  return NormalizedSeries(
    name=str(series.name),
    index=index,
    timestamps=kept,
    values=scaled,
    source_positions=positions,
  )


def normalize_request(request: RenderRequest) -> List[NormalizedSeries]:
  if not isinstance(request, RenderRequest):
    raise InvalidRequest("request is missing or not a RenderRequest")
  series: Sequence[Series] = request.series
  if series is None or isinstance(series, (str, bytes)) or not isinstance(series, Sequence):
    raise InvalidRequest("request has no series collection")
  if not len(series):
    raise NoSeries()

  names = [getattr(s, "name", None) for s in series]
  if not all(isinstance(n, str) for n in names):
    raise InvalidRequest("series names must be strings")
  if len(set(names)) != len(names):
    raise InvalidRequest("series names must be unique")

  transform = request.options.value_transform
  out = [normalize_series(s, i, transform) for i, s in enumerate(series)]

  total = sum(s.size for s in out)
  if total == 0:
    raise NoValidData()
  dropped = sum(len(s.samples) for s in series) - total
  if dropped:
    logger.debug("Dropped %d invalid samples across %d series", dropped, len(out))
  return out

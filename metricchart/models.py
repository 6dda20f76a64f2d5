from __future__ import annotations

import dataclasses
import enum
import math
from typing import Any, Dict, Mapping, Optional, Tuple

from metricchart.config import DEFAULT_TZ
from metricchart.errors import InvalidRequest
from metricchart.utils import to_float


class ValueFormat(str, enum.Enum):
  INTEGER = "integer"
  ONE_DECIMAL = "oneDecimal"
  TWO_DECIMAL = "twoDecimal"

  @property
  def decimals(self) -> int:
    return {"integer": 0, "oneDecimal": 1, "twoDecimal": 2}[self.value]


class TransformKind(str, enum.Enum):
  NONE = "none"
  MULTIPLY = "multiply"
  DIVIDE = "divide"


@dataclasses.dataclass(frozen=True)
class Sample:
  timestamp: float  # unix seconds
  value: float


@dataclasses.dataclass(frozen=True)
class Series:
  name: str
  samples: Tuple[Sample, ...] = ()  # ascending timestamps assumed, never re-sorted


@dataclasses.dataclass(frozen=True)
class ValueTransform:
  kind: TransformKind = TransformKind.NONE
  factor: float = 1.0

  def __post_init__(self):
    try:
      object.__setattr__(self, "kind", TransformKind(self.kind))
    except ValueError as e:
      raise InvalidRequest(f"unknown transform kind {self.kind!r}") from e
    if self.kind is TransformKind.NONE:
      return
    f = self.factor
    if isinstance(f, bool) or not isinstance(f, (int, float)) or not math.isfinite(f) or f <= 0:
      raise InvalidRequest(f"transform factor must be a positive finite number, got {f!r}")


@dataclasses.dataclass(frozen=True)
class RenderOptions:
  metric_kind: str = "unknown"
  parameter_label: str = ""
  title: str = "Metric"  # may contain a single %s placeholder
  y_axis_label: str = "Value"
  is_percentage: bool = False
  value_transform: ValueTransform = ValueTransform()
  value_format: ValueFormat = ValueFormat.TWO_DECIMAL
  value_suffix: str = ""
  timezone: str = DEFAULT_TZ

  def __post_init__(self):
    try:
      object.__setattr__(self, "value_format", ValueFormat(self.value_format))
    except ValueError as e:
      raise InvalidRequest(f"unknown value format {self.value_format!r}") from e
    if not isinstance(self.value_transform, ValueTransform):
      raise InvalidRequest("value_transform must be a ValueTransform")
    for field in ("metric_kind", "parameter_label", "title", "y_axis_label", "value_suffix", "timezone"):
      if not isinstance(getattr(self, field), str):
        raise InvalidRequest(f"{field} must be a string")

  @property
  def resolved_title(self) -> str:
    return self.title.replace("%s", self.parameter_label, 1)

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> "RenderOptions":
    if not isinstance(data, Mapping):
      raise InvalidRequest("options must be an object")
    try:
      kind = str(data.get("metricKind") or "unknown")
      param = str(data.get("parameterLabel") or "")
      if kind != "unknown":
        # imported lazily: the catalog builds RenderOptions itself
        from metricchart.metrics import options_for
        base = options_for(kind, param)
      else:
        base = cls(parameter_label=param)

      overrides: Dict[str, Any] = {}
      if "title" in data:
        overrides["title"] = str(data["title"])
      if "yAxisLabel" in data:
        overrides["y_axis_label"] = str(data["yAxisLabel"])
      if "isPercentage" in data:
        overrides["is_percentage"] = bool(data["isPercentage"])
      if "valueTransform" in data and data["valueTransform"] is not None:
        tr = data["valueTransform"]
        if not isinstance(tr, Mapping):
          raise InvalidRequest("valueTransform must be an object")
        overrides["value_transform"] = ValueTransform(
          kind=TransformKind(str(tr.get("kind", "none"))),
          factor=tr.get("factor", 1.0),
        )
      if "valueFormat" in data:
        overrides["value_format"] = ValueFormat(str(data["valueFormat"]))
      if "valueSuffix" in data:
        overrides["value_suffix"] = str(data["valueSuffix"])
      if "timezone" in data:
        overrides["timezone"] = str(data["timezone"])
    except InvalidRequest:
      raise
    except (TypeError, ValueError, KeyError, AttributeError) as e:
      raise InvalidRequest(f"malformed options: {e}") from e
    return dataclasses.replace(base, **overrides)


@dataclasses.dataclass(frozen=True)
class RenderRequest:
  series: Tuple[Series, ...]  # insertion order = draw/legend order
  options: RenderOptions = RenderOptions()

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> "RenderRequest":
    if not isinstance(data, Mapping):
      raise InvalidRequest("request must be an object")
    raw_series = data.get("series")
    if raw_series is None or isinstance(raw_series, (str, bytes, Mapping)):
      raise InvalidRequest("series must be a list")
    options = RenderOptions.from_dict(data.get("options") or {})
    try:
      series = tuple(_series_from_dict(s) for s in raw_series)
    except InvalidRequest:
      raise
    except (TypeError, ValueError, KeyError, AttributeError) as e:
      raise InvalidRequest(f"malformed series: {e}") from e
    return cls(series=series, options=options)


def _series_from_dict(data: Mapping[str, Any]) -> Series:
  if not isinstance(data, Mapping):
    raise InvalidRequest("series entry must be an object")
  name = data.get("name")
  if name is None:
    raise InvalidRequest("series entry has no name")
  raw = data.get("samples", data.get("data")) or []
  if isinstance(raw, (str, bytes, Mapping)):
    raise InvalidRequest(f"samples of {name!r} must be a list")
  samples = tuple(Sample(timestamp=to_float(s.get("timestamp")), value=to_float(s.get("value"))) for s in raw)
  return Series(name=str(name), samples=samples)


@dataclasses.dataclass(frozen=True)
class Domain:
  value_min: float
  value_max: float
  time_min: float
  time_max: float

  @property
  def value_range(self) -> float:
    return self.value_max - self.value_min

  @property
  def time_range(self) -> float:
    return self.time_max - self.time_min


@dataclasses.dataclass(frozen=True)
class InteractionPoint:
  point_id: str
  series_name: str
  formatted_value: str
  formatted_time: str
  pixel_x: float  # relative to the plot rectangle
  pixel_y: float
  series_index: int = 0


@dataclasses.dataclass(frozen=True)
class LegendEntry:
  series_name: str
  color: str
  text: str
  x: float
  y: float
  row: int


@dataclasses.dataclass(frozen=True)
class RenderedChart:
  svg: str
  points: Tuple[InteractionPoint, ...] = ()
  legend: Tuple[LegendEntry, ...] = ()
  domain: Optional[Domain] = None
  error: Optional[str] = None  # ChartError.kind when the error graphic was emitted

  @property
  def ok(self) -> bool:
    return self.error is None

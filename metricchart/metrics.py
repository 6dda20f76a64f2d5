from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from metricchart.config import METRICS_PATH
from metricchart.errors import InvalidRequest
from metricchart.models import RenderOptions, TransformKind, ValueFormat, ValueTransform

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


@dataclasses.dataclass(frozen=True)
class MetricSpec:
  title: str
  y_label: str
  is_percentage: bool = False
  transform: ValueTransform = ValueTransform()
  value_format: ValueFormat = ValueFormat.ONE_DECIMAL
  value_suffix: str = ""


FALLBACK = MetricSpec(title="Metric", y_label="Value", value_format=ValueFormat.TWO_DECIMAL)

DEFAULT_METRICS: Dict[str, MetricSpec] = {
  "cpu_total": MetricSpec("CPU Utilization", "Usage (%)", is_percentage=True),
  "cpu_process": MetricSpec("CPU Utilization for %s", "CPU Time (s)"),
  "ram_total": MetricSpec("RAM Utilization", "Usage (%)", is_percentage=True),
  "ram_process": MetricSpec(
    "Memory Usage for %s", "Memory (MB)",
    transform=ValueTransform(TransformKind.DIVIDE, BYTES_PER_MB),
    value_suffix=" MB",
  ),
  "network": MetricSpec("Network Traffic for %s", "Traffic (bytes/s)"),
  "disk": MetricSpec("Disk Operations for %s", "Operations/s"),
  "postgresql_connections": MetricSpec("PostgreSQL Connections", "Connections", value_format=ValueFormat.INTEGER),
}

_catalog: Dict[str, MetricSpec] = dict(DEFAULT_METRICS)


def _spec_from_dict(kind: str, data: Mapping[str, Any], base: MetricSpec) -> MetricSpec:
  if not isinstance(data, Mapping):
    raise ValueError(f"metric {kind!r} must be an object")
  try:
    transform = base.transform
    if "transform" in data:
      transform = ValueTransform(
        kind=TransformKind(str(data["transform"])),
        factor=data.get("factor", 1.0),
      )
    return MetricSpec(
      title=str(data.get("title", base.title)),
      y_label=str(data.get("y_label", base.y_label)),
      is_percentage=bool(data.get("is_percentage", base.is_percentage)),
      transform=transform,
      value_format=ValueFormat(str(data.get("value_format", base.value_format.value))),
      value_suffix=str(data.get("value_suffix", base.value_suffix)),
    )
  except (InvalidRequest, TypeError, ValueError) as e:
    raise ValueError(f"bad metric definition {kind!r}: {e}") from e


def load_catalog(path: Path) -> Dict[str, MetricSpec]:
  """
  Merge {"metrics": {kind: {...}}} from a JSON file over the built-in kinds
  and install the result as the active catalog.
  """
  global _catalog
  raw = json.loads(Path(path).read_text(encoding="utf-8"))
  if not isinstance(raw, dict) or not isinstance(raw.get("metrics"), dict):
    raise ValueError(f"{path}: expected an object with a 'metrics' object")
  merged = dict(DEFAULT_METRICS)
  for kind, data in raw["metrics"].items():
    merged[kind] = _spec_from_dict(kind, data, merged.get(kind, FALLBACK))
  _catalog = merged
  logger.info("Loaded %d metric definitions from %s", len(raw["metrics"]), path)
  return dict(merged)


def reset_catalog():
  global _catalog
  _catalog = dict(DEFAULT_METRICS)


def known_kinds() -> List[str]:
  return sorted(_catalog)


def options_for(kind: str, parameter_label: str = "", timezone: Optional[str] = None) -> RenderOptions:
  """Unknown kinds fall back to a generic Metric/Value pair with no transform."""
  spec = _catalog.get(kind, FALLBACK)
  opts = RenderOptions(
    metric_kind=kind if kind in _catalog else "unknown",
    parameter_label=parameter_label or "",
    title=spec.title,
    y_axis_label=spec.y_label,
    is_percentage=spec.is_percentage,
    value_transform=spec.transform,
    value_format=spec.value_format,
    value_suffix=spec.value_suffix,
  )
  if timezone:
    opts = dataclasses.replace(opts, timezone=timezone)
  return opts


if METRICS_PATH is not None:
  try:
    load_catalog(METRICS_PATH)
  except (OSError, ValueError) as e:
    logger.warning("Ignoring metrics file %s: %s", METRICS_PATH, e)

from __future__ import annotations

import dataclasses
import math
from datetime import datetime
from typing import List
from zoneinfo import ZoneInfo

from metricchart.models import Domain, ValueFormat

VALUE_STEPS = 5
TIME_STEPS_MIN = 4
TIME_STEPS_MAX = 8
TIME_STEP_PX = 100

DAY = 86400
HOUR = 3600


@dataclasses.dataclass(frozen=True)
class Tick:
  position: float  # pixel offset inside the plot rectangle
  value: float
  label: str


def format_value(value: float, fmt: ValueFormat = ValueFormat.TWO_DECIMAL, suffix: str = "") -> str:
  if not math.isfinite(value):
    return "-"
  text = f"{value:.{fmt.decimals}f}"
  if text.startswith("-") and float(text) == 0:
    text = text[1:]
  return text + suffix


def time_step_count(graph_width: float) -> int:
  """Denser plots get more labels, bounded."""
  return max(TIME_STEPS_MIN, min(TIME_STEPS_MAX, int(math.floor(graph_width / TIME_STEP_PX))))


def format_time_label(ts: float, time_range: float, tz: ZoneInfo) -> str:
  dt = datetime.fromtimestamp(ts, tz)
  if time_range > 7 * DAY:
    return f"{dt.month}/{dt.day}"
  if time_range > DAY:
    return f"{dt.month}/{dt.day} {dt.hour}:{dt.minute:02d}"
  if time_range > HOUR:
    return dt.strftime("%H:%M")
  return dt.strftime("%H:%M:%S")


def value_ticks(domain: Domain, graph_height: float, fmt: ValueFormat, suffix: str = "",
                steps: int = VALUE_STEPS) -> List[Tick]:
  ticks: List[Tick] = []
  for i in range(steps + 1):
    frac = i / steps
    v = domain.value_min + domain.value_range * frac
    ticks.append(Tick(position=graph_height * (1.0 - frac), value=v, label=format_value(v, fmt, suffix)))
  return ticks


def time_ticks(domain: Domain, graph_width: float, tz: ZoneInfo) -> List[Tick]:
  steps = time_step_count(graph_width)
  ticks: List[Tick] = []
  for i in range(steps + 1):
    frac = i / steps
    ts = domain.time_min + domain.time_range * frac
    ticks.append(Tick(position=graph_width * frac, value=ts, label=format_time_label(ts, domain.time_range, tz)))
  return ticks

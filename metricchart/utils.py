import math
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Cyclic series colors, indexed by series position
PALETTE = [
  "4e73df", "1cc88a", "e74a3b", "36b9cc", "f6c23e", "858796",
]


def series_color(index: int) -> str:
  return "#" + PALETTE[index % len(PALETTE)]


def svg_escape(text: str) -> str:
  return (
    str(text).replace("&", "&amp;")
    .replace("<", "&lt;")
    .replace(">", "&gt;")
    .replace('"', "&quot;")
    .replace("'", "&#39;")
  )


def to_float(value) -> float:
  """Lenient numeric coercion; anything unusable becomes NaN."""
  if isinstance(value, bool) or value is None:
    return math.nan
  try:
    return float(value)
  except (TypeError, ValueError):
    return math.nan


def resolve_tz(name: str) -> ZoneInfo:
  try:
    return ZoneInfo(name or "UTC")
  except (ZoneInfoNotFoundError, ValueError):
    return ZoneInfo("UTC")


def fmt_dt(tz: ZoneInfo, ts: float) -> str:
  return datetime.fromtimestamp(ts, tz).strftime("%Y-%m-%d %H:%M:%S")

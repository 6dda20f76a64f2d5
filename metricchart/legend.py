from __future__ import annotations

from typing import List, Tuple
from zoneinfo import ZoneInfo

from metricchart.axes import format_value
from metricchart.models import InteractionPoint, LegendEntry, RenderOptions
from metricchart.normalize import NormalizedSeries
from metricchart.scale import ScaleMapper
from metricchart.theme import Layout, RenderTheme
from metricchart.utils import fmt_dt, series_color


def point_id(series_index: int, sample_index: int) -> str:
  return f"p-{series_index}-{sample_index}"


def legend_text(name: str, value: float, options: RenderOptions) -> str:
  return f"{name}: {format_value(value, options.value_format, options.value_suffix)}"


def layout_legend(series: List[NormalizedSeries], options: RenderOptions, avail_w: float,
                  item_w: float, row_h: float) -> List[LegendEntry]:
  """
  Greedy left-to-right packing with a fixed item width; an item that would
  cross avail_w starts a new row. Series without valid samples get no entry.
  Coordinates are relative to the legend block origin.
  """
  entries: List[LegendEntry] = []
  x = 0.0
  row = 0
  for s in series:
    last = s.last_value()
    if last is None:
      continue
    if x > 0 and x + item_w > avail_w:
      row += 1
      x = 0.0
    entries.append(LegendEntry(
      series_name=s.name,
      color=series_color(s.index),
      text=legend_text(s.name, last, options),
      x=x,
      y=row * row_h,
      row=row,
    ))
    x += item_w
  return entries


def interaction_points(series: List[NormalizedSeries], mapper: ScaleMapper, options: RenderOptions,
                       tz: ZoneInfo) -> List[InteractionPoint]:
  # Every valid sample gets a hit target, not just segment endpoints
  points: List[InteractionPoint] = []
  for s in series:
    if not s.size:
      continue
    xs, ys = mapper.map(s.timestamps, s.values)
    for j, (ts, v, px, py) in enumerate(zip(s.timestamps.tolist(), s.values.tolist(), xs.tolist(), ys.tolist())):
      points.append(InteractionPoint(
        point_id=point_id(s.index, j),
        series_name=s.name,
        formatted_value=format_value(v, options.value_format, options.value_suffix),
        formatted_time=fmt_dt(tz, ts),
        pixel_x=round(px, 2),
        pixel_y=round(py, 2),
        series_index=s.index,
      ))
  return points


def tooltip_position(point: InteractionPoint, layout: Layout, theme: RenderTheme) -> Tuple[float, float]:
  """
  Canvas translation for the tooltip on pointHover: up-right of the point,
  flipped left near the right edge and below the point near the top.
  """
  x = point.pixel_x + layout.margin_left + theme.tooltip_dx
  y = point.pixel_y + layout.margin_top + theme.tooltip_dy
  if x > layout.width - theme.tooltip_right_guard:
    x = point.pixel_x + layout.margin_left + theme.tooltip_flip_dx
  if y < 0:
    y = point.pixel_y + layout.margin_top + theme.tooltip_flip_dy
  return x, y

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from metricchart.axes import Tick, time_ticks, value_ticks
from metricchart.domain import compute_domain
from metricchart.errors import ChartError, InvalidRequest
from metricchart.legend import interaction_points, layout_legend
from metricchart.models import InteractionPoint, LegendEntry, RenderOptions, RenderRequest, RenderedChart
from metricchart.normalize import normalize_request
from metricchart.paths import SegmentPath, build_paths
from metricchart.scale import ScaleMapper
from metricchart.segment import gap_threshold, split_segments
from metricchart.theme import HOVER_EVENT, UNHOVER_EVENT, Layout, RenderTheme
from metricchart.utils import resolve_tz, series_color, svg_escape

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


def _num(v: float) -> str:
  text = f"{float(v):.2f}"
  if "." in text:
    text = text.rstrip("0").rstrip(".")
  return "0" if text in ("-0", "") else text


class SvgRenderer:
  """
  Pure RenderRequest -> RenderedChart engine. Holds only immutable theme and
  layout, so one instance can serve concurrent callers.
  """

  def __init__(self, theme: Optional[RenderTheme] = None, layout: Optional[Layout] = None):
    self.theme = theme or RenderTheme()
    self.layout = layout or Layout()

  def render(self, request: Union[RenderRequest, Mapping[str, Any], None]) -> RenderedChart:
    try:
      if isinstance(request, Mapping):
        request = RenderRequest.from_dict(request)
      return self._render_core(request)
    except ChartError as e:
      if isinstance(e, InvalidRequest):
        logger.warning("Rejected chart request: %s", e.detail or e.message)
      else:
        logger.info("Chart request yielded no plot: %s", e.message)
      return RenderedChart(svg=self.render_error(e.message), error=e.kind)
    except (TypeError, ValueError, AttributeError, OverflowError) as e:
      # malformed objects built around the wire format
      logger.warning("Rejected chart request: %s: %s", type(e).__name__, e)
      return RenderedChart(svg=self.render_error(InvalidRequest.message), error=InvalidRequest.kind)

  def _svg_open(self) -> str:
    L = self.layout
    return (
      f'<svg xmlns="{SVG_NS}" viewBox="0 0 {L.width} {L.height}" width="100%" '
      f'preserveAspectRatio="xMidYMid meet" font-family="{svg_escape(self.theme.font_family)}"'
    )

  def render_error(self, message: str) -> str:
    L = self.layout
    t = self.theme
    return (
      self._svg_open() + ' class="chart-error">'
      f'<text x="{_num(L.width / 2)}" y="{_num(L.height / 2)}" text-anchor="middle" '
      f'font-size="{_num(t.error_font_size)}" fill="{t.error_color}">{svg_escape(message)}</text>'
      "</svg>"
    )

  def _render_core(self, request: RenderRequest) -> RenderedChart:
    if not isinstance(request, RenderRequest):
      raise InvalidRequest("request is missing or not a RenderRequest")
    opts = request.options
    if not isinstance(opts, RenderOptions):
      raise InvalidRequest("request options are missing")

    L = self.layout
    t = self.theme
    series = normalize_request(request)
    domain = compute_domain(series, opts)

    threshold = gap_threshold(series, domain)
    segments = [seg for s in series for seg in split_segments(s, threshold)]

    mapper = ScaleMapper(graph_width=L.graph_width, graph_height=L.graph_height, domain=domain)
    paths = build_paths(segments, mapper)

    tz = resolve_tz(opts.timezone)
    points = interaction_points(series, mapper, opts, tz)
    legend = layout_legend(series, opts, L.graph_width, t.legend_item_w, t.legend_row_h)

    y_ticks = value_ticks(domain, L.graph_height, opts.value_format, opts.value_suffix)
    x_ticks = time_ticks(domain, L.graph_width, tz)

    svg = self._assemble(opts, paths, points, legend, y_ticks, x_ticks)
    logger.debug("Rendered %d series, %d segments, %d paths, %d points",
                 len(series), len(segments), len(paths), len(points))
    return RenderedChart(svg=svg, points=tuple(points), legend=tuple(legend), domain=domain)

  def _assemble(
      self,
      opts: RenderOptions,
      paths: List[SegmentPath],
      points: List[InteractionPoint],
      legend: List[LegendEntry],
      y_ticks: List[Tick],
      x_ticks: List[Tick],
  ) -> str:
    L = self.layout
    t = self.theme
    gw = L.graph_width
    gh = L.graph_height

    lines: List[str] = [
      self._svg_open()
      + f' data-hover-event="{HOVER_EVENT}" data-unhover-event="{UNHOVER_EVENT}"'
      + f' data-hit-radius="{_num(t.hit_radius)}" data-hit-radius-hover="{_num(t.hit_radius_hover)}"'
      + f' data-plot-x="{L.margin_left}" data-plot-y="{L.margin_top}">',
    ]

    # Area gradients, one per drawn series
    drawn = sorted({p.series_index for p in paths})
    if drawn:
      lines.append("<defs>")
      for idx in drawn:
        color = series_color(idx)
        lines.append(f'<linearGradient id="area-{idx}" x1="0" y1="0" x2="0" y2="1">')
        lines.append(f'<stop offset="0%" stop-color="{color}" stop-opacity="{_num(t.area_top_opacity)}"/>')
        lines.append(f'<stop offset="100%" stop-color="{color}" stop-opacity="{_num(t.area_bottom_opacity)}"/>')
        lines.append("</linearGradient>")
      lines.append("</defs>")

    lines.append(f'<rect width="{L.width}" height="{L.height}" fill="{t.bg_color}"/>')
    lines.append(f'<g class="plot" transform="translate({L.margin_left},{L.margin_top})">')
    lines.append(f'<rect class="plot-area" width="{_num(gw)}" height="{_num(gh)}" fill="{t.plot_bg_color}" '
                 f'stroke="{t.grid_color}"/>')

    # Value axis
    lines.append(f'<g class="y-axis" stroke-width="{_num(t.grid_width)}">')
    for tick in y_ticks:
      y = _num(tick.position)
      lines.append(f'<line x1="0" y1="{y}" x2="{_num(gw)}" y2="{y}" stroke="{t.grid_color}"/>')
      lines.append(
        f'<text x="{_num(t.y_label_dx)}" y="{_num(tick.position + t.y_label_baseline_dy)}" text-anchor="end" '
        f'font-size="{_num(t.font_size)}" fill="{t.text_color}">{svg_escape(tick.label)}</text>'
      )
    lines.append("</g>")

    # Time axis
    lines.append(f'<g class="x-axis" stroke-width="{_num(t.grid_width)}">')
    for tick in x_ticks:
      x = _num(tick.position)
      lines.append(f'<line x1="{x}" y1="0" x2="{x}" y2="{_num(gh)}" stroke="{t.grid_color}"/>')
      lines.append(
        f'<text x="{x}" y="{_num(gh + t.x_label_dy)}" text-anchor="middle" '
        f'font-size="{_num(t.font_size)}" fill="{t.text_color}">{svg_escape(tick.label)}</text>'
      )
    lines.append("</g>")

    # Series in insertion order: filled area under its line, per segment
    lines.append('<g class="series">')
    for p in paths:
      color = series_color(p.series_index)
      lines.append(f'<path class="area" data-series-index="{p.series_index}" d="{p.area}" '
                   f'fill="url(#area-{p.series_index})" stroke="none"/>')
      lines.append(
        f'<path class="line" data-series-index="{p.series_index}" d="{p.line}" fill="none" stroke="{color}" '
        f'stroke-width="{_num(t.line_width)}" stroke-linejoin="round" stroke-linecap="round"/>'
      )
    lines.append("</g>")

    # Hit targets; handlers are bound by the host under these names
    lines.append('<g class="hit-targets">')
    for pt in points:
      lines.append(
        f'<circle id="{pt.point_id}" class="hit-target" cx="{_num(pt.pixel_x)}" cy="{_num(pt.pixel_y)}" '
        f'r="{_num(t.hit_radius)}" fill="{series_color(pt.series_index)}" opacity="0" '
        f'data-series="{svg_escape(pt.series_name)}" data-value="{svg_escape(pt.formatted_value)}" '
        f'data-time="{svg_escape(pt.formatted_time)}" data-x="{_num(pt.pixel_x)}" data-y="{_num(pt.pixel_y)}" '
        f'onmouseover="{HOVER_EVENT}(&#39;{pt.point_id}&#39;)" onmouseout="{UNHOVER_EVENT}()"/>'
      )
    lines.append("</g>")
    lines.append("</g>")

    # Title and rotated value-axis label
    lines.append(
      f'<text class="title" x="{_num(L.width / 2)}" y="{_num(t.title_baseline)}" text-anchor="middle" '
      f'font-size="{_num(t.title_font_size)}" fill="{t.title_color}">{svg_escape(opts.resolved_title)}</text>'
    )
    cy = _num(L.height / 2)
    lines.append(
      f'<text class="y-label" x="{_num(t.y_title_x)}" y="{cy}" text-anchor="middle" '
      f'transform="rotate(-90,{_num(t.y_title_x)},{cy})" font-size="{_num(t.axis_label_font_size)}" '
      f'fill="{t.text_color}">{svg_escape(opts.y_axis_label)}</text>'
    )

    if legend:
      rows = legend[-1].row + 1
      top = L.margin_top + gh + t.legend_top_dy
      lines.append(f'<g class="legend" transform="translate({L.margin_left},{_num(top)})" '
                   f'font-size="{_num(t.legend_font_size)}">')
      lines.append(
        f'<rect x="-10" y="-14" width="{_num(gw + 20)}" height="{_num(rows * t.legend_row_h + 6)}" '
        f'fill="{t.grid_color}" opacity="{_num(t.legend_bg_opacity)}" rx="4"/>'
      )
      for e in legend:
        lines.append(f'<circle cx="{_num(e.x + t.legend_swatch_r)}" cy="{_num(e.y - 4)}" '
                     f'r="{_num(t.legend_swatch_r)}" fill="{e.color}"/>')
        lines.append(f'<text x="{_num(e.x + t.legend_swatch_r + t.legend_text_dx)}" y="{_num(e.y)}" '
                     f'fill="{t.legend_text}">{svg_escape(e.text)}</text>')
      lines.append("</g>")

    # Tooltip template, positioned and filled by the host on pointHover
    lines.append('<g id="tooltip" visibility="hidden" pointer-events="none">')
    lines.append(f'<rect width="{_num(t.tooltip_w)}" height="{_num(t.tooltip_h)}" fill="{t.tooltip_bg}" '
                 f'opacity="{_num(t.tooltip_opacity)}" rx="5"/>')
    lines.append(f'<text id="tooltip-series" x="8" y="16" font-size="{_num(t.font_size)}" fill="{t.tooltip_text}"></text>')
    lines.append(f'<text id="tooltip-value" x="8" y="31" font-size="{_num(t.font_size)}" fill="{t.tooltip_text}"></text>')
    lines.append("</g>")

    lines.append("</svg>")
    return "\n".join(lines)


_default_renderer = SvgRenderer()


def render_chart(request: Union[RenderRequest, Mapping[str, Any], None]) -> RenderedChart:
  return _default_renderer.render(request)

from __future__ import annotations

import dataclasses

from metricchart.config import CANVAS_HEIGHT, CANVAS_WIDTH

# Fixed literals an external stylist pattern-matches and rewrites.
BACKGROUND = "#ffffff"
GRID_LINE = "#e2e8f0"
TEXT_SECONDARY = "#4a5568"
TEXT_PRIMARY = "#1a202c"
TOOLTIP_BG = "#000000"
ERROR_TEXT = "#e53e3e"

HOVER_EVENT = "pointHover"
UNHOVER_EVENT = "pointUnhover"


@dataclasses.dataclass(frozen=True)
class RenderTheme:
  # Colors
  bg_color: str = BACKGROUND
  plot_bg_color: str = BACKGROUND
  grid_color: str = GRID_LINE
  text_color: str = TEXT_SECONDARY
  title_color: str = TEXT_PRIMARY
  legend_text: str = TEXT_PRIMARY
  tooltip_bg: str = TOOLTIP_BG
  tooltip_text: str = BACKGROUND
  error_color: str = ERROR_TEXT

  # Fonts
  font_family: str = "Arial, sans-serif"
  font_size: float = 10.0
  title_font_size: float = 16.0
  axis_label_font_size: float = 12.0
  legend_font_size: float = 12.0
  error_font_size: float = 14.0

  # Line styles
  line_width: float = 2.0
  grid_width: float = 1.0
  area_top_opacity: float = 0.35
  area_bottom_opacity: float = 0.02
  legend_bg_opacity: float = 0.3
  tooltip_opacity: float = 0.9

  # Hit targets
  hit_radius: float = 4.0
  hit_radius_hover: float = 6.0

  # Tooltip box and placement offsets (canvas units)
  tooltip_w: float = 160.0
  tooltip_h: float = 40.0
  tooltip_dx: float = 10.0
  tooltip_dy: float = -60.0
  tooltip_flip_dx: float = -170.0
  tooltip_flip_dy: float = 15.0
  tooltip_right_guard: float = 170.0

  # Legend layout
  legend_item_w: float = 180.0
  legend_row_h: float = 18.0
  legend_top_dy: float = 38.0  # below the plot bottom
  legend_swatch_r: float = 5.0
  legend_text_dx: float = 10.0

  # Axis labels
  y_label_dx: float = -5.0
  y_label_baseline_dy: float = 4.0
  x_label_dy: float = 20.0
  title_baseline: float = 25.0
  y_title_x: float = 18.0


@dataclasses.dataclass(frozen=True)
class Layout:
  width: int = CANVAS_WIDTH
  height: int = CANVAS_HEIGHT
  margin_left: int = 75
  margin_right: int = 40
  margin_top: int = 45
  margin_bottom: int = 80

  @property
  def graph_width(self) -> float:
    return float(self.width - self.margin_left - self.margin_right)

  @property
  def graph_height(self) -> float:
    return float(self.height - self.margin_top - self.margin_bottom)

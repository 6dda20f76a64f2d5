from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict

from dotenv import find_dotenv, load_dotenv

# Load .env so config picks env vars
load_dotenv(find_dotenv(), override=False)

from metricchart.config import LOG_LEVEL, PNG_HEIGHT, PNG_WIDTH
from metricchart.logging_conf import setup_logging
from metricchart.metrics import known_kinds
from metricchart.models import RenderedChart
from metricchart.render import SvgRenderer

logger = logging.getLogger(__name__)


def _chart_to_dict(chart: RenderedChart) -> Dict[str, Any]:
  return {
    "error": chart.error,
    "domain": dataclasses.asdict(chart.domain) if chart.domain else None,
    "legend": [dataclasses.asdict(e) for e in chart.legend],
    "points": [dataclasses.asdict(p) for p in chart.points],
  }


def main(argv=None) -> int:
  p = argparse.ArgumentParser(description="Render a metric chart request (JSON) to SVG or PNG")
  p.add_argument("--input", type=Path, required=True, help="JSON file with {series, options}")
  p.add_argument("--metric", choices=known_kinds(), help="Take options from the metric catalog")
  p.add_argument("--param", default="", help="Parameter label substituted into the title")
  p.add_argument("--out", type=Path, default=Path("chart.svg"), help="Output path (.svg or .png)")
  p.add_argument("--png-width", type=int, default=PNG_WIDTH, help="PNG width")
  p.add_argument("--png-height", type=int, default=PNG_HEIGHT, help="PNG height")
  p.add_argument("--dump", type=Path, help="Write domain, legend and hover points as JSON")
  p.add_argument("--debug", action="store_true", help="Verbose logging")
  args = p.parse_args(argv)

  setup_logging(logging.DEBUG if args.debug else LOG_LEVEL)

  t0 = time.time()
  try:
    raw = json.loads(args.input.read_text(encoding="utf-8"))
  except (OSError, ValueError) as e:
    logger.error("Cannot read request %s: %s", args.input, e)
    return 2

  renderer = SvgRenderer()
  if (args.metric or args.param) and isinstance(raw, dict):
    opts = dict(raw.get("options") or {})
    if args.metric:
      opts["metricKind"] = args.metric
    if args.param:
      opts["parameterLabel"] = args.param
    raw = {**raw, "options": opts}
  elif args.metric or args.param:
    logger.warning("Request is not an object; --metric/--param ignored")
  t_load = time.time()

  chart = renderer.render(raw)
  t_render = time.time()

  if chart.error:
    logger.warning("Rendered error graphic: %s", chart.error)

  if args.out.suffix.lower() == ".png":
    from metricchart.raster import svg_to_png
    data = svg_to_png(chart.svg, args.png_width, args.png_height)
    args.out.write_bytes(data)
  else:
    data = chart.svg.encode("utf-8")
    args.out.write_bytes(data)
  t_write = time.time()

  if args.dump:
    args.dump.write_text(json.dumps(_chart_to_dict(chart), ensure_ascii=False, indent=2), encoding="utf-8")

  print(
    "load={:.1f}ms render={:.1f}ms write={:.1f}ms total={:.1f}ms size={:.1f}KB points={}".format(
      1000 * (t_load - t0),
      1000 * (t_render - t_load),
      1000 * (t_write - t_render),
      1000 * (t_write - t0),
      len(data) / 1024.0,
      len(chart.points),
    )
  )
  print(f"Wrote {args.out}")
  return 0


if __name__ == "__main__":
  raise SystemExit(main())

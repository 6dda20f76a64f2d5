from __future__ import annotations

import logging

import skia

from metricchart.config import CANVAS_HEIGHT, CANVAS_WIDTH, PNG_HEIGHT, PNG_WIDTH
from metricchart.theme import BACKGROUND

logger = logging.getLogger(__name__)


def _hex_to_color(color_hex: str) -> int:
  h = color_hex.lstrip("#")
  try:
    r = int(h[0:2], 16)
    g = int(h[2:4], 16)
    b = int(h[4:6], 16)
  except ValueError:
    r = g = b = 255
  return skia.ColorSetARGB(255, r, g, b)


def svg_to_png(svg: str, width: int = PNG_WIDTH, height: int = PNG_HEIGHT,
               canvas_width: int = CANVAS_WIDTH, canvas_height: int = CANVAS_HEIGHT) -> bytes:
  """
  Rasterise a chart document through skia's SVG DOM. The logical canvas is
  scaled uniformly to fit width x height and centered.
  """
  if width <= 0 or height <= 0:
    raise ValueError("width and height must be positive")

  stream = skia.MemoryStream(svg.encode("utf-8"), True)
  dom = skia.SVGDOM.MakeFromStream(stream)
  if dom is None:
    raise RuntimeError("skia could not parse the SVG document")
  dom.setContainerSize(skia.Size(float(canvas_width), float(canvas_height)))

  scale = min(width / canvas_width, height / canvas_height)
  dx = (width - canvas_width * scale) / 2.0
  dy = (height - canvas_height * scale) / 2.0

  surface = skia.Surface(width, height)
  canvas = surface.getCanvas()
  canvas.clear(_hex_to_color(BACKGROUND))
  canvas.translate(dx, dy)
  canvas.scale(scale, scale)
  dom.render(canvas)

  image = surface.makeImageSnapshot()
  data = image.encodeToData(skia.kPNG, 100)
  if data is None:
    raise RuntimeError("PNG encoding failed")
  logger.debug("Rasterised chart to %dx%d PNG (%d bytes)", width, height, len(bytes(data)))
  return bytes(data)

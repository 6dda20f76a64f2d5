from __future__ import annotations

import hashlib
import logging
from collections import OrderedDict
from typing import Optional, Sequence, Tuple

from metricchart.config import CACHE_ENABLED, CACHE_MAX_BYTES, PNG_HEIGHT, PNG_WIDTH
from metricchart.metrics import options_for
from metricchart.models import RenderOptions, RenderRequest, RenderedChart, Series
from metricchart.render import SvgRenderer

logger = logging.getLogger(__name__)


class _LRU:
  def __init__(self, max_bytes: int):
    self.max_bytes = max_bytes
    self.current_bytes = 0
    self.od: OrderedDict[str, Tuple[RenderedChart, int]] = OrderedDict()
    # key -> (chart, size_bytes)

  def get(self, key: str) -> Optional[RenderedChart]:
    val = self.od.get(key)
    if val is None:
      return None
    # move to end (MRU)
    self.od.move_to_end(key)
    return val[0]

  def put(self, key: str, chart: RenderedChart):
    size = len(chart.svg.encode("utf-8"))
    if key in self.od:
      _, old_size = self.od.pop(key)
      self.current_bytes -= old_size
    self.od[key] = (chart, size)
    self.current_bytes += size
    self._evict()

  def clear(self):
    self.od.clear()
    self.current_bytes = 0

  def _evict(self):
    while self.current_bytes > self.max_bytes and self.od:
      _, (_, size) = self.od.popitem(last=False)
      self.current_bytes -= size


class ChartService:
  """Catalog lookup + rendering with a byte-budgeted memo of finished charts."""

  def __init__(self, renderer: Optional[SvgRenderer] = None, max_bytes: int = CACHE_MAX_BYTES,
               enabled: bool = CACHE_ENABLED):
    self.renderer = renderer or SvgRenderer()
    self.enabled = enabled
    self._lru = _LRU(max_bytes)
    self.hits = 0
    self.misses = 0

  @staticmethod
  def _request_hash(request: RenderRequest) -> str:
    h = hashlib.sha1()
    h.update(repr(request.options).encode("utf-8"))
    for s in request.series:
      h.update(str(s.name).encode("utf-8"))
      h.update(b"|")
      for smp in s.samples:
        h.update(f"{smp.timestamp!r}:{smp.value!r};".encode("utf-8"))
      h.update(b"#")
    return h.hexdigest()

  def build_request(self, kind: str, series: Sequence[Series], parameter_label: str = "",
                    timezone: Optional[str] = None) -> RenderRequest:
    opts: RenderOptions = options_for(kind, parameter_label, timezone)
    return RenderRequest(series=tuple(series), options=opts)

  def render_request(self, request: RenderRequest) -> RenderedChart:
    if not self.enabled or not isinstance(request, RenderRequest):
      return self.renderer.render(request)
    key = self._request_hash(request)
    chart = self._lru.get(key)
    if chart is not None:
      self.hits += 1
      return chart
    self.misses += 1
    chart = self.renderer.render(request)
    self._lru.put(key, chart)
    logger.debug("Cached chart %s (%d bytes cached)", key[:12], self._lru.current_bytes)
    return chart

  def render(self, kind: str, series: Sequence[Series], parameter_label: str = "",
             timezone: Optional[str] = None) -> RenderedChart:
    return self.render_request(self.build_request(kind, series, parameter_label, timezone))

  def render_png(self, kind: str, series: Sequence[Series], parameter_label: str = "",
                 width: int = PNG_WIDTH, height: int = PNG_HEIGHT) -> bytes:
    from metricchart.raster import svg_to_png
    chart = self.render(kind, series, parameter_label)
    return svg_to_png(chart.svg, width, height)

  def clear(self):
    self._lru.clear()

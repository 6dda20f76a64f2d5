import os
from pathlib import Path


def _bool(val: str, default: bool = True) -> bool:
  if val is None:
    return default
  return val.lower() in ("1", "true", "yes", "on")


# Logical canvas; the document is scaled to its container via viewBox
CANVAS_WIDTH = int(os.getenv("METRICCHART_CANVAS_WIDTH", "800"))
CANVAS_HEIGHT = int(os.getenv("METRICCHART_CANVAS_HEIGHT", "400"))

DEFAULT_TZ = os.getenv("METRICCHART_TZ", "UTC")

# Optional JSON catalog merged over the built-in metric kinds
METRICS_FILE = os.getenv("METRICCHART_METRICS_FILE", "")
METRICS_PATH = Path(METRICS_FILE).resolve() if METRICS_FILE else None

# In-memory chart cache
CACHE_MAX_BYTES = int(os.getenv("METRICCHART_CACHE_MAX_BYTES", str(8 * 1024 * 1024)))
CACHE_ENABLED = _bool(os.getenv("METRICCHART_CACHE_ENABLED", "true"), True)

# Raster export
PNG_WIDTH = int(os.getenv("METRICCHART_PNG_WIDTH", "800"))
PNG_HEIGHT = int(os.getenv("METRICCHART_PNG_HEIGHT", "400"))

LOG_LEVEL = os.getenv("METRICCHART_LOG_LEVEL", "INFO").upper()

"""GNSS viewer core: NMEA parsing, fix aggregation and satellite placement."""

from gnss_viewer.config import ViewerConfig
from gnss_viewer.models import FixSnapshot, Observer, SatelliteRecord

__all__ = [
    "FixSnapshot",
    "Observer",
    "SatelliteRecord",
    "ViewerConfig",
    "nmea",
    "receiver",
    "sat",
    "runtime",
    "utils",
]

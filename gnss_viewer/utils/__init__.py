"""Utilities for the GNSS viewer.

NOTE: Keep this package lightweight; it is imported by every other module.
"""

from gnss_viewer.utils.angles import (
    az_el_from_ecef,
    decimal_to_dms,
    dms_to_geodetic,
    geodetic_to_dms,
    nmea_to_decimal,
)
from gnss_viewer.utils.logging import get_logger
from gnss_viewer.utils.wgs84 import (
    az_el_to_ecef,
    ecef_to_enu_matrix,
    ecef_to_geodetic,
    enu_from_ecef_delta,
    enu_to_ecef,
    geodetic_to_ecef,
)

__all__ = [
    "az_el_from_ecef",
    "az_el_to_ecef",
    "decimal_to_dms",
    "dms_to_geodetic",
    "ecef_to_enu_matrix",
    "ecef_to_geodetic",
    "enu_from_ecef_delta",
    "enu_to_ecef",
    "geodetic_to_dms",
    "geodetic_to_ecef",
    "get_logger",
    "nmea_to_decimal",
]

"""Angle utilities for GNSS geometry and display."""

from __future__ import annotations

import numpy as np

from gnss_viewer.utils.wgs84 import ecef_to_geodetic, enu_from_ecef_delta

_SECONDS_CARRY_TOL = 1e-6


def az_el_from_ecef(observer_ecef_m: np.ndarray, target_ecef_m: np.ndarray) -> tuple[float, float]:
    """Compute elevation and azimuth (deg) from observer to target using ENU."""

    lat_deg, lon_deg, _ = ecef_to_geodetic(*observer_ecef_m)
    delta = np.asarray(target_ecef_m, dtype=float) - np.asarray(observer_ecef_m, dtype=float)
    east, north, up = enu_from_ecef_delta(delta, lat_deg, lon_deg)
    horiz = np.hypot(east, north)
    elev = float(np.rad2deg(np.arctan2(up, horiz)))
    az = float(np.rad2deg(np.arctan2(east, north)))
    if az < 0.0:
        az += 360.0
    return elev, az


def dms_to_geodetic(degrees: int, minutes: int, seconds: float, direction: str) -> float:
    """Convert degrees/minutes/seconds and a hemisphere letter to signed decimal degrees."""

    decimal = degrees + minutes / 60.0 + seconds / 3600.0
    if direction.upper() in ("S", "W"):
        decimal = -decimal
    return decimal


def decimal_to_dms(value_deg: float) -> tuple[int, int, float]:
    """Split absolute decimal degrees into (degrees, minutes, seconds)."""

    value = abs(float(value_deg))
    degrees = int(value)
    minutes_full = (value - degrees) * 60.0
    minutes = int(minutes_full)
    seconds = (minutes_full - minutes) * 60.0

    # Float residue such as 19.99999999' must carry into the next minute.
    if 60.0 - seconds < _SECONDS_CARRY_TOL:
        seconds = 0.0
        minutes += 1
    if minutes >= 60:
        minutes -= 60
        degrees += 1
    return degrees, minutes, seconds


def geodetic_to_dms(value_deg: float, hemisphere: str) -> str:
    """Format decimal degrees as ``D°MM'SS.sss" H``."""

    if value_deg == 0.0:
        return "0°00'00.000\" N/A"
    degrees, minutes, seconds = decimal_to_dms(value_deg)
    seconds = round(seconds, 3)
    if seconds >= 60.0:
        seconds -= 60.0
        minutes += 1
        if minutes >= 60:
            minutes -= 60
            degrees += 1
    return f"{degrees}°{minutes:02d}'{seconds:06.3f}\" {hemisphere}"


def nmea_to_decimal(value: float, hemisphere: str) -> float:
    """Convert an NMEA ``(d)ddmm.mmmm`` coordinate to signed decimal degrees."""

    degrees = int(value / 100)
    minutes = value - degrees * 100
    decimal = degrees + minutes / 60.0
    if hemisphere.upper() in ("S", "W"):
        decimal = -decimal
    return decimal

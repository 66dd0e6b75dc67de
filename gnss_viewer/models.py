"""Core data models for the GNSS viewer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Union

import numpy as np


class FixQuality(IntEnum):
    """GGA fix quality indicator (0-8)."""

    INVALID = 0
    GPS = 1
    DGPS = 2
    PPS = 3
    RTK = 4
    FLOAT_RTK = 5
    ESTIMATED = 6
    MANUAL = 7
    SIMULATED = 8

    @property
    def label(self) -> str:
        return _FIX_QUALITY_LABELS[self]


_FIX_QUALITY_LABELS = {
    FixQuality.INVALID: "No fix",
    FixQuality.GPS: "GPS",
    FixQuality.DGPS: "DGPS",
    FixQuality.PPS: "PPS",
    FixQuality.RTK: "RTK",
    FixQuality.FLOAT_RTK: "Float RTK",
    FixQuality.ESTIMATED: "Estimated",
    FixQuality.MANUAL: "Manual",
    FixQuality.SIMULATED: "Simulated",
}


class FixType(IntEnum):
    """GSA fix type."""

    NONE = 1
    FIX_2D = 2
    FIX_3D = 3

    @property
    def label(self) -> str:
        return _FIX_TYPE_LABELS[self]


_FIX_TYPE_LABELS = {
    FixType.NONE: "N/A",
    FixType.FIX_2D: "2D Fix",
    FixType.FIX_3D: "3D Fix",
}


class Constellation(str, Enum):
    """Satellite systems reported by the status feed."""

    GPS = "GPS"
    GLONASS = "GLONASS"
    BEIDOU = "BeiDou"
    GALILEO = "Galileo"
    QZSS = "QZSS"
    IRNSS = "IRNSS"
    SBAS = "SBAS"
    UNKNOWN = "Unknown"
    OTHER = "Other"


def constellation_from_name(name: str | Constellation) -> Constellation:
    """Resolve a constellation name (case-insensitive) into the enum."""

    if isinstance(name, Constellation):
        return name
    key = name.strip().lower()
    for member in Constellation:
        if member.value.lower() == key:
            return member
    return Constellation.OTHER


_TALKER_LABELS = {
    "GP": "GPS/SBAS",
    "GL": "GLONASS",
    "GB": "BeiDou",
    "BD": "BeiDou",
    "GA": "Galileo",
    "GQ": "QZSS",
    "GI": "IRNSS",
    "GN": "Multi-GNSS",
}


def talker_label(talker: str) -> str:
    """Human-readable name of an NMEA talker id."""

    return _TALKER_LABELS.get(talker.upper()[:2], "Unknown")


@dataclass(frozen=True)
class GgaRecord:
    """Global positioning system fix data."""

    time: str | None = None
    latitude_deg: float | None = None
    lat_hemisphere: str | None = None
    longitude_deg: float | None = None
    lon_hemisphere: str | None = None
    fix_quality: FixQuality | None = None
    num_satellites: int | None = None
    hdop: float | None = None
    altitude_m: float | None = None
    geoid_separation_m: float | None = None
    msl_altitude_m: float | None = None
    dgps_age_s: float | None = None
    dgps_station_id: str | None = None


@dataclass(frozen=True)
class RmcRecord:
    """Recommended minimum navigation data."""

    time: str | None = None
    status: str | None = None
    latitude_deg: float | None = None
    lat_hemisphere: str | None = None
    longitude_deg: float | None = None
    lon_hemisphere: str | None = None
    speed_knots: float | None = None
    course_deg: float | None = None
    date: str | None = None
    magnetic_variation_deg: float | None = None


@dataclass(frozen=True)
class GbsRecord:
    """Satellite fault detection: expected position errors in meters."""

    time: str | None = None
    lat_error_m: float | None = None
    lon_error_m: float | None = None
    alt_error_m: float | None = None

    @property
    def errors(self) -> tuple[float, ...]:
        return tuple(
            value
            for value in (self.lat_error_m, self.lon_error_m, self.alt_error_m)
            if value is not None
        )


@dataclass(frozen=True)
class GsaRecord:
    """DOP and active satellites."""

    mode: str | None = None
    fix_type: FixType | None = None
    satellite_ids: tuple[int, ...] = ()
    pdop: float | None = None
    hdop: float | None = None
    vdop: float | None = None
    system_id: int | None = None


@dataclass(frozen=True)
class VtgRecord:
    """Track made good and ground speed."""

    course_true_deg: float | None = None
    course_magnetic_deg: float | None = None
    speed_knots: float | None = None
    speed_kmh: float | None = None
    mode: str | None = None


@dataclass(frozen=True)
class GsvSatellite:
    """One satellite block of a GSV sentence."""

    prn: int
    elevation_deg: float | None
    azimuth_deg: float | None
    snr_dbhz: float | None


@dataclass(frozen=True)
class GsvRecord:
    """Satellites in view, one message of a multi-message cycle."""

    talker: str
    total_messages: int
    message_number: int
    satellites_in_view: int | None = None
    satellites: tuple[GsvSatellite, ...] = ()


ParsedRecord = Union[GgaRecord, RmcRecord, GbsRecord, GsaRecord, VtgRecord, GsvRecord]


@dataclass(frozen=True)
class SatelliteRecord:
    """Status of one tracked satellite as reported by the status feed."""

    prn: int
    constellation: Constellation
    snr_dbhz: float
    used_in_fix: bool
    azimuth_deg: float
    elevation_deg: float


@dataclass(frozen=True)
class Observer:
    """Observer location on the WGS-84 ellipsoid."""

    lat_deg: float = 0.0
    lon_deg: float = 0.0
    alt_m: float = 0.0


@dataclass(frozen=True)
class PositionedSatellite:
    """Satellite positioned in ECEF and scene space."""

    prn: int
    constellation: Constellation
    altitude_m: float
    ecef_m: np.ndarray
    scene_pos: np.ndarray
    used_in_fix: bool
    snr_dbhz: float

    @property
    def altitude_known(self) -> bool:
        return self.altitude_m > 0.0


@dataclass(frozen=True)
class FixSnapshot:
    """Merged, current-best-known fix.

    ``known`` is False until the first accepted record and again after a
    staleness timeout. The ``*_t_s`` fields hold the monotonic receive time of
    the last accepted record of each sentence type.
    """

    known: bool = False
    time: str | None = None
    date: str | None = None
    latitude_deg: float | None = None
    longitude_deg: float | None = None
    lat_hemisphere: str | None = None
    lon_hemisphere: str | None = None
    fix_quality: FixQuality | None = None
    fix_type: FixType | None = None
    num_satellites: int | None = None
    satellites_used: tuple[int, ...] | None = None
    hdop: float | None = None
    pdop: float | None = None
    vdop: float | None = None
    altitude_m: float | None = None
    geoid_separation_m: float | None = None
    msl_altitude_m: float | None = None
    speed_knots: float | None = None
    speed_kmh: float | None = None
    course_deg: float | None = None
    course_magnetic_deg: float | None = None
    magnetic_variation_deg: float | None = None
    gbs_errors_m: tuple[float, ...] | None = None
    accuracy_m: float | None = None
    gga_t_s: float | None = None
    rmc_t_s: float | None = None
    gbs_t_s: float | None = None
    gsa_t_s: float | None = None
    vtg_t_s: float | None = None
    gsv_t_s: float | None = None
    satellites_in_view: dict[str, int] = field(default_factory=dict)

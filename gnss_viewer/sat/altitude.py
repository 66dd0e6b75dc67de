"""Nominal orbital altitudes per constellation.

The viewer has azimuth and elevation but no range for each satellite, so it
places every satellite at its constellation's nominal altitude above the
ellipsoid. Altitudes are in meters.
"""

from __future__ import annotations

from gnss_viewer.models import Constellation, constellation_from_name

UNKNOWN_ALTITUDE_M = 0.0
GEO_ALTITUDE_M = 35_786_000.0

_NOMINAL_ALTITUDE_M = {
    Constellation.GPS: 20_180_000.0,
    Constellation.GLONASS: 19_100_000.0,
    Constellation.GALILEO: 23_222_000.0,
    Constellation.BEIDOU: 21_500_000.0,
    Constellation.QZSS: 35_800_000.0,
    Constellation.IRNSS: 36_000_000.0,
    Constellation.SBAS: GEO_ALTITUDE_M,
}

# BeiDou PRNs flown in geostationary orbit.
BEIDOU_GEO_PRNS = frozenset(
    (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 13, 16, 31, 38, 39, 40, 56, 59, 60, 61, 62)
)


def nominal_altitude_m(constellation: Constellation | str, prn: int) -> float:
    """Nominal altitude for a satellite; 0.0 when the constellation is unknown."""

    constellation = constellation_from_name(constellation)
    if constellation is Constellation.BEIDOU and prn in BEIDOU_GEO_PRNS:
        return GEO_ALTITUDE_M
    return _NOMINAL_ALTITUDE_M.get(constellation, UNKNOWN_ALTITUDE_M)


def is_altitude_known(altitude_m: float) -> bool:
    return altitude_m > UNKNOWN_ALTITUDE_M

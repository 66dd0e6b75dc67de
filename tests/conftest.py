"""Shared NMEA fixtures.

Checksums are left off most sentences; the parser only checks them when
validation is switched on.
"""

from __future__ import annotations

import pytest

from gnss_viewer.models import Constellation, SatelliteRecord
from gnss_viewer.nmea.checksum import nmea_checksum


@pytest.fixture
def wrap_sentence():
    """Build ``$payload*hh`` with a correct checksum."""

    def _wrap(payload: str) -> str:
        return f"${payload}*{nmea_checksum(payload)}\r\n"

    return _wrap


@pytest.fixture
def gga_sentence() -> str:
    return "$GPGGA,172814.0,3723.46587704,N,12202.26957864,W,2,6,1.2,18.893,M,25.669,M,2.00031*4F"


@pytest.fixture
def rmc_sentence() -> str:
    return "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W"


@pytest.fixture
def gbs_sentence() -> str:
    return "$GPGBS,015509.00,1.5,2.0,3.5,,,,"


@pytest.fixture
def gsa_sentence() -> str:
    return "$GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1"


@pytest.fixture
def vtg_sentence() -> str:
    return "$GPVTG,054.7,T,034.4,M,005.5,N,010.2,K"


@pytest.fixture
def gsv_cycle() -> list[str]:
    return [
        "$GPGSV,3,1,11,03,03,111,00,04,15,270,00,06,01,010,00,13,06,292,00",
        "$GPGSV,3,2,11,14,25,170,00,16,57,208,39,18,67,296,40,19,40,246,00",
        "$GPGSV,3,3,11,22,42,067,42,24,14,311,43,27,05,244,00,,,,",
    ]


@pytest.fixture
def make_satellite():
    def _make(
        prn: int,
        constellation: Constellation = Constellation.GPS,
        snr_dbhz: float = 40.0,
        used_in_fix: bool = True,
        azimuth_deg: float = 0.0,
        elevation_deg: float = 45.0,
    ) -> SatelliteRecord:
        return SatelliteRecord(
            prn=prn,
            constellation=constellation,
            snr_dbhz=snr_dbhz,
            used_in_fix=used_in_fix,
            azimuth_deg=azimuth_deg,
            elevation_deg=elevation_deg,
        )

    return _make

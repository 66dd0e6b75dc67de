"""Signal quality summary of the tracked satellite set."""

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Sequence

import numpy as np

from gnss_viewer.models import Constellation, SatelliteRecord

# SNR treated as full signal strength.
FULL_SCALE_SNR_DBHZ = 50.0


class SignalStatus(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    NO_FIX = "no_fix"
    SEARCHING = "searching"
    DISABLED = "disabled"

    @property
    def title(self) -> str:
        return _STATUS_TITLES[self]


_STATUS_TITLES = {
    SignalStatus.EXCELLENT: "Excellent Signal",
    SignalStatus.GOOD: "Good Signal",
    SignalStatus.FAIR: "Fair Signal",
    SignalStatus.POOR: "Poor Signal",
    SignalStatus.NO_FIX: "No GPS Fix",
    SignalStatus.SEARCHING: "Searching...",
    SignalStatus.DISABLED: "GPS Disabled",
}

# (minimum satellites used in fix, minimum average SNR in dB-Hz), best first.
_STATUS_THRESHOLDS = (
    (SignalStatus.EXCELLENT, 10, 35.0),
    (SignalStatus.GOOD, 6, 28.0),
    (SignalStatus.FAIR, 4, 20.0),
    (SignalStatus.POOR, 1, 10.0),
)


def average_snr(satellites: Sequence[SatelliteRecord], used_only: bool = False) -> float:
    """Mean SNR in dB-Hz, 0.0 for an empty selection."""

    selected = [sat.snr_dbhz for sat in satellites if sat.used_in_fix or not used_only]
    if not selected:
        return 0.0
    return float(np.mean(selected))


def average_snr_by_constellation(
    satellites: Sequence[SatelliteRecord],
) -> dict[Constellation, tuple[float, int]]:
    """Mean SNR and count per constellation, ignoring satellites with 0 dB-Hz.

    A constellation whose satellites all report 0 maps to ``(0.0, 0)``.
    """

    grouped: dict[Constellation, list[float]] = defaultdict(list)
    for sat in satellites:
        values = grouped[sat.constellation]
        if sat.snr_dbhz != 0.0:
            values.append(sat.snr_dbhz)
    return {
        constellation: ((float(np.mean(values)), len(values)) if values else (0.0, 0))
        for constellation, values in grouped.items()
    }


def signal_strength(satellites: Sequence[SatelliteRecord]) -> float:
    """Average SNR scaled to [0, 1]."""

    if not satellites:
        return 0.0
    return float(np.clip(average_snr(satellites) / FULL_SCALE_SNR_DBHZ, 0.0, 1.0))


def determine_signal_status(
    satellites: Sequence[SatelliteRecord],
    avg_snr_dbhz: float,
    has_nmea: bool,
) -> SignalStatus:
    """Classify reception from the satellites used in the fix and their SNR."""

    if not has_nmea and not satellites:
        return SignalStatus.SEARCHING
    if not satellites:
        return SignalStatus.NO_FIX

    used = sum(1 for sat in satellites if sat.used_in_fix)
    for status, min_used, min_snr in _STATUS_THRESHOLDS:
        if used >= min_used and avg_snr_dbhz >= min_snr:
            return status
    return SignalStatus.NO_FIX

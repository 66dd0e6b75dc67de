"""Satellite placement and status."""

from gnss_viewer.sat.altitude import UNKNOWN_ALTITUDE_M, is_altitude_known, nominal_altitude_m
from gnss_viewer.sat.reconciler import ReconcileResult, SatelliteSetReconciler
from gnss_viewer.sat.signal import (
    SignalStatus,
    average_snr,
    average_snr_by_constellation,
    determine_signal_status,
    signal_strength,
)

__all__ = [
    "ReconcileResult",
    "SatelliteSetReconciler",
    "SignalStatus",
    "UNKNOWN_ALTITUDE_M",
    "average_snr",
    "average_snr_by_constellation",
    "determine_signal_status",
    "is_altitude_known",
    "nominal_altitude_m",
    "signal_strength",
]

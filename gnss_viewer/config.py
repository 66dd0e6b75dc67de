"""Configuration objects for the GNSS viewer core."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewerConfig:
    """Viewer configuration defaults."""

    stale_timeout_s: float = 30.0
    sensor_accuracy_m: float = 4.5
    model_radius: float = 0.5
    scene_yaw_deg: float = -2.0
    flip_longitude: bool = False
    marker_lift_m: float = 5_000.0
    validate_checksum: bool = False
    channel_maxsize: int = 1

"""ECEF to render-scene mapping.

The scene uses a Y-up frame: scene X = ECEF X, scene Y = ECEF Z (north pole up),
scene Z = -ECEF Y. Distances are scaled so the ellipsoid's semi-major axis
maps to ``model_radius`` scene units.
"""

from __future__ import annotations

import numpy as np

from gnss_viewer.config import ViewerConfig
from gnss_viewer.models import Observer
from gnss_viewer.utils.wgs84 import ELLIPSOID, geodetic_to_ecef

DEFAULT_SCALE = ViewerConfig().model_radius / ELLIPSOID.a


def ecef_to_scene_pos(
    ecef_m: np.ndarray,
    scale: float = DEFAULT_SCALE,
    yaw_deg: float = -2.0,
    flip_lon: bool = False,
) -> np.ndarray:
    """Remap and scale an ECEF position into scene coordinates.

    Args:
        ecef_m: ECEF position (x, y, z) in meters.
        scale: Scene units per meter.
        yaw_deg: Rotation about the scene up axis, corrects the Earth texture's
            prime-meridian offset.
        flip_lon: Mirror the east/west axis.

    Returns:
        Scene position (x, y, z).
    """

    x, y, z = np.asarray(ecef_m, dtype=float)
    pos = np.array([x * scale, z * scale, -y * scale], dtype=float)

    if flip_lon:
        pos[2] = -pos[2]

    if yaw_deg != 0.0:
        yaw = np.deg2rad(yaw_deg)
        cos_y = np.cos(yaw)
        sin_y = np.sin(yaw)
        pos = np.array(
            [
                pos[0] * cos_y - pos[2] * sin_y,
                pos[1],
                pos[0] * sin_y + pos[2] * cos_y,
            ],
            dtype=float,
        )
    return pos


def scene_pos_for_config(ecef_m: np.ndarray, cfg: ViewerConfig) -> np.ndarray:
    """Scene position using the scale, yaw and mirroring of ``cfg``."""

    return ecef_to_scene_pos(
        ecef_m,
        scale=cfg.model_radius / ELLIPSOID.a,
        yaw_deg=cfg.scene_yaw_deg,
        flip_lon=cfg.flip_longitude,
    )


def location_marker_position(observer: Observer, cfg: ViewerConfig | None = None) -> np.ndarray:
    """Scene position of the observer marker, lifted above the surface to stay visible."""

    cfg = cfg or ViewerConfig()
    ecef = geodetic_to_ecef(observer.lat_deg, observer.lon_deg, observer.alt_m + cfg.marker_lift_m)
    return scene_pos_for_config(ecef, cfg)

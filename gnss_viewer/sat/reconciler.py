"""Satellite set reconciliation with a pool of reusable render handles."""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
from types import MappingProxyType
from typing import Callable, Generic, Iterable, Mapping, TypeVar

import numpy as np

from gnss_viewer.config import ViewerConfig
from gnss_viewer.models import Observer, PositionedSatellite, SatelliteRecord
from gnss_viewer.sat.altitude import is_altitude_known, nominal_altitude_m
from gnss_viewer.scene import scene_pos_for_config
from gnss_viewer.utils.logging import get_logger
from gnss_viewer.utils.wgs84 import az_el_to_ecef

_LOG = get_logger(__name__)

H = TypeVar("H")


@dataclass(frozen=True)
class ReconcileResult(Generic[H]):
    added: tuple[int, ...] = ()
    updated: tuple[int, ...] = ()
    removed: tuple[int, ...] = ()
    positions: tuple[PositionedSatellite, ...] = ()
    allocated: tuple[H, ...] = field(default_factory=tuple)


class SatelliteSetReconciler(Generic[H]):
    """Keep one render handle per reported PRN and recycle the rest.

    Handles are opaque to the reconciler. ``allocate`` is only called when the
    free list is empty; handles of satellites that disappear are ``reset`` and
    kept for reuse instead of being destroyed. ``place`` receives the handle
    and its computed position on every update.
    """

    def __init__(
        self,
        allocate: Callable[[], H],
        reset: Callable[[H], None] | None = None,
        place: Callable[[H, PositionedSatellite], None] | None = None,
        release: Callable[[H], None] | None = None,
        cfg: ViewerConfig | None = None,
        altitude_model: Callable[..., float] = nominal_altitude_m,
    ) -> None:
        self.cfg = cfg or ViewerConfig()
        self._allocate = allocate
        self._reset = reset
        self._place = place
        self._release = release
        self._altitude_model = altitude_model
        self._lock = threading.Lock()
        self._active: dict[int, H] = {}
        self._free: list[H] = []
        self._closed = False

    @property
    def active(self) -> Mapping[int, H]:
        with self._lock:
            return MappingProxyType(dict(self._active))

    @property
    def free_count(self) -> int:
        with self._lock:
            return len(self._free)

    @property
    def handle_count(self) -> int:
        with self._lock:
            return len(self._active) + len(self._free)

    @property
    def closed(self) -> bool:
        return self._closed

    def update(self, satellites: Iterable[SatelliteRecord], observer: Observer) -> ReconcileResult[H]:
        """Reconcile the handle pool against the latest full satellite list.

        The new PRN-to-handle map and free list are built aside and swapped in
        together, so readers of ``active`` never see a partial update. Render
        callbacks run after the swap.
        """

        if self._closed:
            _LOG.debug("Reconciler torn down; update ignored")
            return ReconcileResult()

        # Duplicate PRNs: the last entry wins, first-seen order is kept.
        current: dict[int, SatelliteRecord] = {}
        for sat in satellites:
            current[sat.prn] = sat

        with self._lock:
            active = dict(self._active)
            free = list(self._free)

        removed = tuple(sorted(prn for prn in active if prn not in current))
        removed_handles = [active.pop(prn) for prn in removed]
        free.extend(removed_handles)

        added: list[int] = []
        updated: list[int] = []
        allocated: list[H] = []
        positions: list[PositionedSatellite] = []
        placements: list[tuple[H, PositionedSatellite]] = []
        next_active: dict[int, H] = {}
        for prn, sat in current.items():
            handle = active.get(prn)
            if handle is None:
                if free:
                    handle = free.pop()
                else:
                    handle = self._allocate()
                    allocated.append(handle)
                added.append(prn)
            else:
                updated.append(prn)
            next_active[prn] = handle

            positioned = self.position(sat, observer)
            placements.append((handle, positioned))
            positions.append(positioned)

        with self._lock:
            self._active = next_active
            self._free = free

        if self._reset is not None:
            for handle in removed_handles:
                self._reset(handle)
        if self._place is not None:
            for handle, positioned in placements:
                self._place(handle, positioned)

        return ReconcileResult(
            added=tuple(added),
            updated=tuple(updated),
            removed=removed,
            positions=tuple(positions),
            allocated=tuple(allocated),
        )

    def position(self, sat: SatelliteRecord, observer: Observer) -> PositionedSatellite:
        """Place a satellite at its nominal altitude along its az/el ray."""

        altitude_m = float(self._altitude_model(sat.constellation, sat.prn))
        if not is_altitude_known(altitude_m):
            _LOG.warning(
                "Unknown altitude for %s PRN %d; satellite placed at the observer",
                getattr(sat.constellation, "value", sat.constellation),
                sat.prn,
            )
        ecef = az_el_to_ecef(sat.azimuth_deg, sat.elevation_deg, observer, altitude_m)
        return PositionedSatellite(
            prn=sat.prn,
            constellation=sat.constellation,
            altitude_m=altitude_m,
            ecef_m=np.asarray(ecef, dtype=float),
            scene_pos=scene_pos_for_config(ecef, self.cfg),
            used_in_fix=sat.used_in_fix,
            snr_dbhz=sat.snr_dbhz,
        )

    def teardown(self) -> list[H]:
        """Reset and release every handle; later updates do nothing."""

        with self._lock:
            handles = list(self._active.values()) + list(self._free)
            self._active = {}
            self._free = []
        for handle in handles:
            if self._reset is not None:
                self._reset(handle)
            if self._release is not None:
                self._release(handle)
        if not self._closed:
            _LOG.info("Reconciler torn down, %d handles released", len(handles))
        self._closed = True
        return handles

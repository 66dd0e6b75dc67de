from __future__ import annotations

import queue
import time

import numpy as np
import pytest

from gnss_viewer.config import ViewerConfig
from gnss_viewer.models import FixSnapshot, Observer
from gnss_viewer.runtime.feed import GnssFeed
from gnss_viewer.sat.reconciler import SatelliteSetReconciler


class _Pool:
    def __init__(self) -> None:
        self.allocated = 0
        self.released: list[int] = []

    def allocate(self) -> int:
        self.allocated += 1
        return self.allocated

    def release(self, handle: int) -> None:
        self.released.append(handle)


def _feed(pool: _Pool, cfg: ViewerConfig | None = None) -> GnssFeed[int]:
    reconciler = SatelliteSetReconciler(allocate=pool.allocate, release=pool.release, cfg=cfg)
    return GnssFeed(reconciler, cfg=cfg)


def test_sentence_updates_are_published(gga_sentence: str) -> None:
    with _feed(_Pool()) as feed:
        updates = feed.fix_updates.subscribe()
        snapshot = feed.submit_sentence(gga_sentence).result(timeout=2.0)

        assert snapshot.known is True
        assert updates.get(timeout=2.0) is snapshot


def test_malformed_sentence_publishes_nothing() -> None:
    with _feed(_Pool()) as feed:
        updates = feed.fix_updates.subscribe()
        snapshot = feed.submit_sentence("$GPGGA,bad").result(timeout=2.0)

        assert snapshot.known is False
        assert updates.empty()


def test_status_batches_are_reconciled(make_satellite) -> None:
    pool = _Pool()
    with _feed(pool) as feed:
        results = feed.satellite_updates.subscribe(maxsize=4)
        feed.submit_status([make_satellite(1), make_satellite(2)]).result(timeout=2.0)
        second = feed.submit_status([make_satellite(2), make_satellite(3)]).result(timeout=2.0)

        assert second.removed == (1,)
        assert second.added == (3,)
        assert pool.allocated == 2
        assert results.get(timeout=2.0).added == (1, 2)
        assert results.get(timeout=2.0) is second


def test_update_observer_moves_satellites(make_satellite) -> None:
    with _feed(_Pool()) as feed:
        sat = make_satellite(5, elevation_deg=90.0)
        before = feed.submit_status([sat]).result(timeout=2.0).positions[0]
        feed.update_observer(Observer(lat_deg=0.0, lon_deg=90.0))
        after = feed.submit_status([sat]).result(timeout=2.0).positions[0]

        assert feed.observer.lon_deg == 90.0
        assert not np.allclose(before.ecef_m, after.ecef_m)


def test_nmea_satellites_feed_the_reconciler(gsv_cycle: list[str], gsa_sentence: str) -> None:
    with _feed(_Pool()) as feed:
        feed.submit_sentence(gsa_sentence)
        futures = [feed.submit_sentence(line) for line in gsv_cycle]
        futures[-1].result(timeout=2.0)

        result = feed.submit_nmea_satellites().result(timeout=2.0)

        assert len(result.added) == 11
        assert sorted(sat.prn for sat in result.positions if sat.used_in_fix) == [4, 24]


def test_stale_stream_publishes_invalid_snapshot(gga_sentence: str) -> None:
    with _feed(_Pool(), ViewerConfig(stale_timeout_s=0.05)) as feed:
        updates = feed.fix_updates.subscribe(maxsize=4)
        feed.submit_sentence(gga_sentence).result(timeout=2.0)

        deadline = time.monotonic() + 2.0
        latest: FixSnapshot | None = None
        while time.monotonic() < deadline:
            try:
                latest = updates.get(timeout=0.1)
            except queue.Empty:
                continue
            if not latest.known:
                break

        assert latest is not None
        assert latest.known is False
        assert feed.aggregator.snapshot.known is False


def test_stop_tears_down_and_rejects_work(make_satellite, gga_sentence: str) -> None:
    pool = _Pool()
    feed = _feed(pool)
    feed.submit_status([make_satellite(1), make_satellite(2)]).result(timeout=2.0)
    feed.stop()

    assert feed.stopped is True
    assert sorted(pool.released) == [1, 2]
    assert feed.fix_updates.closed is True
    assert feed.satellite_updates.closed is True
    with pytest.raises(RuntimeError):
        feed.submit_sentence(gga_sentence)
    with pytest.raises(RuntimeError):
        feed.submit_status([])

    feed.stop()
    assert sorted(pool.released) == [1, 2]

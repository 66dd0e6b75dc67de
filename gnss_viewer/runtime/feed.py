"""Threaded wiring of the sentence stream and satellite status batches."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import threading
import time
from typing import Callable, Generic, Iterable, TypeVar

from gnss_viewer.config import ViewerConfig
from gnss_viewer.models import FixSnapshot, Observer, SatelliteRecord
from gnss_viewer.receiver.fix_aggregator import FixAggregator
from gnss_viewer.runtime.channel import SnapshotChannel
from gnss_viewer.runtime.staleness import StalenessTimer
from gnss_viewer.sat.reconciler import ReconcileResult, SatelliteSetReconciler
from gnss_viewer.utils.logging import get_logger

_LOG = get_logger(__name__)

H = TypeVar("H")


class GnssFeed(Generic[H]):
    """Run the aggregator and the reconciler on one worker thread each.

    All sentence handling (including staleness expiry) is serialized on the
    sentence worker and all reconciliation on the status worker, so neither
    component is ever entered from two threads at once. Results are published
    on ``fix_updates`` and ``satellite_updates``.
    """

    def __init__(
        self,
        reconciler: SatelliteSetReconciler[H],
        cfg: ViewerConfig | None = None,
        aggregator: FixAggregator | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.cfg = cfg or ViewerConfig()
        self.aggregator = aggregator or FixAggregator(self.cfg, clock=clock)
        self.reconciler = reconciler
        self.fix_updates: SnapshotChannel[FixSnapshot] = SnapshotChannel(self.cfg.channel_maxsize)
        self.satellite_updates: SnapshotChannel[ReconcileResult[H]] = SnapshotChannel(self.cfg.channel_maxsize)
        self._sentence_worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gnss-nmea")
        self._status_worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gnss-status")
        self._timer = StalenessTimer(self.cfg.stale_timeout_s, self._on_stale)
        self._lock = threading.Lock()
        self._observer = Observer()
        self._stopped = False
        _LOG.info("GNSS feed started (stale timeout %.1f s)", self.cfg.stale_timeout_s)

    @property
    def observer(self) -> Observer:
        return self._observer

    @property
    def stopped(self) -> bool:
        return self._stopped

    def update_observer(self, observer: Observer) -> None:
        """Use ``observer`` for every later satellite placement."""
        self._observer = observer

    def submit_sentence(self, sentence: str) -> Future[FixSnapshot]:
        return self._submit(self._sentence_worker, self._handle_sentence, sentence)

    def submit_status(self, satellites: Iterable[SatelliteRecord]) -> Future[ReconcileResult[H]]:
        return self._submit(self._status_worker, self._handle_status, list(satellites))

    def submit_nmea_satellites(self) -> Future[ReconcileResult[H]]:
        """Reconcile against the satellites of the latest complete GSV cycles."""
        return self.submit_status(self.aggregator.gsv_satellites())

    def stop(self) -> None:
        """Stop both workers, release every render handle and close the channels."""

        with self._lock:
            if self._stopped:
                return
            self._stopped = True
        self._timer.cancel()
        self._sentence_worker.shutdown(wait=True, cancel_futures=True)
        self._status_worker.shutdown(wait=True, cancel_futures=True)
        self.reconciler.teardown()
        self.fix_updates.close()
        self.satellite_updates.close()
        _LOG.info("GNSS feed stopped")

    def __enter__(self) -> GnssFeed[H]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _submit(self, worker: ThreadPoolExecutor, fn: Callable, *args: object) -> Future:
        with self._lock:
            if self._stopped:
                raise RuntimeError("GNSS feed is stopped")
            return worker.submit(fn, *args)

    def _handle_sentence(self, sentence: str) -> FixSnapshot:
        before = self.aggregator.snapshot
        after = self.aggregator.ingest(sentence)
        if sentence.lstrip().startswith("$"):
            self._timer.touch()
        if after is not before:
            self.fix_updates.publish(after)
        return after

    def _handle_status(self, satellites: list[SatelliteRecord]) -> ReconcileResult[H]:
        result = self.reconciler.update(satellites, self._observer)
        self.satellite_updates.publish(result)
        return result

    def _on_stale(self) -> None:
        # Timer thread: hand the expiry to the sentence worker.
        with self._lock:
            if self._stopped:
                return
            self._sentence_worker.submit(self._expire)

    def _expire(self) -> None:
        if self.aggregator.expire_if_stale():
            self.fix_updates.publish(self.aggregator.snapshot)

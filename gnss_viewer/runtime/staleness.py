"""Restartable one-shot timer for stream silence detection."""

from __future__ import annotations

import threading
from typing import Callable

from gnss_viewer.utils.logging import get_logger

_LOG = get_logger(__name__)


class StalenessTimer:
    """Call ``on_expire`` once ``timeout_s`` passes without a ``touch``.

    Every ``touch`` cancels the pending timer and schedules a new one with a
    fresh generation number. A timer thread that was already running when it
    got superseded sees a stale generation and does nothing, so only the most
    recently scheduled timer can fire.
    """

    def __init__(self, timeout_s: float, on_expire: Callable[[], None]) -> None:
        self.timeout_s = float(timeout_s)
        self._on_expire = on_expire
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._cancelled = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def touch(self) -> int:
        """Restart the countdown; returns the new generation."""

        with self._lock:
            if self._cancelled:
                return self._generation
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            timer = threading.Timer(self.timeout_s, self._fire, args=(generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()
        return generation

    def cancel(self) -> None:
        """Stop for good; later touches are ignored."""

        with self._lock:
            self._cancelled = True
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, generation: int) -> bool:
        with self._lock:
            if self._cancelled or generation != self._generation:
                _LOG.debug("Superseded staleness timer %d ignored", generation)
                return False
            self._timer = None
        self._on_expire()
        return True

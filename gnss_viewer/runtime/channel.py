"""Latest-value publication to consumer threads."""

from __future__ import annotations

import queue
import threading
from typing import Generic, TypeVar

from gnss_viewer.utils.logging import get_logger

_LOG = get_logger(__name__)

T = TypeVar("T")


class SnapshotChannel(Generic[T]):
    """Fan out published items to subscriber queues.

    ``publish`` never blocks the producer. When a subscriber's queue is full
    its oldest item is dropped, since consumers only care about the latest
    snapshot.
    """

    def __init__(self, maxsize: int = 1) -> None:
        self._default_maxsize = max(1, int(maxsize))
        self._subscribers: list[queue.Queue[T]] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, maxsize: int | None = None) -> queue.Queue[T]:
        size = self._default_maxsize if maxsize is None else max(1, int(maxsize))
        subscriber: queue.Queue[T] = queue.Queue(maxsize=size)
        with self._lock:
            self._subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: queue.Queue[T]) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

    def publish(self, item: T) -> bool:
        """Deliver ``item`` to every subscriber; False once the channel is closed."""

        with self._lock:
            if self._closed:
                return False
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            while True:
                try:
                    subscriber.put_nowait(item)
                    break
                except queue.Full:
                    try:
                        subscriber.get_nowait()
                    except queue.Empty:
                        pass
        return True

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._subscribers.clear()
        _LOG.debug("Channel closed")

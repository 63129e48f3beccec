from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from queue import Empty
from queue import Full
from queue import Queue
from typing import Any
from typing import Generic
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUEUE_CAPACITY = 5

_END = object()


@dataclass(frozen=True)
class _Failure:
    error: Exception


def _put(queue: Queue, item: Any, stop: threading.Event, poll_interval: float) -> bool:
    while not stop.is_set():
        try:
            queue.put(item, timeout=poll_interval)
            return True
        except Full:
            continue
    return False


def _produce(items: Iterator[Any], queue: Queue, stop: threading.Event, poll_interval: float) -> None:
    logger.debug("Background producer started")
    produced = 0
    try:
        for item in items:
            if not _put(queue, item, stop, poll_interval):
                logger.debug("Consumer closed the queue after %d items, stopping producer", produced)
                return
            produced += 1
    except Exception as error:
        _put(queue, _Failure(error), stop, poll_interval)
        return
    finally:
        close = getattr(items, "close", None)
        if close is not None:
            close()

    _put(queue, _END, stop, poll_interval)
    logger.debug("Background producer finished after %d items", produced)


class BackgroundItems(Generic[T]):
    """Runs an iterator on a producer thread and hands its items over a bounded queue.

    The producer owns ``items`` (and closes it when done). Items arrive in
    the order they were produced; the producer blocks while ``capacity``
    items are waiting. Exceptions raised by ``items`` are re-raised on the
    consumer side. Closing, leaving the ``with`` block or dropping the last
    reference stops and joins the producer.
    """

    def __init__(self, items: Iterator[T], capacity: int = QUEUE_CAPACITY, poll_interval: float = 0.1) -> None:
        self._queue: Queue = Queue(maxsize=capacity)
        self._stop = threading.Event()
        self._finished = False
        self._thread = threading.Thread(
            target=_produce,
            args=(items, self._queue, self._stop, poll_interval),
            name="osmxml-producer",
            daemon=True,
        )
        self._thread.start()

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    @property
    def producer(self) -> threading.Thread:
        return self._thread

    def pending(self) -> int:
        return self._queue.qsize()

    def __iter__(self) -> BackgroundItems[T]:
        return self

    def __next__(self) -> T:
        if self._finished:
            raise StopIteration

        item = self._queue.get()
        if item is _END:
            self._finished = True
            self._thread.join()
            raise StopIteration
        if isinstance(item, _Failure):
            self._finished = True
            self._thread.join()
            raise item.error
        return item

    def close(self) -> None:
        self._finished = True
        self._stop.set()
        # a producer blocked on a full queue gets a free slot and sees the stop flag
        while True:
            try:
                self._queue.get_nowait()
            except Empty:
                break
        if self._thread is not threading.current_thread():
            self._thread.join()

    def __enter__(self) -> BackgroundItems[T]:
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.close()

    def __del__(self) -> None:
        if hasattr(self, "_thread"):
            self.close()

"""
Queue-backed capture source for live producers.

A scanner that delivers updates on its own thread pushes them with
submit(); the engine drains them with read() on the thread that owns the
tracking session. This single-consumer queue is what serializes calls into
the reconciler.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from models.element import DetectedElement
from models.scan import ScanBatch
from .base import CaptureConfig, CaptureSource


@dataclass
class QueuedCaptureConfig(CaptureConfig):
    """
    Configuration for the queue-backed source.

    Attributes:
        poll_timeout: Seconds read() waits for a batch before returning None.
        max_pending: Queue bound; 0 means unbounded.
    """
    poll_timeout: float = 0.5
    max_pending: int = 0


# Marks the end of the stream in the queue
_END = object()


class QueuedCaptureSource(CaptureSource):
    """
    Capture source fed by a producer thread.

    Example:
        source = QueuedCaptureSource(QueuedCaptureConfig(source_id="live"))
        source.open()
        # producer thread
        source.submit(objects + surfaces)
        source.finish()
    """

    def __init__(self, config: QueuedCaptureConfig):
        super().__init__(config)
        self._queue_config = config
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=config.max_pending)
        self._finished = threading.Event()
        self._drained = False

    @property
    def pending(self) -> int:
        """Approximate number of batches waiting to be read."""
        return self._queue.qsize()

    @property
    def is_exhausted(self) -> bool:
        return self._drained

    def open(self) -> None:
        self._is_open = True
        self._batch_index = 0
        logging.info(f"Queued source opened: {self.source_id}")

    def submit(self, elements: Iterable[DetectedElement], timestamp: Optional[float] = None) -> None:
        """
        Queue one scan update. Safe to call from any thread.

        Raises:
            RuntimeError: If finish() was already called.
        """
        if self._finished.is_set():
            raise RuntimeError("Cannot submit to a finished source")
        self._queue.put((tuple(elements), timestamp if timestamp is not None else time.time()))

    def finish(self) -> None:
        """Mark the end of the stream; batches already queued are still read."""
        if not self._finished.is_set():
            self._finished.set()
            self._queue.put(_END)

    def read(self) -> Optional[ScanBatch]:
        if not self._is_open or self._drained:
            return None
        try:
            item = self._queue.get(timeout=self._queue_config.poll_timeout)
        except queue.Empty:
            return None

        if item is _END:
            self._drained = True
            return None

        elements, timestamp = item
        self._batch_index += 1
        return ScanBatch(
            elements=elements,
            timestamp=timestamp,
            batch_index=self._batch_index,
            source=self.source_id,
        )

    def close(self) -> None:
        self._is_open = False

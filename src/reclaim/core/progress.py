"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/progress.py
Progress plumbing for scans. Events are purely observational: a missing,
slow-to-drain or failing listener never changes scan behaviour.
"""

import logging
import queue
from typing import Optional, Iterator

from reclaim.core.models import ProgressEvent, ScanStage
from reclaim.core.interfaces import ProgressCallback

logger = logging.getLogger(__name__)


class ProgressReporter:
    """
    Wraps an optional listener callback.
    Exceptions raised by the listener are logged and dropped.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None, interval: int = 1):
        self.callback = callback
        self.interval = max(1, interval)

    def emit(self, stage: ScanStage, processed: int = 0, total: Optional[int] = None) -> None:
        if self.callback is None:
            return
        try:
            self.callback(ProgressEvent(stage=stage, processed=processed, total=total))
        except Exception:
            logger.exception("Progress listener failed; event dropped")

    def tick(self, stage: ScanStage, processed: int, total: Optional[int] = None) -> None:
        """Emit only every `interval` items, plus the final one."""
        if processed % self.interval == 0 or (total is not None and processed == total):
            self.emit(stage, processed, total)


class ProgressChannel:
    """
    Bounded, non-blocking event sink for listeners on another thread.
    Pass the channel itself as the progress callback; when the queue is
    full new events are silently dropped.
    """

    def __init__(self, maxsize: int = 256):
        self._queue: "queue.Queue[ProgressEvent]" = queue.Queue(maxsize=maxsize)
        self.dropped = 0

    def __call__(self, event: ProgressEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self.dropped += 1

    def get(self, timeout: Optional[float] = None) -> Optional[ProgressEvent]:
        """Next event, or None if nothing arrived within `timeout`."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> Iterator[ProgressEvent]:
        """Yield everything currently queued without blocking."""
        while True:
            try:
                yield self._queue.get_nowait()
            except queue.Empty:
                return

"""Background line reader feeding a bounded queue.

One daemon thread reads the input stream and ``put()``s lines into a
``queue.Queue``; when the queue is full the reader blocks until the consumer
drains it. The consumer (a NiceGUI timer on the event loop) calls ``drain()``,
which never blocks. When the stream is exhausted the reader enqueues a close
marker; after the consumer sees it, ``closed`` is True and drains return [].
"""

from __future__ import annotations

import queue
import threading
from typing import Optional, TextIO

from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_QUEUE_CAPACITY = 100

# Queued after the last line of the stream.
_CLOSED = object()


class LineIngestor:
    """Producer side of the line pipeline.

    Args:
        stream: Text stream to read lines from (e.g. sys.stdin).
        capacity: Maximum number of queued, undrained lines.
        name: Thread name (shows up in logs).
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        capacity: int = DEFAULT_QUEUE_CAPACITY,
        name: str = "nicefacets-ingestor",
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._stream = stream
        self._queue: queue.Queue = queue.Queue(maxsize=capacity)
        self._thread: Optional[threading.Thread] = None
        self._name = name
        self._closed = False
        self.lines_read = 0

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        """True once the consumer has drained past the end of the stream."""
        return self._closed

    def start(self) -> None:
        """Start the reader thread (once)."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.info("ingestor started: capacity=%s", self.capacity)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        try:
            for line in self._stream:
                # Blocks while the queue is full.
                self._queue.put(line.rstrip("\r\n"))
                self.lines_read += 1
        except (OSError, ValueError):
            logger.exception("input stream read failed after %s lines", self.lines_read)
        finally:
            self._queue.put(_CLOSED)
            logger.info("input exhausted after %s lines", self.lines_read)

    def drain(self) -> list[str]:
        """Return every line currently queued without blocking."""
        lines: list[str] = []
        if self._closed:
            return lines
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is _CLOSED:
                self._closed = True
                break
            lines.append(item)
        return lines

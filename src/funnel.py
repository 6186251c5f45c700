"""Single-writer funnel: many request threads submit, one thread appends to the log file."""

import logging
import os
import queue
import sys
import threading
from datetime import datetime

logger = logging.getLogger(__name__)

LOG_TAG = "golog: "
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

_CLOSE = object()


def render_line(line: str, now: datetime) -> str:
    """Prefix a formatted line with the source tag and a timestamp."""
    return f"{LOG_TAG}{now.strftime(TIMESTAMP_FORMAT)} {line}\n"


class LogFunnel:
    """Owns the log file handle and serializes every write through one consumer thread.

    Producers call submit() from any thread; the line is enqueued and the
    call returns without waiting for the write. The consumer thread is the
    only code that touches the file, so no lock guards it.
    """

    def __init__(self, file, stdout=None, fsync: bool = False, clock=None):
        self._file = file
        self._stdout = stdout
        self._fsync = fsync
        self._clock = clock or datetime.now
        self._queue: queue.Queue = queue.Queue()
        self._thread: threading.Thread | None = None
        self._closed = False
        self._close_lock = threading.Lock()
        self._written = 0
        self._write_errors = 0

    @property
    def written(self) -> int:
        return self._written

    @property
    def write_errors(self) -> int:
        return self._write_errors

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> "LogFunnel":
        """Spawn the consumer thread. Returns self so callers hold the submission handle."""
        if self._thread is not None:
            raise RuntimeError("funnel already started")
        self._thread = threading.Thread(target=self._consume, name="log-funnel", daemon=True)
        self._thread.start()
        logger.info("Funnel started, writing to %s", getattr(self._file, "name", "<stream>"))
        return self

    def submit(self, line: str) -> None:
        """Enqueue a formatted line. Fire-and-forget."""
        with self._close_lock:
            if self._closed:
                logger.debug("Funnel closed, dropping line: %s", line)
                return
            self._queue.put(line)

    def close(self, timeout: float = 5.0) -> None:
        """Close the channel and wait for the consumer to drain it and release the file."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSE)

        if self._thread is None:
            # never started, nobody else will close the file
            self._file.close()
            return

        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning("Funnel consumer still running after %.1fs, %d line(s) pending",
                           timeout, self.pending)
        else:
            logger.info("Funnel closed: written=%d, write_errors=%d",
                        self._written, self._write_errors)

    def _consume(self):
        try:
            while True:
                line = self._queue.get()
                if line is _CLOSE:
                    break
                self._write(line)
        finally:
            self._file.close()

    def _write(self, line: str):
        rendered = render_line(line, self._clock())

        # stdout and the file fail independently
        stdout = self._stdout or sys.stdout
        try:
            stdout.write(rendered)
            stdout.flush()
        except (OSError, ValueError) as exc:
            logger.error("Failed to echo log line to stdout: %s", exc)

        try:
            self._file.write(rendered)
            self._file.flush()
            if self._fsync:
                os.fsync(self._file.fileno())
        except (OSError, ValueError) as exc:
            self._write_errors += 1
            logger.error("Failed to append log line %r: %s", line, exc)
            return
        self._written += 1


def start_funnel(file, **kwargs) -> LogFunnel:
    """Start a funnel bound to an already-open, writable file."""
    return LogFunnel(file, **kwargs).start()

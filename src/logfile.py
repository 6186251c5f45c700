"""Open-or-create bootstrap for the append-only log file."""

import logging
import os

logger = logging.getLogger(__name__)


class LogFileError(Exception):
    """Raised when the log file exists but cannot be opened, or cannot be created."""

    def __init__(self, path: str, detail: str):
        super().__init__(f"open {path}: {detail}")
        self.path = path
        self.detail = detail


def _open_existing(path, flags):
    # no O_CREAT: a missing file must surface as FileNotFoundError
    return os.open(path, os.O_WRONLY | os.O_APPEND)


def open_log_file(path: str):
    """Open *path* write-only in append mode, creating it if it does not exist.

    Existing content is never truncated. Any failure other than the file
    being absent raises LogFileError.
    """
    try:
        return open(path, "a", encoding="utf-8", opener=_open_existing)
    except FileNotFoundError:
        return _create(path)
    except OSError as exc:
        raise LogFileError(path, exc.strerror or str(exc)) from exc


def _create(path: str):
    try:
        f = open(path, "a", encoding="utf-8")
    except OSError as exc:
        raise LogFileError(path, exc.strerror or str(exc)) from exc
    logger.info("Created log file %s", path)
    return f

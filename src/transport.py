"""Transport modes and the server each one runs."""

from enum import Enum

from src.endpoint import create_app
from src.funnel import LogFunnel
from src.server import LogHTTPServer


class Mode(Enum):
    HTTP = "http"


class UnsupportedModeError(ValueError):
    """Raised for a transport mode with no implementation."""

    def __init__(self, mode: str):
        super().__init__(f'mode "{mode}" not supported')
        self.mode = mode


def parse_mode(value) -> Mode:
    """Convert a mode flag into a Mode. Matching is exact, like the CLI flag."""
    if isinstance(value, Mode):
        return value
    for mode in Mode:
        if mode.value == value:
            return mode
    raise UnsupportedModeError(value)


def build_transport(config, funnel: LogFunnel):
    """Return an unstarted server for config.mode, feeding the given funnel."""
    if config.mode is Mode.HTTP:
        return LogHTTPServer(config.host, config.port, create_app(funnel))
    raise UnsupportedModeError(getattr(config.mode, "value", config.mode))

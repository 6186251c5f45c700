"""Threaded HTTP server: one thread per request, stoppable from another thread."""

import logging

from flask import Flask
from werkzeug.serving import make_server

logger = logging.getLogger(__name__)


class LogHTTPServer:
    """Serves a flask app until stop() is called."""

    def __init__(self, host: str, port: int, app: Flask):
        self._host = host
        self._port = port
        self._app = app
        self._server = None
        self._server_address = None
        self._serving = False

    @property
    def server_address(self) -> tuple:
        """Return (host, port) the server is bound to. Useful when port=0."""
        return self._server_address

    def bind(self):
        """Bind the listen socket. Raises OSError when the address is unavailable."""
        if self._server is not None:
            return
        try:
            self._server = make_server(self._host, self._port, self._app, threaded=True)
        except SystemExit as exc:
            # werkzeug prints the socket error and calls sys.exit(1) on bind failure
            raise OSError(f"cannot listen on {self._host}:{self._port}") from exc
        self._server_address = self._server.socket.getsockname()[:2]
        logger.info("HTTP server listening on %s:%d", *self._server_address)

    def start(self):
        """Bind if needed, then serve requests until stop()."""
        self.bind()
        self._serving = True
        self._server.serve_forever()

    def stop(self):
        """Stop serving and close the listen socket."""
        if self._server is None:
            return
        logger.info("HTTP server shutting down...")
        if self._serving:
            self._server.shutdown()
            self._serving = False
        self._server.server_close()
        self._server = None

"""Flask ingestion endpoint: validates /log requests and hands formatted lines to the funnel."""

import logging

from flask import Flask, Response, jsonify, request

from src.form import MalformedRequest, decode_form_bytes, parse_form, parse_query
from src.funnel import LogFunnel
from src.models import LogMessage, MissingField

logger = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain; charset=utf-8"


def _bad_request(message: str) -> Response:
    return Response(message + "\n", status=400, content_type=TEXT_PLAIN)


def _request_form() -> dict[str, list[str]]:
    """Collect form values from the current request, body first then query string."""
    query = request.query_string
    if request.mimetype != "multipart/form-data":
        return parse_form(query, request.content_type, request.get_data(cache=True))

    try:
        form = {key: request.form.getlist(key) for key in request.form}
    except ValueError as exc:
        raise MalformedRequest(str(exc)) from exc
    for key, vals in parse_query(decode_form_bytes(query, "query string")).items():
        form.setdefault(key, []).extend(vals)
    return form


def create_app(funnel: LogFunnel) -> Flask:
    """Flask application factory bound to a started funnel."""
    app = Flask(__name__)
    app.config["components"] = {"funnel": funnel}

    @app.route("/log", methods=["GET", "POST"])
    def handle_log():
        try:
            form = _request_form()
        except MalformedRequest as exc:
            logger.debug("Rejected request from %s: %s", request.remote_addr, exc)
            return _bad_request(f"failed to parse args: {exc}")

        try:
            message = LogMessage.from_form(form)
        except MissingField as exc:
            logger.debug("Rejected request from %s: %s", request.remote_addr, exc)
            return _bad_request(str(exc))

        line = message.formatted()
        funnel.submit(line)
        return Response(line, status=200, content_type=TEXT_PLAIN)

    @app.route("/health")
    def health():
        return jsonify(
            status="ok",
            written=funnel.written,
            write_errors=funnel.write_errors,
            pending=funnel.pending,
        )

    return app

"""Strict parsing of url-encoded request parameters.

Werkzeug's own form parser silently tolerates broken input, so the query
string and url-encoded bodies are decoded here and rejected when they
cannot be parsed.
"""

import re
from urllib.parse import unquote_plus

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
MAX_FORM_BYTES = 10 << 20  # 10 MiB

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})(.{0,2})", re.DOTALL)


class MalformedRequest(Exception):
    """Raised when request parameters cannot be parsed at all."""


def _unescape(value: str) -> str:
    match = _BAD_ESCAPE.search(value)
    if match:
        raise MalformedRequest(f'invalid URL escape "%{match.group(1)}"')
    try:
        return unquote_plus(value, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as exc:
        raise MalformedRequest(f"invalid UTF-8 in {value!r}") from exc


def parse_query(raw: str) -> dict[str, list[str]]:
    """Parse a url-encoded string into a dict of value lists.

    Pairs are separated by ``&``; a key without ``=`` maps to ``""``.
    Raises MalformedRequest on a ``;`` separator, a broken percent escape,
    or escaped bytes that are not valid UTF-8.
    """
    values: dict[str, list[str]] = {}
    for pair in raw.split("&"):
        if not pair:
            continue
        if ";" in pair:
            raise MalformedRequest("invalid semicolon separator in query")
        key, _, value = pair.partition("=")
        values.setdefault(_unescape(key), []).append(_unescape(value))
    return values


def decode_form_bytes(raw, where: str) -> str:
    """Decode raw url-encoded bytes as strict UTF-8."""
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedRequest(f"invalid UTF-8 in {where}") from exc


def parse_form(query_string, content_type: str | None = None,
               body: bytes | None = None) -> dict[str, list[str]]:
    """Merge url-encoded body values and query-string values.

    Body values come first for each key, so they win a first-value lookup.
    The body is only read for the url-encoded content type. Raw bytes must be
    UTF-8; characters outside percent escapes pass through unchanged.
    """
    form: dict[str, list[str]] = {}

    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if body and media_type == FORM_CONTENT_TYPE:
        if len(body) > MAX_FORM_BYTES:
            raise MalformedRequest("http: POST too large")
        for key, vals in parse_query(decode_form_bytes(body, "request body")).items():
            form.setdefault(key, []).extend(vals)

    for key, vals in parse_query(decode_form_bytes(query_string, "query string")).items():
        form.setdefault(key, []).extend(vals)

    return form


def first_value(form: dict[str, list[str]], key: str) -> str:
    """Return the first value for *key*, or an empty string when absent."""
    vals = form.get(key)
    return vals[0] if vals else ""

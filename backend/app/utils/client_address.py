"""Client address resolution behind a trusted reverse proxy."""

from __future__ import annotations

from flask import current_app, request


def trusted_address_headers() -> list[str]:
    """Return the configured address headers in priority order."""

    raw = current_app.config.get("TRUSTED_ADDRESS_HEADERS") or ""
    if isinstance(raw, str):
        raw = raw.split(",")
    return [name.strip() for name in raw if name and name.strip()]


def resolve_client_address() -> str:
    """Return the client address for the current request.

    The first trusted header carrying a non-empty value wins; the raw
    connection address is the fallback. Header values are spoofable unless an
    edge proxy overwrites them, so only list headers your proxy sets.
    """

    for header in trusted_address_headers():
        value = (request.headers.get(header) or "").strip()
        if value:
            return value
    return request.remote_addr or ""

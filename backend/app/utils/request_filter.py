"""Blocklist filter applied to every inbound request before routing."""

from __future__ import annotations

from collections.abc import Iterable

from flask import current_app, request

from ..errors import ForbiddenError
from ..storage import get_metadata_store
from .client_address import resolve_client_address
from .settings import RuntimeSettings

# Liveness must not depend on the metadata store.
_EXEMPT_ENDPOINTS = {"health.health"}


def match_blocked_address(address: str, blocked: Iterable[str]) -> str | None:
    """Return the first blocked entry contained in ``address``."""

    for entry in blocked:
        if entry in address:
            return entry
    return None


def match_blocked_agent(user_agent: str, blocked: Iterable[str]) -> str | None:
    """Return the first blocked entry contained in ``user_agent``, ignoring case."""

    agent = user_agent.lower()
    for entry in blocked:
        if entry.lower() in agent:
            return entry
    return None


def check_request(settings: RuntimeSettings) -> None:
    """Raise :class:`ForbiddenError` when the current request is blocklisted."""

    address = resolve_client_address()
    matched = match_blocked_address(address, settings.blocked_ips())
    if matched is not None:
        current_app.logger.info("Rejected request from %s (blocked ip %r)", address, matched)
        raise ForbiddenError("Forbidden")

    user_agent = request.headers.get("User-Agent") or ""
    matched = match_blocked_agent(user_agent, settings.blocked_uas())
    if matched is not None:
        current_app.logger.info(
            "Rejected request from %s (blocked user agent %r)", address, matched
        )
        raise ForbiddenError("Forbidden")


def enforce_blocklists() -> None:
    """``before_request`` hook running :func:`check_request` for routed requests."""

    if request.endpoint in _EXEMPT_ENDPOINTS:
        return None
    check_request(RuntimeSettings(get_metadata_store()))
    return None

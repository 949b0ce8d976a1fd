"""Typed access to the string-valued runtime settings.

Values are read from the metadata store on every call. Nothing is cached, so
changes made through the admin API apply to the very next request.
"""

from __future__ import annotations

import json
import logging

from ..storage.metadata import MetadataStore

SEND_CONTENT_LENGTH = "send_content_length"
BLOCKED_IPS = "blocked_ips"
BLOCKED_UAS = "blocked_uas"

logger = logging.getLogger(__name__)


def parse_string_list(raw: str | None, *, key: str = "") -> list[str]:
    """Parse a JSON array setting into its non-empty string entries."""

    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Setting %s is not valid JSON; treating it as empty.", key or "<unnamed>")
        return []
    if not isinstance(value, list):
        logger.warning("Setting %s is not a JSON array; treating it as empty.", key or "<unnamed>")
        return []
    return [str(item) for item in value if item is not None and str(item) != ""]


def encode_setting_value(value: object) -> str:
    """Normalize an arbitrary JSON payload value to the stored string form."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class RuntimeSettings:
    """Store-backed accessor for the settings consumed by request handling."""

    def __init__(self, store: MetadataStore) -> None:
        self._store = store

    def send_content_length(self) -> bool:
        return self._store.get_setting(SEND_CONTENT_LENGTH) == "true"

    def blocked_ips(self) -> list[str]:
        return parse_string_list(self._store.get_setting(BLOCKED_IPS), key=BLOCKED_IPS)

    def blocked_uas(self) -> list[str]:
        return parse_string_list(self._store.get_setting(BLOCKED_UAS), key=BLOCKED_UAS)

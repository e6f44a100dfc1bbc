"""Logging setup and redaction of credentials in tool payloads."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict


_SENSITIVE_KEYS = re.compile(r"(token|secret|api[_-]?key|password|authorization)", re.IGNORECASE)
_REDACTED = "***REDACTED***"
_MAX_DEPTH = 16


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # Request lines from httpx would repeat every outbound URL at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def redact_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``payload`` with credential-looking values masked.

    Mappings nested in lists and tuples are redacted as well. Anything deeper
    than ``_MAX_DEPTH`` levels is summarized rather than logged.
    """
    return _redact(payload, 0)


def _redact(value: Any, depth: int) -> Any:
    if depth >= _MAX_DEPTH and isinstance(value, (dict, list, tuple)):
        return "..."
    if isinstance(value, dict):
        return {
            key: _REDACTED if _SENSITIVE_KEYS.search(str(key)) else _redact(item, depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item, depth + 1) for item in value]
    return value

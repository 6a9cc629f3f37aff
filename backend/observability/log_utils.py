"""
Logging utilities.

Redacts credentials before request headers reach the logs.
"""

from typing import Any

REDACTED = "[REDACTED]"
SENSITIVE_HEADERS = frozenset({"authorization", "x-id-token", "cookie"})


def redact_headers(headers: dict[str, Any] | None) -> dict[str, Any]:
    """
    Copy request headers with credential values replaced.

    Args:
        headers: Raw request headers (any casing)

    Returns:
        dict: Headers safe to log
    """
    return {
        key: REDACTED if key.lower() in SENSITIVE_HEADERS and value else value
        for key, value in (headers or {}).items()
    }

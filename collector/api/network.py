"""Best-effort detection of network failures from error text.

This is a substring heuristic over a fixed marker list, not a precise detector:
messages that merely mention "timeout" or "internet" match, and transport failures
worded differently do not.
"""
from typing import Any, Optional

NETWORK_PATTERNS = (
    "network error",
    "failed to fetch",
    "fetch failed",
    "network request failed",
    "internet",
    "offline",
    "timed out",
    "timeout",
    "enotfound",
    "econnreset",
    "econnaborted",
    "err_network",
    "invalid url",
)


def is_likely_network_error_message(message: Optional[str]) -> bool:
    if not message:
        return False
    normalized = message.lower()
    return any(pattern in normalized for pattern in NETWORK_PATTERNS)


def is_likely_network_error(error: Any) -> bool:
    if isinstance(error, BaseException):
        return is_likely_network_error_message(str(error))
    if isinstance(error, str):
        return is_likely_network_error_message(error)
    return False

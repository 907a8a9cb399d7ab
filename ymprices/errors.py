from __future__ import annotations

from typing import Any, Optional


UNKNOWN_ERROR = "Unknown error"


class MarketError(Exception):
    """Base class for errors raised by the exporter."""


class ConfigError(MarketError):
    pass


class ApiError(MarketError):
    """Non-200 answer from the Partner API."""

    def __init__(self, status_code: int, message: str = UNKNOWN_ERROR, payload: Optional[Any] = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(f"API returned status {status_code}: {message}")


def error_message(payload: Any) -> str:
    """Best-effort message from an error body: ``message``, then ``errors[0].message``."""
    if not isinstance(payload, dict):
        return UNKNOWN_ERROR
    message = payload.get("message")
    if message:
        return str(message)
    errors = payload.get("errors") or []
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict) and first.get("message"):
            return str(first["message"])
    return UNKNOWN_ERROR

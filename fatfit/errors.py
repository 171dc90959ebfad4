"""Typed errors raised by the tracker core and mapped to HTTP responses in main."""

from __future__ import annotations

from typing import Any


class ConfigurationError(Exception):
    """Raised when required configuration (credentials, API keys) is missing.

    Fatal for the dependent functionality: never retried. http_status is 503.
    """

    http_status = 503

    def __init__(self, message: str = "Service is not configured"):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}

    def __str__(self) -> str:
        return self.message


class ProviderError(Exception):
    """Raised when an upstream provider fails (non-2xx status or network error).

    Attributes:
        message: human-readable message
        status_code: upstream HTTP status, None for network errors
        details: upstream body (parsed JSON when possible) or error text
        http_status: suggested HTTP status code for handlers (502)
    """

    http_status = 502

    def __init__(
        self,
        message: str = "Upstream provider error",
        status_code: int | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"error": self.message}
        if self.status_code is not None:
            payload["status"] = self.status_code
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message}: {self.status_code}"
        return self.message

"""Exception taxonomy for hactl.

Guard and validation errors are raised before any network call.
Hub errors come from the HTTP client and carry enough detail for
callers to branch on (status code, raw body, timeout bound).
Transport failures other than timeouts are never wrapped.
"""

from __future__ import annotations

from typing import Any


class HactlError(Exception):
    """Base exception for all hactl errors."""

    code = "HACTL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(HactlError):
    """Raised when the policy configuration is invalid. Fatal at start-up."""

    code = "CONFIGURATION"


class AuthorizationError(HactlError):
    """Raised when the write gate or the domain allow-list rejects a call."""

    code = "AUTHORIZATION"


class ValidationError(HactlError):
    """Raised when operation input is missing, malformed, or out of range."""

    code = "VALIDATION"


class HubHTTPError(HactlError):
    """Raised when the hub answers with a non-2xx status."""

    code = "HUB_HTTP"

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Home Assistant HTTP {status_code}: {body}",
            details={"status_code": status_code, "body": body},
        )


class HubTimeoutError(HactlError, TimeoutError):
    """Raised when the hub does not answer within the configured bound."""

    code = "HUB_TIMEOUT"

    def __init__(self, method: str, path: str, timeout_ms: int) -> None:
        self.method = method
        self.path = path
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Home Assistant request timed out after {timeout_ms}ms: {method} {path}",
            details={"method": method, "path": path, "timeout_ms": timeout_ms},
        )

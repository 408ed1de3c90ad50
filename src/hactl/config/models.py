"""Policy configuration model and the raw-config validator.

The hosting framework hands over a loose mapping
(``{url, token, allowedDomains?, readOnly?}``). :func:`validate_config`
normalizes it once into a frozen :class:`PolicyConfig`, which is the only
form the guards, the registry, and the hub client ever see.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from hactl.errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_HISTORY_WINDOW_HOURS = 24.0

_URL_RE = re.compile(r"^https?://.+", re.IGNORECASE)


class PolicyConfig(BaseModel):
    """Canonical, read-only policy record.

    Attributes:
        url: Hub base URL without trailing slashes.
        token: Long-lived access token (never logged).
        allowed_domains: Lowercase domain allow-list; empty means unrestricted.
        read_only: Write gate; when True every write-tagged tool is rejected.
        history_window_hours: Default look-back for history/logbook queries.
        timeout_seconds: Bound on each hub request.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    url: str
    token: str = Field(repr=False)
    allowed_domains: tuple[str, ...] = Field(default=(), alias="allowedDomains")
    read_only: bool = Field(default=False, alias="readOnly")
    history_window_hours: float = Field(
        default=DEFAULT_HISTORY_WINDOW_HOURS, alias="historyWindowHours"
    )
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, alias="timeoutSeconds")

    def public_view(self) -> dict[str, Any]:
        """Policy fields safe to show an agent (no token)."""
        return {
            "url": self.url,
            "allowedDomains": list(self.allowed_domains),
            "readOnly": self.read_only,
            "historyWindowHours": self.history_window_hours,
            "timeoutSeconds": self.timeout_seconds,
        }


# ---------------------------------------------------------------------------
# Field validators: each appends (field, message) pairs and returns the
# normalized value, so every problem is reported in one error.
# ---------------------------------------------------------------------------

_Problems = list[tuple[str, str]]


def _lookup(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _validate_url(value: Any, problems: _Problems) -> str | None:
    if value is None or value == "":
        problems.append(("url", "required"))
        return None
    if not isinstance(value, str):
        problems.append(("url", "must be a string"))
        return None
    trimmed = value.strip().rstrip("/")
    if not _URL_RE.match(trimmed):
        problems.append(("url", "must be an http:// or https:// URL"))
        return None
    return trimmed


def _validate_token(value: Any, problems: _Problems) -> str | None:
    if value is None or value == "":
        problems.append(("token", "required"))
        return None
    if not isinstance(value, str):
        problems.append(("token", "must be a string"))
        return None
    trimmed = value.strip()
    if not trimmed:
        problems.append(("token", "must be non-empty"))
        return None
    return trimmed


def _validate_allowed_domains(value: Any, problems: _Problems) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        problems.append(("allowedDomains", "must be an array of strings"))
        return ()
    domains: list[str] = []
    for i, item in enumerate(value):
        if not isinstance(item, str) or not item.strip():
            problems.append((f"allowedDomains[{i}]", "must be a non-empty string"))
            continue
        domain = item.strip().lower()
        if domain not in domains:
            domains.append(domain)
    return tuple(domains)


def _validate_read_only(value: Any, problems: _Problems) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        problems.append(("readOnly", "must be a boolean"))
        return False
    return value


def _validate_positive(value: Any, field: str, default: float, problems: _Problems) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        problems.append((field, "must be a number"))
        return default
    if not math.isfinite(value) or value <= 0:
        problems.append((field, "must be a positive number"))
        return default
    return float(value)


def validate_config(raw: object) -> PolicyConfig:
    """Validate and normalize a raw config mapping into a :class:`PolicyConfig`.

    Accepts camelCase (``allowedDomains``) or snake_case (``allowed_domains``)
    keys. Raises :class:`ConfigurationError` listing every invalid field.
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Config must be a non-null object")

    problems: _Problems = []
    url = _validate_url(raw.get("url"), problems)
    token = _validate_token(raw.get("token"), problems)
    allowed_domains = _validate_allowed_domains(
        _lookup(raw, "allowedDomains", "allowed_domains"), problems
    )
    read_only = _validate_read_only(_lookup(raw, "readOnly", "read_only"), problems)
    history_window_hours = _validate_positive(
        _lookup(raw, "historyWindowHours", "history_window_hours"),
        "historyWindowHours",
        DEFAULT_HISTORY_WINDOW_HOURS,
        problems,
    )
    timeout_seconds = _validate_positive(
        _lookup(raw, "timeoutSeconds", "timeout_seconds"),
        "timeoutSeconds",
        DEFAULT_TIMEOUT_SECONDS,
        problems,
    )

    if problems or url is None or token is None:
        details = "\n".join(f"  - {field}: {message}" for field, message in problems)
        raise ConfigurationError(
            f"Invalid plugin config:\n{details}",
            details={"fields": {field: message for field, message in problems}},
        )

    return PolicyConfig(
        url=url,
        token=token,
        allowed_domains=allowed_domains,
        read_only=read_only,
        history_window_hours=history_window_hours,
        timeout_seconds=timeout_seconds,
    )

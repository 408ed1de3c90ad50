"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``HACTL_*`` prefix (``HACTL_URL``, ``HACTL_TOKEN``, ...)
  3. TOML file: ``hactl.toml`` discovered via walk-up
  4. Code defaults

Settings stay loose so ``--help`` works without a hub configured.
:meth:`HactlSettings.policy` runs the strict validator and is the only
way the rest of the package obtains a :class:`PolicyConfig`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from hactl.config.discovery import find_config
from hactl.config.models import PolicyConfig, validate_config
from hactl.domain.policy import unknown_domains
from hactl.errors import ConfigurationError

logger = structlog.get_logger(__name__)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``hactl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigurationError(msg, details={"path": str(toml_path)}) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class HactlSettings(BaseSettings):
    """Unified settings for the hactl CLI and MCP server.

    Attributes:
        config_path: The ``hactl.toml`` in effect, or None.
        url: Hub base URL.
        token: Hub long-lived access token.
        allowed_domains: Domain allow-list; None or empty means unrestricted.
        read_only: Write gate.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "HACTL_",
        "extra": "ignore",
    }

    config_path: Path | None = None

    # --- Hub and policy (validated by policy()) ---
    url: str | None = None
    token: str | None = Field(default=None, repr=False)
    allowed_domains: list[str] | None = None
    read_only: bool | None = None
    timeout_seconds: float | None = None
    history_window_hours: float | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> HactlSettings:
        """Construct settings from a CLI invocation.

        Discovers ``hactl.toml`` via walk-up from *start* (or uses an
        explicit *config_path*). Flags left as None do not override
        lower-priority sources.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                raise ConfigurationError(f"Config file not found: {config_path}")
            toml_path = p
        else:
            toml_path = find_config(start)

        overrides = {key: value for key, value in cli_flags.items() if value is not None}
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

    def raw_config(self) -> dict[str, Any]:
        """The loose config mapping, keyed the way the hosting framework keys it."""
        return {
            "url": self.url,
            "token": self.token,
            "allowedDomains": self.allowed_domains,
            "readOnly": self.read_only,
            "timeoutSeconds": self.timeout_seconds,
            "historyWindowHours": self.history_window_hours,
        }

    def policy(self) -> PolicyConfig:
        """Validate the hub and policy fields. Raises ConfigurationError."""
        policy = validate_config(self.raw_config())
        unknown = unknown_domains(policy.allowed_domains)
        if unknown:
            logger.warning("config.unknown_domains", domains=unknown)
        return policy

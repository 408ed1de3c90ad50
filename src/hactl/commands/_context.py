"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy policy, client and registry
construction plus centralized result emission (stdout/stderr routing +
exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from hactl.errors import HactlError
from hactl.output.formatters import format_result
from hactl.services.result import ServiceResult

if TYPE_CHECKING:
    from hactl.config.models import PolicyConfig
    from hactl.config.settings import HactlSettings
    from hactl.infrastructure.hub_client import HubClient
    from hactl.services.operations import OperationRegistry


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The policy is validated on first use so ``--help``, ``tools`` and
    ``--examples`` work without a hub configured.
    """

    def __init__(self, settings: HactlSettings) -> None:
        self.settings = settings
        self._policy: PolicyConfig | None = None
        self._client: HubClient | None = None
        self._registry: OperationRegistry | None = None

        from hactl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def policy(self) -> PolicyConfig:
        """The validated policy. Raises ConfigurationError."""
        if self._policy is None:
            self._policy = self.settings.policy()
        return self._policy

    @property
    def client(self) -> HubClient:
        if self._client is None:
            from hactl.infrastructure.hub_client import HubClient

            policy = self.policy
            self._client = HubClient(policy.url, policy.token, timeout=policy.timeout_seconds)
        return self._client

    @property
    def registry(self) -> OperationRegistry:
        if self._registry is None:
            from hactl.services.operations import OperationRegistry

            self._registry = OperationRegistry(self.client, self.policy)
        return self._registry

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._registry = None

    def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ServiceResult:
        """Run one registry operation, wrapping hactl errors as failures."""
        try:
            data = self.registry.invoke(name, arguments)
        except HactlError as exc:
            return ServiceResult.failure(name, exc)
        return ServiceResult.success(name, data)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def fail(self, op: str, exc: HactlError) -> None:
        self.emit(ServiceResult.failure(op, exc))

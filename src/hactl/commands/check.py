"""check: verify the configuration and that the hub answers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import httpx

from hactl.commands._base import HactlCommand
from hactl.domain.policy import unknown_domains
from hactl.errors import HactlError
from hactl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from hactl.commands._context import AppContext


@click.command(
    cls=HactlCommand,
    needs_hub=True,
    examples="""\
  hactl check
  hactl --url http://homeassistant.local:8123 --token "$HA_TOKEN" check
  hactl --json check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Validate the config and probe the hub's API root."""
    try:
        policy = app.policy
        connected = app.client.check_connection()
    except HactlError as exc:
        app.fail("check", exc)
        return
    except httpx.TransportError as exc:
        app.emit(
            ServiceResult(
                ok=False,
                op="check",
                error=ServiceError(
                    code="HUB_UNREACHABLE",
                    message=f"Could not reach {app.policy.url}: {exc}",
                    detail={"url": app.policy.url},
                ),
            )
        )
        return

    warnings = [
        f"Unknown domain in allowedDomains: {domain}"
        for domain in unknown_domains(policy.allowed_domains)
    ]
    app.emit(
        ServiceResult(
            ok=True,
            op="check",
            data={
                **policy.public_view(),
                "connected": connected,
            },
            warnings=warnings,
        )
    )

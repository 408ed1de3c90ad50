"""MCP tool definitions: 34 Home Assistant tools plus ``discover_tools``.

Each tool body delegates to :func:`invoke_tool_impl`, which is testable
without the mcp package. ``register_tools()`` wraps them with FastMCP
decorators so every tool keeps an explicit, typed signature.
"""

from __future__ import annotations

from typing import Any

from hactl.domain.catalog import describe_catalog
from hactl.errors import HactlError
from hactl.services.result import ServiceResult


def _to_mcp_response(result: ServiceResult) -> dict[str, Any]:
    """Convert a ServiceResult to an MCP-friendly dict."""
    response: dict[str, Any] = {
        "ok": result.ok,
        "op": result.op,
        "data": result.data,
    }
    if result.warnings:
        response["warnings"] = result.warnings
    if result.error is not None:
        response["error"] = {
            "code": result.error.code,
            "message": result.error.message,
            "detail": result.error.detail,
        }
    return response


def _present(**kwargs: Any) -> dict[str, Any]:
    """Drop unset optional arguments so the registry sees them as absent."""
    return {key: value for key, value in kwargs.items() if value is not None}


def invoke_tool_impl(
    registry: Any, name: str, arguments: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Invoke one operation and wrap the outcome.

    Only hactl errors become ``ok: False`` responses. Transport failures
    such as a refused connection propagate to the MCP runtime.
    """
    try:
        data = registry.invoke(name, arguments)
    except HactlError as exc:
        return _to_mcp_response(ServiceResult.failure(name, exc))
    return _to_mcp_response(ServiceResult.success(name, data))


def discover_tools_impl(registry: Any, *, category: str | None = None) -> dict[str, Any]:
    """Group the tool catalog by category, marking tools the write gate blocks."""
    data = describe_catalog(read_only=registry.policy.read_only, category=category)
    return _to_mcp_response(ServiceResult.success("discover_tools", data))


# ---------------------------------------------------------------------------
# Registration: wraps invoke_tool_impl with FastMCP decorators
# ---------------------------------------------------------------------------


def register_tools(server: Any, registry: Any) -> None:
    """Register every hub tool and ``discover_tools`` on the FastMCP server."""

    def call(name: str, **kwargs: Any) -> dict[str, Any]:
        return invoke_tool_impl(registry, name, _present(**kwargs))

    @server.tool()  # type: ignore[untyped-decorator]
    def discover_tools(category: str | None = None) -> dict[str, Any]:
        """List available tools by category, with read/write tags."""
        return discover_tools_impl(registry, category=category)

    # -- Discovery ----------------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_status() -> dict[str, Any]:
        """Hub configuration, version, and location."""
        return call("ha_status")

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_list_entities(
        domain: str | None = None,
        area: str | None = None,
        state: str | None = None,
    ) -> dict[str, Any]:
        """List entity states, optionally filtered by domain, state, or area id."""
        return call("ha_list_entities", domain=domain, area=area, state=state)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_get_state(entity_id: str) -> dict[str, Any]:
        """Get the current state and attributes of one entity."""
        return call("ha_get_state", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_search_entities(pattern: str) -> dict[str, Any]:
        """Search entity ids and friendly names (case-insensitive substring)."""
        return call("ha_search_entities", pattern=pattern)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_list_services() -> dict[str, Any]:
        """List the services each allowed domain exposes."""
        return call("ha_list_services")

    # -- Lights -------------------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_light_on(
        entity_id: str,
        brightness: float | None = None,
        color_temp: float | None = None,
        rgb_color: list[int] | None = None,
        transition: float | None = None,
    ) -> dict[str, Any]:
        """Turn a light on, with optional brightness, color, and transition."""
        return call(
            "ha_light_on",
            entity_id=entity_id,
            brightness=brightness,
            color_temp=color_temp,
            rgb_color=rgb_color,
            transition=transition,
        )

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_light_off(entity_id: str) -> dict[str, Any]:
        """Turn a light off."""
        return call("ha_light_off", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_light_toggle(entity_id: str) -> dict[str, Any]:
        """Toggle a light."""
        return call("ha_light_toggle", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_light_list() -> dict[str, Any]:
        """List lights with brightness and color attributes."""
        return call("ha_light_list")

    # -- Switches -----------------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_switch_on(entity_id: str) -> dict[str, Any]:
        """Turn a switch on."""
        return call("ha_switch_on", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_switch_off(entity_id: str) -> dict[str, Any]:
        """Turn a switch off."""
        return call("ha_switch_off", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_switch_toggle(entity_id: str) -> dict[str, Any]:
        """Toggle a switch."""
        return call("ha_switch_toggle", entity_id=entity_id)

    # -- Climate ------------------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_climate_set_temp(entity_id: str, temperature: float) -> dict[str, Any]:
        """Set a thermostat's target temperature."""
        return call("ha_climate_set_temp", entity_id=entity_id, temperature=temperature)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_climate_set_mode(entity_id: str, hvac_mode: str) -> dict[str, Any]:
        """Set a thermostat's HVAC mode (heat, cool, auto, off, ...)."""
        return call("ha_climate_set_mode", entity_id=entity_id, hvac_mode=hvac_mode)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_climate_set_preset(entity_id: str, preset_mode: str) -> dict[str, Any]:
        """Set a thermostat's preset mode (away, eco, ...)."""
        return call("ha_climate_set_preset", entity_id=entity_id, preset_mode=preset_mode)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_climate_list() -> dict[str, Any]:
        """List climate entities."""
        return call("ha_climate_list")

    # -- Media --------------------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_media_play(entity_id: str) -> dict[str, Any]:
        """Resume playback on a media player."""
        return call("ha_media_play", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_media_pause(entity_id: str) -> dict[str, Any]:
        """Pause a media player."""
        return call("ha_media_pause", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_media_stop(entity_id: str) -> dict[str, Any]:
        """Stop a media player."""
        return call("ha_media_stop", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_media_volume(entity_id: str, volume_level: float) -> dict[str, Any]:
        """Set media player volume between 0.0 and 1.0."""
        return call("ha_media_volume", entity_id=entity_id, volume_level=volume_level)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_media_play_media(entity_id: str, content_id: str, content_type: str) -> dict[str, Any]:
        """Play a content id (URL, playlist, ...) on a media player."""
        return call(
            "ha_media_play_media",
            entity_id=entity_id,
            content_id=content_id,
            content_type=content_type,
        )

    # -- Covers -------------------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_cover_open(entity_id: str) -> dict[str, Any]:
        """Open a cover."""
        return call("ha_cover_open", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_cover_close(entity_id: str) -> dict[str, Any]:
        """Close a cover."""
        return call("ha_cover_close", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_cover_position(entity_id: str, position: int) -> dict[str, Any]:
        """Move a cover to a position between 0 and 100."""
        return call("ha_cover_position", entity_id=entity_id, position=position)

    # -- Scenes, scripts, automations ---------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_scene_activate(entity_id: str) -> dict[str, Any]:
        """Activate a scene."""
        return call("ha_scene_activate", entity_id=entity_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_script_run(entity_id: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a script, passing optional variables."""
        return call("ha_script_run", entity_id=entity_id, variables=variables)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_automation_trigger(
        entity_id: str, skip_condition: bool | None = None
    ) -> dict[str, Any]:
        """Trigger an automation, optionally skipping its conditions."""
        return call("ha_automation_trigger", entity_id=entity_id, skip_condition=skip_condition)

    # -- Sensors and history ------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_sensor_list() -> dict[str, Any]:
        """List sensor entities."""
        return call("ha_sensor_list")

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_history(
        entity_id: str | None = None,
        start: str | None = None,
        end: str | None = None,
    ) -> dict[str, Any]:
        """State history; *start* (ISO 8601) defaults to the policy look-back window."""
        return call("ha_history", entity_id=entity_id, start=start, end=end)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_logbook(
        entity_id: str | None = None,
        start: str | None = None,
        end: str | None = None,
    ) -> dict[str, Any]:
        """Logbook entries; *start* (ISO 8601) defaults to the policy look-back window."""
        return call("ha_logbook", entity_id=entity_id, start=start, end=end)

    # -- Advanced -----------------------------------------------------------

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_call_service(
        domain: str,
        service: str,
        service_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Call any service in an allowed domain."""
        return call("ha_call_service", domain=domain, service=service, service_data=service_data)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_fire_event(event_type: str, event_data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Fire a custom event on the hub's event bus."""
        return call("ha_fire_event", event_type=event_type, event_data=event_data)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_render_template(
        template: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Render a Jinja template on the hub."""
        return call("ha_render_template", template=template, variables=variables)

    @server.tool()  # type: ignore[untyped-decorator]
    def ha_notify(
        target: str,
        message: str,
        title: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a message through ``notify.<target>``."""
        return call("ha_notify", target=target, message=message, title=title, data=data)

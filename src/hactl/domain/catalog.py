"""Operation catalog: the closed set of tool names and their capability tags.

Every operation is tagged ``read`` or ``write`` exactly once, here.
The write gate consults :data:`WRITE_TOOLS`; nothing else decides
whether an operation mutates hub state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType


class Capability(StrEnum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class ToolSpec:
    """Static description of one exposed operation."""

    name: str
    capability: Capability
    category: str
    description: str


_R = Capability.READ
_W = Capability.WRITE

_TOOLS: tuple[ToolSpec, ...] = (
    # Discovery
    ToolSpec("ha_status", _R, "discovery", "Hub configuration, version, and location."),
    ToolSpec(
        "ha_list_entities",
        _R,
        "discovery",
        "List entity states, optionally filtered by domain, state, or area.",
    ),
    ToolSpec("ha_get_state", _R, "discovery", "Get the current state of one entity."),
    ToolSpec(
        "ha_search_entities",
        _R,
        "discovery",
        "Case-insensitive search over entity ids and friendly names.",
    ),
    ToolSpec("ha_list_services", _R, "discovery", "List the services each domain exposes."),
    # Lights
    ToolSpec(
        "ha_light_on",
        _W,
        "lights",
        "Turn a light on, with optional brightness, color, and transition.",
    ),
    ToolSpec("ha_light_off", _W, "lights", "Turn a light off."),
    ToolSpec("ha_light_toggle", _W, "lights", "Toggle a light."),
    ToolSpec("ha_light_list", _R, "lights", "List lights with brightness and color."),
    # Switches
    ToolSpec("ha_switch_on", _W, "switches", "Turn a switch on."),
    ToolSpec("ha_switch_off", _W, "switches", "Turn a switch off."),
    ToolSpec("ha_switch_toggle", _W, "switches", "Toggle a switch."),
    # Climate
    ToolSpec("ha_climate_set_temp", _W, "climate", "Set a thermostat target temperature."),
    ToolSpec("ha_climate_set_mode", _W, "climate", "Set a thermostat HVAC mode."),
    ToolSpec("ha_climate_set_preset", _W, "climate", "Set a thermostat preset mode."),
    ToolSpec("ha_climate_list", _R, "climate", "List climate entities."),
    # Media
    ToolSpec("ha_media_play", _W, "media", "Resume playback on a media player."),
    ToolSpec("ha_media_pause", _W, "media", "Pause a media player."),
    ToolSpec("ha_media_stop", _W, "media", "Stop a media player."),
    ToolSpec("ha_media_volume", _W, "media", "Set media player volume (0.0-1.0)."),
    ToolSpec("ha_media_play_media", _W, "media", "Play a content id on a media player."),
    # Covers
    ToolSpec("ha_cover_open", _W, "covers", "Open a cover."),
    ToolSpec("ha_cover_close", _W, "covers", "Close a cover."),
    ToolSpec("ha_cover_position", _W, "covers", "Move a cover to a position (0-100)."),
    # Scenes, scripts, automations
    ToolSpec("ha_scene_activate", _W, "automation", "Activate a scene."),
    ToolSpec("ha_script_run", _W, "automation", "Run a script with optional variables."),
    ToolSpec("ha_automation_trigger", _W, "automation", "Trigger an automation."),
    # Sensors and history
    ToolSpec("ha_sensor_list", _R, "history", "List sensor entities."),
    ToolSpec("ha_history", _R, "history", "State history for a time window."),
    ToolSpec("ha_logbook", _R, "history", "Logbook entries for a time window."),
    # Advanced
    ToolSpec("ha_call_service", _W, "advanced", "Call any service in an allowed domain."),
    ToolSpec("ha_fire_event", _W, "advanced", "Fire a custom event on the hub bus."),
    ToolSpec("ha_render_template", _R, "advanced", "Render a Jinja template on the hub."),
    ToolSpec("ha_notify", _W, "advanced", "Send a message through a notify service."),
)

OPERATIONS: MappingProxyType[str, ToolSpec] = MappingProxyType({s.name: s for s in _TOOLS})

TOOL_NAMES: tuple[str, ...] = tuple(OPERATIONS)

WRITE_TOOLS: frozenset[str] = frozenset(
    name for name, tool in OPERATIONS.items() if tool.capability is Capability.WRITE
)


def is_write_tool(name: str) -> bool:
    return name in WRITE_TOOLS


def categories() -> tuple[str, ...]:
    """Category names in catalog order."""
    return tuple(dict.fromkeys(tool.category for tool in _TOOLS))


def describe_catalog(*, read_only: bool, category: str | None = None) -> dict[str, object]:
    """Group the catalog by category, marking tools the write gate blocks."""
    grouped: dict[str, list[dict[str, object]]] = {}
    for tool in _TOOLS:
        if category is not None and tool.category != category:
            continue
        grouped.setdefault(tool.category, []).append(
            {
                "name": tool.name,
                "capability": str(tool.capability),
                "description": tool.description,
                "blocked": read_only and tool.capability is Capability.WRITE,
            }
        )
    return {
        "count": sum(len(tools) for tools in grouped.values()),
        "categories": [{"name": name, "tools": tools} for name, tools in grouped.items()],
    }

"""OperationRegistry: binds each named tool to guards, validation, and one hub call.

Every invocation follows the same fixed sequence:

1. Input shape check (a mapping or nothing).
2. Write gate (:func:`assert_tool_allowed`).
3. Operation-specific allow-list checks and field validation.
4. Exactly one hub request via the client.
5. Optional projection of the hub response.

INVARIANT: Steps 1-3 raise before any network call, so a rejected call
has no side effects. Nothing is retried.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from hactl.domain.catalog import OPERATIONS
from hactl.domain.entities import EntityReference, entity_domain
from hactl.domain.policy import (
    assert_domain_allowed,
    assert_entity_allowed,
    assert_tool_allowed,
    is_domain_allowed,
)
from hactl.errors import AuthorizationError, ValidationError
from hactl.infrastructure.hub_client import ServiceInvocation
from hactl.services._helpers import hours_ago_iso
from hactl.services.validators import (
    bounded_number,
    optional_mapping,
    optional_number,
    optional_string,
    require_domain,
    required_string,
    rgb_color,
    to_bool,
    to_number,
)

if TYPE_CHECKING:
    from hactl.config.models import PolicyConfig

logger = structlog.get_logger(__name__)

Arguments = dict[str, Any]


class HubClientLike(Protocol):
    """The subset of :class:`~hactl.infrastructure.hub_client.HubClient` used here."""

    def get_config(self) -> Any: ...
    def get_states(self) -> Any: ...
    def get_state(self, entity_id: str) -> Any: ...
    def get_services(self) -> Any: ...
    def call_service(self, invocation: ServiceInvocation) -> Any: ...
    def get_history(
        self, start: str, entity_id: str | None = None, end: str | None = None
    ) -> Any: ...
    def get_logbook(
        self, start: str, entity_id: str | None = None, end: str | None = None
    ) -> Any: ...
    def render_template(self, template: str, variables: dict[str, Any] | None = None) -> Any: ...
    def fire_event(self, event_type: str, event_data: dict[str, Any] | None = None) -> Any: ...


# Tools that only target one entity of a fixed domain and send nothing else.
ENTITY_SERVICES: MappingProxyType[str, tuple[str, str]] = MappingProxyType(
    {
        "ha_light_off": ("light", "turn_off"),
        "ha_light_toggle": ("light", "toggle"),
        "ha_switch_on": ("switch", "turn_on"),
        "ha_switch_off": ("switch", "turn_off"),
        "ha_switch_toggle": ("switch", "toggle"),
        "ha_media_play": ("media_player", "media_play"),
        "ha_media_pause": ("media_player", "media_pause"),
        "ha_media_stop": ("media_player", "media_stop"),
        "ha_cover_open": ("cover", "open_cover"),
        "ha_cover_close": ("cover", "close_cover"),
        "ha_scene_activate": ("scene", "turn_on"),
    }
)

# Listing tools scoped to one domain.
DOMAIN_LISTS: MappingProxyType[str, str] = MappingProxyType(
    {
        "ha_climate_list": "climate",
        "ha_sensor_list": "sensor",
    }
)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _attributes(state: Mapping[str, Any]) -> Mapping[str, Any]:
    attrs = state.get("attributes")
    return attrs if isinstance(attrs, Mapping) else {}


class OperationRegistry:
    """Dispatches named operations against one hub under one policy.

    Holds no mutable state after construction; concurrent invocations
    are independent.
    """

    def __init__(self, client: HubClientLike, policy: PolicyConfig) -> None:
        self._client = client
        self._policy = policy
        handlers: dict[str, Callable[[Arguments], Any]] = {
            "ha_status": self._status,
            "ha_list_entities": self._list_entities,
            "ha_get_state": self._get_state,
            "ha_search_entities": self._search_entities,
            "ha_list_services": self._list_services,
            "ha_light_on": self._light_on,
            "ha_light_list": self._light_list,
            "ha_climate_set_temp": self._climate_set_temp,
            "ha_climate_set_mode": self._climate_set_mode,
            "ha_climate_set_preset": self._climate_set_preset,
            "ha_media_volume": self._media_volume,
            "ha_media_play_media": self._media_play_media,
            "ha_cover_position": self._cover_position,
            "ha_script_run": self._script_run,
            "ha_automation_trigger": self._automation_trigger,
            "ha_history": self._history,
            "ha_logbook": self._logbook,
            "ha_call_service": self._call_service,
            "ha_fire_event": self._fire_event,
            "ha_render_template": self._render_template,
            "ha_notify": self._notify,
        }
        for name, (domain, service) in ENTITY_SERVICES.items():
            handlers[name] = self._entity_service(domain, service)
        for name, domain in DOMAIN_LISTS.items():
            handlers[name] = self._domain_list(domain)
        self._handlers = MappingProxyType(handlers)

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    def names(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def invoke(self, name: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Run operation *name* with *arguments* and return the hub's answer.

        Raises:
            ValidationError: Unknown name, malformed or out-of-range input.
            AuthorizationError: Write gate or allow-list rejection.
            HubHTTPError: Non-2xx hub response.
            HubTimeoutError: No hub response within the configured bound.
        """
        log = logger.bind(tool=name)
        try:
            if name not in OPERATIONS:
                raise ValidationError(f"Unknown tool: {name}", details={"tool": name})
            if arguments is not None and not isinstance(arguments, Mapping):
                raise ValidationError("input must be an object", details={"tool": name})
            assert_tool_allowed(self._policy, name)
            args: Arguments = dict(arguments or {})
            result = self._handlers[name](args)
        except (AuthorizationError, ValidationError) as exc:
            log.info("operation.rejected", code=exc.code, reason=exc.message)
            raise
        log.debug("operation.invoke", capability=str(OPERATIONS[name].capability))
        return result

    # -- Shared steps -------------------------------------------------------

    def _target(self, args: Arguments, domain: str) -> EntityReference:
        """Required ``entity_id``: parsed, allow-listed, then bound to *domain*."""
        ref = assert_entity_allowed(
            self._policy, required_string(args.get("entity_id"), "entity_id")
        )
        return require_domain(ref, domain)

    def _call(self, domain: str, service: str, payload: dict[str, Any]) -> Any:
        return self._client.call_service(ServiceInvocation(domain, service, payload))

    def _allowed_states(self) -> list[Mapping[str, Any]]:
        return [
            state
            for state in _as_list(self._client.get_states())
            if isinstance(state, Mapping)
            and is_domain_allowed(self._policy, entity_domain(state.get("entity_id")))
        ]

    def _states_in(self, domain: str) -> list[Mapping[str, Any]]:
        return [s for s in self._allowed_states() if entity_domain(s.get("entity_id")) == domain]

    def _entity_service(self, domain: str, service: str) -> Callable[[Arguments], Any]:
        def handler(args: Arguments) -> Any:
            ref = self._target(args, domain)
            return self._call(domain, service, {"entity_id": ref.entity_id})

        return handler

    def _domain_list(self, domain: str) -> Callable[[Arguments], Any]:
        def handler(args: Arguments) -> Any:
            assert_domain_allowed(self._policy, domain)
            return self._states_in(domain)

        return handler

    # -- Discovery ----------------------------------------------------------

    def _status(self, args: Arguments) -> Any:
        return self._client.get_config()

    def _list_entities(self, args: Arguments) -> Any:
        domain = optional_string(args.get("domain"), "domain")
        if domain is not None:
            domain = domain.lower()
            assert_domain_allowed(self._policy, domain)
        state = optional_string(args.get("state"), "state")
        area = optional_string(args.get("area"), "area")

        matches = []
        for entity in self._allowed_states():
            if domain is not None and entity_domain(entity.get("entity_id")) != domain:
                continue
            if state is not None and entity.get("state") != state:
                continue
            if area is not None and str(_attributes(entity).get("area_id") or "") != area:
                continue
            matches.append(entity)
        return matches

    def _get_state(self, args: Arguments) -> Any:
        ref = assert_entity_allowed(
            self._policy, required_string(args.get("entity_id"), "entity_id")
        )
        return self._client.get_state(ref.entity_id)

    def _search_entities(self, args: Arguments) -> Any:
        pattern = required_string(args.get("pattern"), "pattern").lower()
        return [
            entity
            for entity in self._allowed_states()
            if pattern in str(entity.get("entity_id", "")).lower()
            or pattern in str(_attributes(entity).get("friendly_name") or "").lower()
        ]

    def _list_services(self, args: Arguments) -> Any:
        return [
            entry
            for entry in _as_list(self._client.get_services())
            if isinstance(entry, Mapping)
            and is_domain_allowed(self._policy, str(entry.get("domain", "")))
        ]

    # -- Lights -------------------------------------------------------------

    def _light_on(self, args: Arguments) -> Any:
        ref = self._target(args, "light")
        payload: dict[str, Any] = {"entity_id": ref.entity_id}
        for field in ("brightness", "color_temp", "transition"):
            value = optional_number(args.get(field), field)
            if value is not None:
                payload[field] = value
        if args.get("rgb_color") is not None:
            payload["rgb_color"] = rgb_color(args["rgb_color"])
        return self._call("light", "turn_on", payload)

    def _light_list(self, args: Arguments) -> Any:
        assert_domain_allowed(self._policy, "light")
        lights = self._states_in("light")
        return [
            {
                "entity_id": s.get("entity_id"),
                "state": s.get("state"),
                "friendly_name": _attributes(s).get("friendly_name"),
                "brightness": _attributes(s).get("brightness"),
                "color_temp": _attributes(s).get("color_temp"),
                "rgb_color": _attributes(s).get("rgb_color"),
            }
            for s in lights
        ]

    # -- Climate ------------------------------------------------------------

    def _climate_set_temp(self, args: Arguments) -> Any:
        ref = self._target(args, "climate")
        temperature = to_number(args.get("temperature"), "temperature")
        return self._call(
            "climate", "set_temperature", {"entity_id": ref.entity_id, "temperature": temperature}
        )

    def _climate_set_mode(self, args: Arguments) -> Any:
        ref = self._target(args, "climate")
        hvac_mode = required_string(args.get("hvac_mode"), "hvac_mode")
        return self._call(
            "climate", "set_hvac_mode", {"entity_id": ref.entity_id, "hvac_mode": hvac_mode}
        )

    def _climate_set_preset(self, args: Arguments) -> Any:
        ref = self._target(args, "climate")
        preset_mode = required_string(args.get("preset_mode"), "preset_mode")
        return self._call(
            "climate", "set_preset_mode", {"entity_id": ref.entity_id, "preset_mode": preset_mode}
        )

    # -- Media --------------------------------------------------------------

    def _media_volume(self, args: Arguments) -> Any:
        ref = self._target(args, "media_player")
        volume = bounded_number(
            args.get("volume_level"), "volume_level", 0.0, 1.0, "between 0.0 and 1.0"
        )
        return self._call(
            "media_player", "volume_set", {"entity_id": ref.entity_id, "volume_level": volume}
        )

    def _media_play_media(self, args: Arguments) -> Any:
        ref = self._target(args, "media_player")
        return self._call(
            "media_player",
            "play_media",
            {
                "entity_id": ref.entity_id,
                "media_content_id": required_string(args.get("content_id"), "content_id"),
                "media_content_type": required_string(args.get("content_type"), "content_type"),
            },
        )

    # -- Covers -------------------------------------------------------------

    def _cover_position(self, args: Arguments) -> Any:
        ref = self._target(args, "cover")
        position = bounded_number(args.get("position"), "position", 0, 100, "between 0 and 100")
        return self._call(
            "cover", "set_cover_position", {"entity_id": ref.entity_id, "position": position}
        )

    # -- Scripts and automations ---------------------------------------------

    def _script_run(self, args: Arguments) -> Any:
        ref = self._target(args, "script")
        variables = optional_mapping(args.get("variables"), "variables") or {}
        return self._call("script", "turn_on", {"entity_id": ref.entity_id, "variables": variables})

    def _automation_trigger(self, args: Arguments) -> Any:
        ref = self._target(args, "automation")
        payload: dict[str, Any] = {"entity_id": ref.entity_id}
        if args.get("skip_condition") is not None:
            payload["skip_condition"] = to_bool(args["skip_condition"], "skip_condition")
        return self._call("automation", "trigger", payload)

    # -- History ------------------------------------------------------------

    def _window(self, args: Arguments) -> tuple[str, str | None, str | None]:
        """Resolve ``(start, entity_id, end)``, defaulting start to the policy window."""
        raw_entity = optional_string(args.get("entity_id"), "entity_id")
        entity_id = None
        if raw_entity is not None:
            entity_id = assert_entity_allowed(self._policy, raw_entity).entity_id
        start = optional_string(args.get("start"), "start")
        if start is None:
            start = hours_ago_iso(self._policy.history_window_hours)
        return start, entity_id, optional_string(args.get("end"), "end")

    def _history(self, args: Arguments) -> Any:
        start, entity_id, end = self._window(args)
        result = self._client.get_history(start, entity_id, end)
        if not self._policy.allowed_domains or not isinstance(result, list):
            return result
        # One list of state changes per entity.
        return [
            series
            for series in result
            if isinstance(series, list)
            and series
            and isinstance(series[0], Mapping)
            and is_domain_allowed(self._policy, entity_domain(series[0].get("entity_id")))
        ]

    def _logbook(self, args: Arguments) -> Any:
        start, entity_id, end = self._window(args)
        result = self._client.get_logbook(start, entity_id, end)
        if not self._policy.allowed_domains or not isinstance(result, list):
            return result
        return [
            entry
            for entry in result
            if isinstance(entry, Mapping)
            and (
                entry.get("entity_id") is None
                or is_domain_allowed(self._policy, entity_domain(entry.get("entity_id")))
            )
        ]

    # -- Advanced -----------------------------------------------------------

    def _call_service(self, args: Arguments) -> Any:
        domain = required_string(args.get("domain"), "domain").lower()
        assert_domain_allowed(self._policy, domain)
        service = required_string(args.get("service"), "service").lower()
        service_data = optional_mapping(args.get("service_data"), "service_data") or {}
        return self._call(domain, service, service_data)

    def _fire_event(self, args: Arguments) -> Any:
        event_type = required_string(args.get("event_type"), "event_type")
        event_data = optional_mapping(args.get("event_data"), "event_data") or {}
        return self._client.fire_event(event_type, event_data)

    def _render_template(self, args: Arguments) -> Any:
        template = required_string(args.get("template"), "template")
        variables = optional_mapping(args.get("variables"), "variables") or {}
        return self._client.render_template(template, variables)

    def _notify(self, args: Arguments) -> Any:
        assert_domain_allowed(self._policy, "notify")
        target = required_string(args.get("target"), "target")
        payload: dict[str, Any] = {"message": required_string(args.get("message"), "message")}
        title = optional_string(args.get("title"), "title")
        if title is not None:
            payload["title"] = title
        data = optional_mapping(args.get("data"), "data")
        if data is not None:
            payload["data"] = data
        return self._call("notify", target, payload)

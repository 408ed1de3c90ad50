"""Tests for ServiceResult and ServiceError."""

from __future__ import annotations

import json

import pytest

from hactl.errors import AuthorizationError, HubHTTPError
from hactl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success(self) -> None:
        result = ServiceResult.success("ha_get_state", {"state": "on"})
        assert result.ok is True
        assert result.op == "ha_get_state"
        assert result.data == {"state": "on"}
        assert result.warnings == []
        assert result.error is None

    def test_success_with_text_data(self) -> None:
        assert ServiceResult.success("ha_render_template", "21 degrees").data == "21 degrees"

    def test_failure_from_error(self) -> None:
        exc = AuthorizationError("Domain lock is blocked", details={"domain": "lock"})
        result = ServiceResult.failure("ha_get_state", exc)
        assert result.ok is False
        assert result.data is None
        assert result.error == ServiceError(
            code="AUTHORIZATION", message="Domain lock is blocked", detail={"domain": "lock"}
        )

    def test_failure_carries_hub_status(self) -> None:
        result = ServiceResult.failure("ha_status", HubHTTPError(401, "Unauthorized"))
        assert result.error is not None
        assert result.error.code == "HUB_HTTP"
        assert result.error.detail["status_code"] == 401

    def test_json_serialization(self) -> None:
        result = ServiceResult.success("ha_list_entities", [{"entity_id": "light.a"}])
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"][0]["entity_id"] == "light.a"
        assert parsed["error"] is None

    def test_frozen(self) -> None:
        result = ServiceResult.success("ha_status", {})
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]

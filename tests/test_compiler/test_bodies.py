"""Tests for specroutes.compiler.bodies -- request body and response schemas."""

from __future__ import annotations

from typing import Any

import pytest

from specroutes.compiler.bodies import build_request_body, build_responses
from specroutes.exceptions import MalformedSchemaError
from specroutes.models import CompilerConfig

USER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "integer", "readOnly": True},
        "email": {"type": "string"},
        "password": {"type": "string", "writeOnly": True},
    },
    "required": ["id", "email", "password"],
}


def _json(schema: dict[str, Any], media_type: str = "application/json") -> dict[str, Any]:
    return {"content": {media_type: {"schema": schema}}}


class TestBuildRequestBody:
    def test_json_body_filtered(self) -> None:
        result = build_request_body(_json(USER_SCHEMA))
        assert list(result["body"]["properties"]) == ["email", "password"]
        assert result["body"]["required"] == ["email", "password"]

    def test_no_request_body(self) -> None:
        assert build_request_body(None) == {}

    def test_non_json_content_produces_nothing(self) -> None:
        body = _json({"type": "string", "format": "binary"}, "application/pdf")
        assert build_request_body(body) == {}

    def test_json_without_schema_is_empty(self) -> None:
        assert build_request_body({"content": {"application/json": {}}}) == {"body": {}}

    def test_configured_media_types_in_priority_order(self) -> None:
        config = CompilerConfig(
            json_media_types=["application/merge-patch+json", "application/json"]
        )
        body = {
            "content": {
                "application/json": {"schema": {"properties": {"a": {}}}},
                "application/merge-patch+json": {"schema": {"properties": {"b": {}}}},
            }
        }
        assert build_request_body(body, config)["body"] == {"properties": {"b": {}}}

    def test_malformed_schema_location(self) -> None:
        with pytest.raises(MalformedSchemaError) as exc_info:
            build_request_body(_json({"type": "object"}), location="POST /users")
        assert exc_info.value.location == "POST /users requestBody"

    def test_lenient_config_passes_through(self) -> None:
        config = CompilerConfig(strict_schemas=False)
        assert build_request_body(_json({"type": "object"}), config) == {
            "body": {"type": "object"}
        }


class TestBuildResponses:
    def test_json_responses_filtered_per_status(self) -> None:
        result = build_responses({
            "200": _json(USER_SCHEMA),
            "4xx": _json({"properties": {"message": {"type": "string"}}}),
        })
        assert list(result["response"]) == ["200", "4xx"]
        assert list(result["response"]["200"]["properties"]) == ["id", "email"]
        assert result["response"]["200"]["required"] == ["id", "email"]

    def test_non_json_responses_dropped(self) -> None:
        result = build_responses({
            "200": _json({"type": "string", "format": "binary"}, "application/pdf"),
            "204": {"description": "No content"},
            "default": _json({"properties": {"title": {}}}),
        })
        assert result == {"response": {"default": {"properties": {"title": {}}}}}

    def test_nothing_json_returns_empty(self) -> None:
        assert build_responses({"204": {"description": "Deleted"}}) == {}
        assert build_responses(None) == {}
        assert build_responses({}) == {}

    def test_integer_status_keys_become_strings(self) -> None:
        result = build_responses({200: _json({"type": "string"})})
        assert result == {"response": {"200": {"type": "string"}}}

    def test_depth_from_config(self) -> None:
        schema = {
            "properties": {
                "owner": {"properties": {"token": {"writeOnly": True}, "name": {}}},
            }
        }
        shallow = build_responses({"200": _json(schema)})
        assert "token" in shallow["response"]["200"]["properties"]["owner"]["properties"]
        deep = build_responses({"200": _json(schema)}, CompilerConfig(filter_depth=None))
        assert deep["response"]["200"]["properties"]["owner"]["properties"] == {"name": {}}

    def test_malformed_schema_location(self) -> None:
        with pytest.raises(MalformedSchemaError) as exc_info:
            build_responses({"201": _json({"type": "object"})}, location="POST /users")
        assert exc_info.value.location == "POST /users response 201"

"""Tests for specroutes.compiler.parameters -- per-location parameter schemas."""

from __future__ import annotations

from typing import Any

import pytest

from specroutes.compiler.parameters import map_parameters, parse_location, wrap_object
from specroutes.exceptions import MalformedSchemaError


def _param(name: str, location: str, schema: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    param: dict[str, Any] = {"name": name, "in": location, **extra}
    if schema is not None:
        param["schema"] = schema
    return param


class TestParseLocation:
    """Test OpenAPI ``in`` values to router schema keys."""

    @pytest.mark.parametrize(
        ("location", "expected"),
        [
            ("path", "params"),
            ("query", "querystring"),
            ("header", "header"),
            ("cookie", "cookie"),
        ],
    )
    def test_known_locations(self, location: str, expected: str) -> None:
        assert parse_location(location) == expected

    def test_unknown_location_raises(self) -> None:
        with pytest.raises(MalformedSchemaError, match="Unsupported parameter location 'body'"):
            parse_location("body")


class TestMapParameters:
    """Test folding parameters into object schemas."""

    def test_empty_and_none(self) -> None:
        assert map_parameters([]) == {}
        assert map_parameters(None) == {}

    def test_groups_by_location(self) -> None:
        result = map_parameters([
            _param("id", "path", {"type": "integer"}),
            _param("locale", "query", {"type": "string"}),
            _param("X-Trace", "header", {"type": "string"}),
        ])
        assert result == {
            "params": {"type": "object", "properties": {"id": {"type": "integer"}}},
            "querystring": {"type": "object", "properties": {"locale": {"type": "string"}}},
            "header": {"type": "object", "properties": {"X-Trace": {"type": "string"}}},
        }

    def test_locations_in_first_seen_order(self) -> None:
        result = map_parameters([
            _param("q", "query", {"type": "string"}),
            _param("id", "path", {"type": "integer"}),
        ])
        assert list(result) == ["querystring", "params"]

    def test_same_name_same_location_last_wins(self) -> None:
        result = map_parameters([
            _param("id", "path", {"type": "integer"}),
            _param("id", "path", {"type": "string"}),
        ])
        assert result["params"]["properties"] == {"id": {"type": "string"}}

    def test_same_name_different_locations_kept_apart(self) -> None:
        result = map_parameters([
            _param("id", "path", {"type": "integer"}),
            _param("id", "query", {"type": "string"}),
        ])
        assert result["params"]["properties"]["id"] == {"type": "integer"}
        assert result["querystring"]["properties"]["id"] == {"type": "string"}

    def test_missing_schema_becomes_empty(self) -> None:
        result = map_parameters([_param("flag", "query")])
        assert result["querystring"]["properties"] == {"flag": {}}

    def test_required_not_emitted_by_default(self) -> None:
        result = map_parameters([_param("id", "path", {"type": "integer"}, required=True)])
        assert "required" not in result["params"]

    def test_derive_required(self) -> None:
        result = map_parameters(
            [
                _param("id", "path", {"type": "integer"}),
                _param("locale", "query", {"type": "string"}, required=True),
                _param("page", "query", {"type": "integer"}),
            ],
            derive_required=True,
        )
        # Path parameters are always required.
        assert result["params"]["required"] == ["id"]
        assert result["querystring"]["required"] == ["locale"]

    def test_derive_required_follows_last_declaration(self) -> None:
        result = map_parameters(
            [
                _param("locale", "query", {"type": "string"}, required=True),
                _param("locale", "query", {"type": "string"}),
            ],
            derive_required=True,
        )
        assert "required" not in result["querystring"]

    def test_input_schema_not_shared(self) -> None:
        schema = {"type": "string"}
        result = map_parameters([_param("q", "query", schema)])
        result["querystring"]["properties"]["q"]["type"] = "integer"
        assert schema == {"type": "string"}

    def test_unknown_location_names_parameter(self) -> None:
        with pytest.raises(MalformedSchemaError) as exc_info:
            map_parameters([_param("data", "body", {"type": "object"})])
        assert exc_info.value.location == "parameter 'data'"
        assert "(at parameter 'data')" in str(exc_info.value)

    def test_nameless_parameter_raises(self) -> None:
        with pytest.raises(MalformedSchemaError, match="no 'name'"):
            map_parameters([{"in": "query"}])

    def test_non_object_parameter_raises(self) -> None:
        with pytest.raises(MalformedSchemaError, match="must be an object"):
            map_parameters(["id"])  # type: ignore[list-item]


class TestWrapObject:
    def test_without_required(self) -> None:
        assert wrap_object({"a": {}}) == {"type": "object", "properties": {"a": {}}}

    def test_empty_required_omitted(self) -> None:
        assert "required" not in wrap_object({"a": {}}, [])

    def test_with_required(self) -> None:
        assert wrap_object({"a": {}}, ["a"])["required"] == ["a"]

"""Tests for specwright.builders -- OperationBuilder and PathBuilder."""

from __future__ import annotations

import logging

import pytest

from specwright.builders import OperationBuilder, PathBuilder
from specwright.exceptions import ExtensionNameError, InvalidUsageError
from specwright.models import HTTPMethod


class TestOperationBuilder:
    """Test the fluent operation setters."""

    def test_method_is_normalised(self) -> None:
        assert OperationBuilder("GET").method == "get"
        assert OperationBuilder(HTTPMethod.PATCH).method == "patch"

    def test_unknown_method_rejected(self) -> None:
        with pytest.raises(InvalidUsageError, match="connect"):
            OperationBuilder("connect")

    def test_empty_operation(self) -> None:
        assert OperationBuilder("get").build() == {}

    def test_full_operation_in_call_order(self) -> None:
        operation = (
            OperationBuilder("post")
            .set_operation_id("createUser")
            .set_summary("Create a user")
            .set_description("Creates a user account.")
            .set_tags(["users"])
            .set_external_docs("https://docs.example.com/users")
            .set_request_body(
                {"application/json": {"schema": {"$ref": "#/components/schemas/NewUser"}}},
                required=True,
            )
            .add_response(201, "Created")
            .set_deprecated()
            .build()
        )
        assert list(operation) == [
            "operationId",
            "summary",
            "description",
            "tags",
            "externalDocs",
            "requestBody",
            "responses",
            "deprecated",
        ]
        assert operation["requestBody"]["required"] is True
        assert operation["responses"] == {"201": {"description": "Created"}}
        assert operation["deprecated"] is True

    def test_add_response_with_schema(self) -> None:
        operation = (
            OperationBuilder("get")
            .add_response("200", "OK", schema={"type": "string"}, media_type="text/plain")
            .build()
        )
        assert operation["responses"]["200"] == {
            "description": "OK",
            "content": {"text/plain": {"schema": {"type": "string"}}},
        }

    def test_set_responses_stringifies_codes(self) -> None:
        operation = OperationBuilder("get").set_responses({200: {"description": "OK"}}).build()
        assert list(operation["responses"]) == ["200"]

    def test_query_parameter(self) -> None:
        operation = (
            OperationBuilder("get")
            .add_parameter("limit", "query", schema={"type": "integer"})
            .build()
        )
        assert operation["parameters"] == [
            {"name": "limit", "in": "query", "required": False, "schema": {"type": "integer"}}
        ]

    def test_path_parameter_always_required(self) -> None:
        operation = OperationBuilder("get").add_parameter("id", "path", required=False).build()
        assert operation["parameters"][0]["required"] is True

    def test_invalid_parameter_location(self) -> None:
        with pytest.raises(InvalidUsageError):
            OperationBuilder("get").add_parameter("id", "body")

    def test_parameter_reference(self) -> None:
        ref = {"$ref": "#/components/parameters/Limit"}
        operation = OperationBuilder("get").add_parameter_ref(ref).build()
        assert operation["parameters"] == [ref]

    def test_security_alternatives(self) -> None:
        operation = (
            OperationBuilder("get")
            .set_security([{"OAuth": ["read"]}, {"ApiKey": []}])
            .build()
        )
        assert operation["security"] == [{"OAuth": ["read"]}, {"ApiKey": []}]

    def test_empty_security_opts_out(self) -> None:
        operation = OperationBuilder("get").set_security([]).build()
        assert operation["security"] == []

    def test_security_absent_by_default(self) -> None:
        assert "security" not in OperationBuilder("get").build()

    def test_servers(self) -> None:
        operation = OperationBuilder("get").set_servers([{"url": "https://eu.example.com"}]).build()
        assert operation["servers"] == [{"url": "https://eu.example.com"}]

    def test_callbacks(self) -> None:
        callbacks = {"onEvent": {"{$request.body#/url}": {"post": {}}}}
        operation = OperationBuilder("post").set_callbacks(callbacks).build()
        assert operation["callbacks"] == callbacks

    def test_extension_rendered_last(self) -> None:
        operation = (
            OperationBuilder("get")
            .add_extension("x-rate-limit", 100)
            .set_summary("Rate limited")
            .build()
        )
        assert list(operation) == ["summary", "x-rate-limit"]

    def test_invalid_extension(self) -> None:
        with pytest.raises(ExtensionNameError):
            OperationBuilder("get").add_extension("rate-limit", 100)


class TestPathBuilder:
    """Test the fluent path item setters."""

    def test_path_item(self) -> None:
        builder = (
            PathBuilder("/users/{userId}")
            .set_summary("One user")
            .set_description("Operations on a single user")
            .add_parameter("userId", "path", description="The user ID")
            .set_servers([{"url": "https://users.example.com"}])
            .add_operation(OperationBuilder("get").set_operation_id("getUser"))
            .add_operation(OperationBuilder("delete").set_operation_id("deleteUser"))
        )
        item = builder.build()
        assert builder.path == "/users/{userId}"
        assert list(item) == ["summary", "description", "parameters", "servers", "get", "delete"]
        assert item["parameters"][0]["description"] == "The user ID"
        assert item["delete"] == {"operationId": "deleteUser"}

    def test_replacing_operation_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        builder = PathBuilder("/users").add_operation(OperationBuilder("get").set_summary("first"))
        with caplog.at_level(logging.WARNING, logger="specwright"):
            builder.add_operation(OperationBuilder("get").set_summary("second"))
        assert builder.build()["get"] == {"summary": "second"}
        message = caplog.records[0].getMessage()
        assert "GET" in message
        assert "/users" in message

    def test_extension(self) -> None:
        item = PathBuilder("/users").add_extension("x-owner", "team-a").build()
        assert item == {"x-owner": "team-a"}

    def test_build_does_not_expose_extensions_in_live_item(self) -> None:
        builder = PathBuilder("/users").add_extension("x-owner", "team-a")
        builder.build()
        assert builder.path_item == {}

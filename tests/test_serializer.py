"""Tests for specwright.serializer -- JSON/YAML rendering and file output."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from specwright.exceptions import DocumentLoadError, InvalidUsageError
from specwright.serializer import (
    format_for_path,
    parse_text,
    render,
    to_json_text,
    to_json_value,
    to_yaml_text,
    write_document,
)


SAMPLE = {
    "openapi": "3.1.0",
    "info": {"title": "Sample", "version": "1"},
    "paths": {"/z": {}, "/a": {}},
    "security": [],
}


class TestToJsonValue:
    def test_deep_copy(self) -> None:
        value = to_json_value(SAMPLE)
        value["info"]["title"] = "changed"
        assert SAMPLE["info"]["title"] == "Sample"

    def test_extensions_appended(self) -> None:
        value = to_json_value(SAMPLE, {"x-id": 1})
        assert list(value)[-1] == "x-id"
        assert "x-id" not in SAMPLE

    def test_keys_stringified_like_json(self) -> None:
        tree = {"responses": {200: {"description": "OK"}, True: 1, None: 2}, "tags": ("a", "b")}
        value = to_json_value(tree)
        assert value == {
            "responses": {"200": {"description": "OK"}, "true": 1, "null": 2},
            "tags": ["a", "b"],
        }
        assert json.loads(to_json_text(value)) == value
        assert yaml.safe_load(to_yaml_text(value)) == value


class TestRendering:
    def test_json_preserves_key_order(self) -> None:
        text = to_json_text(SAMPLE)
        assert text.index('"/z"') < text.index('"/a"')

    def test_json_indent(self) -> None:
        assert to_json_text({"a": 1}, indent=4) == '{\n    "a": 1\n}'
        assert to_json_text({"a": 1}, indent=None) == '{"a": 1}'

    def test_yaml_preserves_key_order(self) -> None:
        text = to_yaml_text(SAMPLE)
        assert text.index("/z") < text.index("/a")
        assert text.startswith("openapi:")
        assert yaml.safe_load(text)["openapi"] == "3.1.0"

    def test_yaml_renders_empty_list(self) -> None:
        assert "security: []" in to_yaml_text(SAMPLE)

    def test_yaml_equals_json(self) -> None:
        assert yaml.safe_load(to_yaml_text(SAMPLE)) == json.loads(to_json_text(SAMPLE))

    def test_yaml_quotes_status_codes(self) -> None:
        value = {"responses": {"200": {"description": "OK"}}}
        assert yaml.safe_load(to_yaml_text(value)) == value

    def test_render_dispatch(self) -> None:
        assert render(SAMPLE, "json") == to_json_text(SAMPLE)
        assert render(SAMPLE, "yaml") == to_yaml_text(SAMPLE)

    def test_render_unknown_format(self) -> None:
        with pytest.raises(InvalidUsageError):
            render(SAMPLE, "toml")  # type: ignore[arg-type]


class TestParseText:
    def test_parse_json_and_yaml(self) -> None:
        assert parse_text(to_json_text(SAMPLE)) == SAMPLE
        assert parse_text(to_yaml_text(SAMPLE), "yaml") == SAMPLE

    def test_parse_garbage(self) -> None:
        with pytest.raises(DocumentLoadError):
            parse_text("- just\n- a list\n")


class TestFiles:
    @pytest.mark.parametrize(
        "name, expected",
        [("api.json", "json"), ("api.YAML", "yaml"), ("api.yml", "yaml"), ("api.txt", "yaml")],
    )
    def test_format_for_path(self, name: str, expected: str) -> None:
        assert format_for_path(name) == expected

    def test_format_for_path_default(self) -> None:
        assert format_for_path("api", default="json") == "json"

    def test_write_document(self, tmp_path: Path) -> None:
        path = write_document(SAMPLE, tmp_path / "nested" / "api.json")
        text = path.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert json.loads(text) == SAMPLE

    def test_write_document_explicit_format(self, tmp_path: Path) -> None:
        path = write_document(SAMPLE, tmp_path / "api.out", fmt="json")
        assert json.loads(path.read_text(encoding="utf-8")) == SAMPLE

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        write_document(SAMPLE, tmp_path / "api.yaml")
        assert [p.name for p in tmp_path.iterdir()] == ["api.yaml"]

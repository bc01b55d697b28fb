"""Tests for specwright.loader -- reading documents from files, stdin and URLs."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any

import httpx
import pytest

from specwright.exceptions import DocumentLoadError
from specwright.loader import load_document, parse_content, validate_openapi_version


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestLoadFromFile:
    def test_json_file(self, petstore_path: Path, petstore_raw: dict[str, Any]) -> None:
        assert load_document(str(petstore_path)) == petstore_raw

    def test_yaml_file(self, overlay_path: Path) -> None:
        doc = load_document(str(overlay_path))
        assert doc["info"]["title"] == "Pets overlay"
        assert list(doc["paths"]) == ["/pets", "/owners"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentLoadError, match="not found"):
            load_document(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("   \n", encoding="utf-8")
        with pytest.raises(DocumentLoadError, match="empty"):
            load_document(str(path))

    def test_invalid_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DocumentLoadError, match="Invalid JSON"):
            load_document(str(path))

    def test_unknown_extension_detected_by_content(self, tmp_path: Path) -> None:
        path = tmp_path / "api.txt"
        path.write_text("openapi: 3.1.0\ninfo:\n  title: T\n  version: '1'\n", encoding="utf-8")
        assert load_document(str(path))["openapi"] == "3.1.0"


class TestLoadFromStdin:
    def test_reads_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO('{"openapi": "3.1.0"}'))
        assert load_document("-") == {"openapi": "3.1.0"}

    def test_empty_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        with pytest.raises(DocumentLoadError, match="stdin"):
            load_document("-")


class TestLoadFromUrl:
    def _patch_get(self, monkeypatch: pytest.MonkeyPatch, response: httpx.Response) -> None:
        def fake_get(url: str, **kwargs: Any) -> httpx.Response:
            response.request = httpx.Request("GET", url)
            return response

        monkeypatch.setattr("specwright.loader.httpx.get", fake_get)

    def test_json_response(self, monkeypatch: pytest.MonkeyPatch) -> None:
        body = {"openapi": "3.1.0", "info": {"title": "Remote", "version": "1"}}
        self._patch_get(
            monkeypatch,
            httpx.Response(200, json=body, headers={"content-type": "application/json"}),
        )
        assert load_document("https://api.example.com/openapi.json") == body

    def test_yaml_response(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._patch_get(
            monkeypatch,
            httpx.Response(
                200,
                text="openapi: 3.1.0\n",
                headers={"content-type": "application/yaml"},
            ),
        )
        assert load_document("https://api.example.com/openapi.yaml") == {"openapi": "3.1.0"}

    def test_http_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._patch_get(monkeypatch, httpx.Response(404, text="missing"))
        with pytest.raises(DocumentLoadError, match="HTTP 404"):
            load_document("https://api.example.com/openapi.json")

    def test_connection_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_get(url: str, **kwargs: Any) -> httpx.Response:
            raise httpx.ConnectError("refused", request=httpx.Request("GET", url))

        monkeypatch.setattr("specwright.loader.httpx.get", fake_get)
        with pytest.raises(DocumentLoadError, match="Failed to fetch"):
            load_document("https://api.example.com/openapi.json")


class TestParseContent:
    def test_json_preferred(self) -> None:
        assert parse_content('{"a": 1}') == {"a": 1}

    def test_yaml_fallback(self) -> None:
        assert parse_content("a: 1\nb: [x, y]\n") == {"a": 1, "b": ["x", "y"]}

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(DocumentLoadError, match="list"):
            parse_content("[1, 2, 3]")

    def test_null_document_rejected(self) -> None:
        with pytest.raises(DocumentLoadError, match="empty document"):
            parse_content("~", hint="yaml")

    def test_unparseable(self) -> None:
        with pytest.raises(DocumentLoadError, match="Failed to parse"):
            parse_content("key: [unclosed")


class TestValidateOpenAPIVersion:
    def test_31(self) -> None:
        assert validate_openapi_version({"openapi": "3.1.0"}) == "3.1.0"

    def test_30_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="specwright"):
            assert validate_openapi_version({"openapi": "3.0.3"}) == "3.0.3"
        assert "3.1.0" in caplog.records[0].getMessage()

    def test_swagger_rejected(self) -> None:
        raw = json.loads((FIXTURES_DIR / "swagger_2.json").read_text(encoding="utf-8"))
        with pytest.raises(DocumentLoadError, match="Swagger 2.0"):
            validate_openapi_version(raw)

    def test_missing_version(self) -> None:
        with pytest.raises(DocumentLoadError, match="Missing 'openapi'"):
            validate_openapi_version({"info": {}})

    def test_unsupported_version(self) -> None:
        with pytest.raises(DocumentLoadError, match="Unsupported"):
            validate_openapi_version({"openapi": "4.0.0"})

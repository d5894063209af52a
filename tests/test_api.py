"""Tests for the FastAPI endpoints."""
import logging

import pytest
import requests
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from google_translate import main
from google_translate.main import app, get_translation_client
from google_translate.translation_service import (
    ClientConfig,
    TranslationClient,
    RequestsTransport,
    TransportError
)


@pytest.fixture
def transport():
    """Create a mocked transport."""
    return MagicMock()


@pytest.fixture
def translator(transport):
    """Create a translation client on the mocked transport."""
    return TranslationClient(
        ClientConfig(api_key="secret", translate_url="https://x/t", detect_url="https://x/d"),
        transport=transport
    )


@pytest.fixture
def client(translator):
    """Create test client with the translator dependency overridden."""
    app.dependency_overrides[get_translation_client] = lambda: translator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client):
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert data["version"] == "0.1.0"


def test_root_endpoint(client):
    """Test root endpoint returns API info."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "name" in data
    assert "detect" in data["endpoints"]


class TestTranslateAPI:
    """Tests for /translate API endpoint."""

    def test_translate_with_source(self, client, transport):
        """Test translating with an explicit source language."""
        transport.get_json.return_value = {"data": {"translations": [{"translatedText": "Hola"}]}}

        response = client.post(
            "/translate",
            json={"text": "Hello", "source_lang": "en", "target_lang": "es"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "original_text": "Hello",
            "translated_text": "Hola",
            "source_lang": "en",
            "target_lang": "es"
        }
        transport.get_json.assert_called_once()

    def test_translate_reports_detected_source(self, client, transport):
        """Test auto-detection runs once and its result is returned."""
        transport.get_json.side_effect = [
            {"data": {"detections": [[{"language": "fr"}]]}},
            {"data": {"translations": [{"translatedText": "Hello"}]}}
        ]

        response = client.post("/translate", json={"text": "Bonjour", "target_lang": "en"})

        assert response.status_code == 200
        assert response.json()["source_lang"] == "fr"
        assert transport.get_json.call_count == 2
        assert "source=fr" in transport.get_json.call_args_list[1].args[0]

    def test_translate_uses_client_defaults(self, client, translator, transport):
        """Test the client's configured languages apply when the body omits them."""
        translator.set_source_lang("en").set_target_lang("de")
        transport.get_json.return_value = {"data": {"translations": [{"translatedText": "Hallo"}]}}

        response = client.post("/translate", json={"text": "Hello"})

        assert response.status_code == 200
        data = response.json()
        assert data["source_lang"] == "en"
        assert data["target_lang"] == "de"

    def test_translate_empty_result(self, client, transport):
        """Test that no translation is returned as null."""
        transport.get_json.return_value = {"data": {"translations": []}}

        response = client.post(
            "/translate",
            json={"text": "Hello", "source_lang": "en", "target_lang": "es"}
        )

        assert response.status_code == 200
        assert response.json()["translated_text"] is None

    def test_translate_without_target(self, client, transport):
        """Test missing target language is a client error raised before any request."""
        response = client.post("/translate", json={"text": "Hello", "source_lang": "en"})

        assert response.status_code == 400
        assert "target" in response.json()["detail"]
        transport.get_json.assert_not_called()

    def test_translate_without_source_autodetect_off(self, client, transport):
        """Test a missing source with auto-detect off maps to 400."""
        response = client.post(
            "/translate",
            json={"text": "Hello", "target_lang": "es", "auto_detect": False}
        )

        assert response.status_code == 400
        assert "autodetect" in response.json()["detail"]
        transport.get_json.assert_not_called()

    def test_translate_transport_failure(self, client, transport):
        """Test upstream failures map to 502."""
        transport.get_json.side_effect = TransportError("HTTP error 500 from translate API", status_code=500)

        response = client.post(
            "/translate",
            json={"text": "Hello", "source_lang": "en", "target_lang": "es"}
        )

        assert response.status_code == 502
        assert "500" in response.json()["detail"]


def refuse_connection(url, timeout):
    raise requests.exceptions.ConnectionError(f"Max retries exceeded with url: {url}")


class TestDetectAPI:
    """Tests for /detect API endpoint."""

    def test_detect(self, client, transport):
        transport.get_json.return_value = {"data": {"detections": [[{"language": "en"}]]}}

        response = client.post("/detect", json={"text": "Hello"})

        assert response.status_code == 200
        assert response.json() == {"text": "Hello", "language": "en"}

    def test_detect_failure(self, client, transport):
        """Test detection errors map to 422."""
        transport.get_json.return_value = {"data": {}}

        response = client.post("/detect", json={"text": "???"})

        assert response.status_code == 422

    def test_connection_error_hides_api_key(self, caplog):
        """Test the API key never reaches the response or the logs."""
        session = MagicMock(spec=requests.Session)
        session.headers = {}
        session.get.side_effect = refuse_connection
        translator = TranslationClient(
            ClientConfig(api_key="TOPSECRET", translate_url="https://x/t", detect_url="https://x/d"),
            transport=RequestsTransport(session=session)
        )
        app.dependency_overrides[get_translation_client] = lambda: translator
        try:
            with caplog.at_level(logging.DEBUG):
                response = TestClient(app).post("/detect", json={"text": "hi"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 502
        assert "TOPSECRET" not in response.text
        assert "TOPSECRET" not in caplog.text


def test_unconfigured_client_returns_503(monkeypatch):
    """Test a missing API key is reported as service unavailable."""
    monkeypatch.setattr(main, "_client", None)
    monkeypatch.setattr(main.settings, "google_translate_api_key", "")

    response = TestClient(app).post("/detect", json={"text": "Hello"})

    assert response.status_code == 503
    assert "API key" in response.json()["detail"]


def test_shutdown_closes_transport(monkeypatch):
    """Test the shared client's transport is closed when the app stops."""
    transport = MagicMock()
    shared = TranslationClient(ClientConfig(api_key="secret"), transport=transport)
    monkeypatch.setattr(main, "_client", shared)

    with TestClient(app) as test_client:
        assert test_client.get("/health").status_code == 200
        transport.close.assert_not_called()

    transport.close.assert_called_once()
    assert main._client is None

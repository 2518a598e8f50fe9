"""
Tests for the FastAPI application and serverless entry point.
"""

import pytest
from fastapi.testclient import TestClient
from mangum import Mangum

from main import create_app
from prompt_relay.core.config import Settings

from conftest import RecordingGeminiClient, gemini_result


@pytest.fixture
def gemini_client():
    return RecordingGeminiClient(result=gemini_result('{"subject":"Hi","body":"Hello there"}'))


@pytest.fixture
def client(test_settings, gemini_client):
    """Create test client."""
    return TestClient(create_app(test_settings, gemini_client=gemini_client))


class TestApplication:
    """Test FastAPI application setup."""

    def test_app_creation(self, test_settings):
        app = create_app(test_settings)

        assert app.title == "Prompt Relay"
        assert app.state.relay_handler.config.api_key == "test-api-key"


class TestRelayEndpoint:
    """Test the relay over HTTP."""

    def test_post_returns_generated_json(self, client, gemini_client):
        response = client.post("/", json={"prompt": "Write an email"})

        assert response.status_code == 200
        assert response.json() == {"subject": "Hi", "body": "Hello there"}
        assert response.headers["access-control-allow-origin"] == "*"
        assert gemini_client.calls[0]["contents"][0]["parts"][0]["text"] == "Write an email"

    def test_any_path_is_relayed(self, client):
        response = client.post("/.netlify/functions/generateEmail", json={"prompt": "Write an email"})

        assert response.status_code == 200

    def test_options_preflight(self, client):
        response = client.options("/")

        assert response.status_code == 204
        assert response.content == b""
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_other_methods(self, client, method):
        response = client.request(method.upper(), "/")

        assert response.status_code == 405
        assert response.text == "Method Not Allowed"

    def test_invalid_body(self, client, gemini_client):
        response = client.post("/", content="not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert "error" in response.json()
        assert gemini_client.calls == []

    def test_non_utf8_body_rejected(self, client, gemini_client):
        response = client.post(
            "/",
            content=b'{"prompt":"\xff\xfe hi"}',
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "UTF-8" in response.json()["error"]
        assert gemini_client.calls == []

    def test_missing_credentials(self, clean_env, gemini_client):
        app = create_app(Settings(_env_file=None), gemini_client=gemini_client)
        response = TestClient(app).post("/", json={"prompt": "Write an email"})

        assert response.status_code == 500
        assert response.json() == {"error": "API key is not configured."}
        assert gemini_client.calls == []


class TestServerlessHandler:
    """Test the serverless entry point."""

    def test_handler_wraps_app(self):
        from api.index import app, handler

        assert isinstance(handler, Mangum)
        assert handler.app is app

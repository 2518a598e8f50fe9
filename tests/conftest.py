"""
Shared fixtures and fakes for Prompt Relay tests.
"""

import copy
import json
from typing import Any, Dict, List, Optional

import pytest

from prompt_relay.core.config import GenerationSettings, RelayConfig, Settings


# =============================================================================
# FAKE GEMINI CLIENT
# =============================================================================

class RecordingGeminiClient:
    """Stands in for GeminiService and records every payload it is sent."""

    def __init__(self, result: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate_content(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.result)


def gemini_result(
    text: Optional[str],
    finish_reason: Optional[str] = "STOP",
    safety_ratings: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    """Build a generateContent response with a single candidate."""
    candidate: Dict[str, Any] = {"content": {"parts": [{"text": text}], "role": "model"}}
    if finish_reason is not None:
        candidate["finishReason"] = finish_reason
    if safety_ratings is not None:
        candidate["safetyRatings"] = safety_ratings
    return {"candidates": [candidate]}


# =============================================================================
# FAKE AIOHTTP SESSION
# =============================================================================

class FakeResponse:
    """Minimal async context manager mimicking aiohttp.ClientResponse."""

    def __init__(self, status: int, body: str):
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records POST calls and answers with a canned response or error."""

    def __init__(self, status: int = 200, body: Any = "", error: Optional[Exception] = None):
        self.status = status
        self.body = body if isinstance(body, str) else json.dumps(body)
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs):
        self.requests.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, self.body)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def relay_config() -> RelayConfig:
    """Relay configuration with a test credential."""
    return RelayConfig(
        api_key="test-api-key",
        gemini_model="gemini-test",
        base_url="https://gemini.example.test/v1beta/models",
        generation=GenerationSettings(),
    )


@pytest.fixture
def missing_key_config(relay_config) -> RelayConfig:
    """Relay configuration without a credential."""
    return relay_config.model_copy(update={"api_key": None})


@pytest.fixture
def clean_env(monkeypatch):
    """Remove relay environment variables so Settings sees only defaults."""
    for name in [
        "GEMINI_KEY",
        "GOOGLE_GEMINI_API_KEY",
        "GEMINI_API_KEY",
        "GEMINI_MODEL",
        "GEMINI_BASE_URL",
        "AI_TEMPERATURE",
        "AI_TOP_K",
        "AI_TOP_P",
        "MAX_OUTPUT_TOKENS",
        "JSON_MODE",
        "STRIP_CODE_FENCES",
        "UPSTREAM_TIMEOUT_SECONDS",
        "CORS_ALLOW_ORIGIN",
        "ENVIRONMENT",
        "DEBUG",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def test_settings(clean_env) -> Settings:
    """Settings with a test key and no .env file."""
    return Settings(_env_file=None, gemini_api_key="test-api-key", environment="testing")

"""
Google Gemini API client for the generateContent call.
"""

import asyncio
import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp

from ..core.config import RelayConfig
from ..core.exceptions import (
    GeminiAPIError,
    GeminiConnectionError,
    InvalidUpstreamResponseError,
    MissingCredentialsError,
)
from ..core.logger import get_logger, log_async_function_call
from ..utils.text_utils import truncate_text

logger = get_logger(__name__)


class GeminiService:
    """Service for calling the Gemini generateContent endpoint."""

    def __init__(
        self,
        api_key: str,
        model_name: str,
        base_url: str,
        timeout_seconds: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        if not api_key:
            raise MissingCredentialsError("API key is not configured.", error_code="MISSING_API_KEY")

        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session

    @classmethod
    def from_config(cls, config: RelayConfig) -> "GeminiService":
        return cls(
            api_key=config.api_key,
            model_name=config.gemini_model,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model_name}:generateContent"

    @asynccontextmanager
    async def _session_scope(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Yield the injected session, or a fresh one closed on exit."""
        if self.session is not None:
            yield self.session
            return

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            yield session

    @log_async_function_call
    async def generate_content(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one generateContent request.

        Args:
            payload: Wire-format request body

        Returns:
            The decoded response body

        Raises:
            GeminiAPIError: Non-success HTTP status, upstream body in ``details``
            GeminiConnectionError: Network failure or client timeout
            InvalidUpstreamResponseError: Success status with a non-object body
        """
        try:
            async with self._session_scope() as session:
                async with session.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload,
                    headers={"Content-Type": "application/json"},
                ) as response:
                    status = response.status
                    body_text = await response.text()

        except aiohttp.ClientError as e:
            logger.bind(model=self.model_name, error_type=type(e).__name__).error(
                f"HTTP error calling Gemini API: {e}"
            )
            raise GeminiConnectionError(
                "Failed to reach the Gemini API.",
                error_code="GEMINI_CONNECTION_ERROR",
                details=str(e) or type(e).__name__
            ) from e
        except asyncio.TimeoutError as e:
            logger.bind(model=self.model_name).error("Timed out calling Gemini API")
            raise GeminiConnectionError(
                "Timed out waiting for the Gemini API.",
                error_code="GEMINI_TIMEOUT",
                details=f"No response within {self.timeout_seconds}s"
            ) from e

        if not 200 <= status < 300:
            logger.bind(status_code=status, model=self.model_name).error(
                f"Gemini API error ({status}): {body_text}"
            )
            raise GeminiAPIError(
                f"Gemini API responded with status: {status}",
                error_code=f"HTTP_{status}",
                details=_decode_error_body(body_text),
                status_code=status if 400 <= status <= 599 else 500
            )

        try:
            result = json.loads(body_text)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON response from Gemini API: {truncate_text(body_text)}")
            raise InvalidUpstreamResponseError(
                "Invalid response from the Gemini API.",
                error_code="GEMINI_INVALID_RESPONSE",
                details=str(e)
            ) from e

        if not isinstance(result, dict):
            logger.error(f"Unexpected Gemini response type: {type(result).__name__}")
            raise InvalidUpstreamResponseError(
                "Invalid response from the Gemini API.",
                error_code="GEMINI_INVALID_RESPONSE",
                details=f"Expected a JSON object, got {type(result).__name__}"
            )

        return result


def _decode_error_body(body_text: str) -> Any:
    """Upstream error bodies are usually JSON; keep raw text otherwise."""
    if not body_text:
        return None
    try:
        return json.loads(body_text)
    except json.JSONDecodeError:
        return body_text

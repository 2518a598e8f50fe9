"""
Prompt relay workflow: one HTTP request in, one generateContent call, one response out.
"""

import json
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..ai.gemini_service import GeminiService
from ..core.config import RelayConfig
from ..core.exceptions import (
    InvalidPromptError,
    InvalidRequestBodyError,
    MissingCredentialsError,
    PromptRelayException,
    create_error_response,
)
from ..core.logger import get_logger
from ..models import GenerateContentRequest, PromptRequest, RelayResponse
from ..processors import extract_candidate_text, parse_generated_json

logger = get_logger(__name__)


METHOD_NOT_ALLOWED_BODY = "Method Not Allowed"
INTERNAL_ERROR_MESSAGE = "An internal error occurred."


def parse_prompt_request(body: Optional[Union[str, bytes]]) -> PromptRequest:
    """
    Decode and validate the raw request body.

    Raises:
        InvalidRequestBodyError: Body missing, not UTF-8, not JSON, or not a JSON object
        InvalidPromptError: ``prompt`` missing, empty or not a string
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidRequestBodyError(
                "Request body must be UTF-8 encoded.",
                error_code="INVALID_ENCODING",
                details=str(e)
            ) from e

    if body is None or not body.strip():
        raise InvalidRequestBodyError("Request body is required.", error_code="EMPTY_BODY")

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidRequestBodyError(
            "Request body must be valid JSON.",
            error_code="INVALID_JSON",
            details=str(e)
        ) from e

    if not isinstance(data, dict):
        raise InvalidRequestBodyError("Request body must be a JSON object.", error_code="INVALID_BODY")

    try:
        return PromptRequest.model_validate(data)
    except ValidationError as e:
        raise InvalidPromptError(
            "A non-empty 'prompt' string is required.",
            error_code="INVALID_PROMPT",
            details=[error["msg"] for error in e.errors()]
        ) from e


class PromptRelayHandler:
    """Relays a prompt to Gemini and returns the generated JSON document."""

    def __init__(self, config: RelayConfig, gemini_client: Optional[Any] = None):
        """
        Args:
            config: Injected relay configuration
            gemini_client: Object with an async ``generate_content(payload)``;
                a :class:`GeminiService` is built per request when omitted
        """
        self.config = config
        self.gemini_client = gemini_client

    @property
    def cors_headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.config.cors_allow_origin,
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Allow-Methods": "POST, OPTIONS",
        }

    async def handle(self, method: str, body: Optional[Union[str, bytes]] = None) -> RelayResponse:
        """Main entry point for a single HTTP invocation."""
        method = (method or "").upper()

        if method == "OPTIONS":
            return RelayResponse(status_code=204, headers=self.cors_headers, body="")

        if method != "POST":
            return RelayResponse(
                status_code=405,
                headers={**self.cors_headers, "Content-Type": "text/plain"},
                body=METHOD_NOT_ALLOWED_BODY
            )

        try:
            result = await self._relay(body)
            return RelayResponse.json_body(200, result, self.cors_headers)

        except PromptRelayException as e:
            self._log_failure(e)
            return RelayResponse.json_body(e.status_code, create_error_response(e), self.cors_headers)

        except Exception:
            logger.exception("Unexpected error while relaying prompt")
            return RelayResponse.json_body(500, {"error": INTERNAL_ERROR_MESSAGE}, self.cors_headers)

    async def _relay(self, body: Optional[Union[str, bytes]]) -> Any:
        # Credential check comes before touching the body or the network
        if not self.config.has_credentials:
            raise MissingCredentialsError("API key is not configured.", error_code="MISSING_API_KEY")

        prompt_request = parse_prompt_request(body)

        payload = GenerateContentRequest.from_prompt(
            prompt_request.prompt, self.config.generation
        ).to_payload()

        logger.info(
            f"Relaying prompt to {self.config.gemini_model} "
            f"(prompt_length={len(prompt_request.prompt)}, json_mode={self.config.generation.json_mode})"
        )

        client = self.gemini_client or GeminiService.from_config(self.config)
        result = await client.generate_content(payload)

        text = extract_candidate_text(result)
        return parse_generated_json(text, strip_fences=self.config.strip_code_fences)

    def _log_failure(self, error: PromptRelayException) -> None:
        if error.status_code >= 500:
            logger.error(f"Prompt relay failed: {error.to_dict()}")
        else:
            logger.warning(f"Prompt relay rejected: {error.to_dict()}")

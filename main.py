"""
Main FastAPI application entry point for Prompt Relay.
This is the ASGI app used for local development and by the serverless entry in api/.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, Response, status
import uvicorn

from prompt_relay.core.config import Settings, settings as default_settings
from prompt_relay.core.logger import get_logger, setup_logging
from prompt_relay.models import RelayResponse
from prompt_relay.workflows import PromptRelayHandler
from prompt_relay.workflows.prompt_relay import INTERNAL_ERROR_MESSAGE

logger = get_logger(__name__)

RELAY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def to_http_response(relay_response: RelayResponse) -> Response:
    """Convert the handler's response value into a Starlette response."""
    return Response(
        content=relay_response.body,
        status_code=relay_response.status_code,
        headers=relay_response.headers,
    )


def create_app(
    app_settings: Optional[Settings] = None,
    gemini_client: Optional[Any] = None
) -> FastAPI:
    """
    Build the relay application.

    Args:
        app_settings: Settings to use (environment-loaded settings when omitted)
        gemini_client: Optional client override, used by tests

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or default_settings
    relay_handler = PromptRelayHandler(app_settings.relay_config(), gemini_client=gemini_client)

    # The relay owns every path, so the generated docs routes are disabled
    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.version,
        description="Relays prompts to Google Gemini and returns the generated JSON",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = app_settings
    app.state.relay_handler = relay_handler

    # =============================================================================
    # GLOBAL EXCEPTION HANDLERS
    # =============================================================================

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions outside the relay handler."""
        logger.opt(exception=exc).error(f"Unexpected exception: {exc}")
        return to_http_response(
            RelayResponse.json_body(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"error": INTERNAL_ERROR_MESSAGE},
                relay_handler.cors_headers,
            )
        )

    # =============================================================================
    # RELAY ENDPOINT
    # =============================================================================

    @app.api_route("/{path:path}", methods=RELAY_METHODS, include_in_schema=False)
    async def relay(request: Request):
        """Relay endpoint; method gating is done by the handler."""
        raw_body = await request.body()
        body = raw_body or None

        relay_response = await relay_handler.handle(request.method, body)
        return to_http_response(relay_response)

    return app


setup_logging()
app = create_app()


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    logger.info("Starting development server...")

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.is_development,
        log_level=default_settings.log_level.lower(),
        access_log=True
    )

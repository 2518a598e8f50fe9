"""
Custom exception classes for Prompt Relay.
Each exception carries the HTTP status it is reported with.
"""

from typing import Any, Dict, Optional


class PromptRelayException(Exception):
    """Base exception class for all Prompt Relay errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Any = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "status_code": self.status_code,
            "details": self.details
        }


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(PromptRelayException):
    """Raised when configuration is invalid or missing."""
    status_code = 500


class MissingCredentialsError(ConfigurationError):
    """Raised when the Gemini API key is missing."""
    pass


# =============================================================================
# CLIENT REQUEST ERRORS
# =============================================================================

class RequestValidationError(PromptRelayException):
    """Base class for errors caused by the caller's request."""
    status_code = 400


class InvalidRequestBodyError(RequestValidationError):
    """Raised when the request body is missing or is not a JSON object."""
    pass


class InvalidPromptError(RequestValidationError):
    """Raised when the prompt is missing, empty or not a string."""
    pass


# =============================================================================
# GEMINI SERVICE ERRORS
# =============================================================================

class GeminiServiceError(PromptRelayException):
    """Base class for failures talking to the Gemini API."""
    status_code = 500


class GeminiAPIError(GeminiServiceError):
    """Raised when the Gemini API answers with a non-success status."""
    pass


class GeminiConnectionError(GeminiServiceError):
    """Raised when the Gemini API cannot be reached."""
    pass


class InvalidUpstreamResponseError(GeminiServiceError):
    """Raised when a successful Gemini response is not a JSON object."""
    pass


# =============================================================================
# GENERATION CONTENT ERRORS
# =============================================================================

class GenerationError(PromptRelayException):
    """Base class for unusable generation results."""
    status_code = 500


class NoTextResponseError(GenerationError):
    """Raised when the first candidate carries no text part."""
    pass


class SafetyBlockedError(GenerationError):
    """Raised when generation was stopped by a safety filter."""
    status_code = 400


class AbnormalFinishError(GenerationError):
    """Raised when generation stopped for a reason other than normal completion."""
    pass


class NonJSONResponseError(GenerationError):
    """Raised when the generated text does not parse as JSON."""
    pass


# =============================================================================
# EXCEPTION UTILITIES
# =============================================================================

def create_error_response(exception: PromptRelayException) -> Dict[str, Any]:
    """
    Create the JSON error body returned to callers.

    Args:
        exception: The exception to convert

    Returns:
        ``{"error": message}`` plus ``details`` when the exception carries any
    """
    response: Dict[str, Any] = {"error": exception.message}
    if exception.details is not None:
        response["details"] = exception.details
    return response

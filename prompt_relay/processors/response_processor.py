"""
Normalization of generateContent results into the relayed JSON value.
"""

import json
from typing import Any, Dict

from ..core.exceptions import (
    AbnormalFinishError,
    NoTextResponseError,
    NonJSONResponseError,
    SafetyBlockedError,
)
from ..core.logger import get_logger
from ..utils.text_utils import strip_code_fences, truncate_text

logger = get_logger(__name__)


NORMAL_FINISH_REASON = "STOP"

# Finish reasons reported to the caller as a content block (400) rather than a server fault
SAFETY_FINISH_REASONS = frozenset({
    "SAFETY",
    "BLOCKLIST",
    "PROHIBITED_CONTENT",
    "SPII",
})


def check_prompt_feedback(result: Dict[str, Any]) -> None:
    """Raise when the prompt itself was blocked and no candidates were produced."""
    if result.get("candidates"):
        return

    feedback = result.get("promptFeedback") or {}
    block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
    if block_reason:
        raise SafetyBlockedError(
            f"The prompt was blocked by the upstream safety filter ({block_reason}).",
            error_code=f"PROMPT_BLOCKED_{block_reason}",
            details=feedback
        )


def check_finish_reason(candidate: Dict[str, Any]) -> None:
    """
    Validate why generation stopped.

    A missing finish reason is accepted. Safety reasons raise
    :class:`SafetyBlockedError` with the candidate's safety ratings; any other
    reason besides ``STOP`` raises :class:`AbnormalFinishError`.
    """
    finish_reason = candidate.get("finishReason")
    if not finish_reason or finish_reason == NORMAL_FINISH_REASON:
        return

    if not isinstance(finish_reason, str):
        finish_reason = json.dumps(finish_reason)

    if finish_reason in SAFETY_FINISH_REASONS:
        raise SafetyBlockedError(
            "The response was blocked by the upstream safety filter.",
            error_code=finish_reason,
            details={
                "finishReason": finish_reason,
                "safetyRatings": candidate.get("safetyRatings", [])
            }
        )

    raise AbnormalFinishError(
        f"Generation stopped unexpectedly: {finish_reason}",
        error_code=finish_reason,
        details={"finishReason": finish_reason}
    )


def extract_candidate_text(result: Dict[str, Any]) -> str:
    """
    Pull ``candidates[0].content.parts[0].text`` out of a generateContent result.

    Finish reasons are checked first so that a blocked candidate, which
    usually has no text, is reported as a block rather than as missing text.
    """
    check_prompt_feedback(result)

    candidates = result.get("candidates")
    candidate = candidates[0] if isinstance(candidates, list) and candidates else None
    if not isinstance(candidate, dict):
        raise NoTextResponseError("No text response from API.", error_code="NO_CANDIDATES")

    check_finish_reason(candidate)

    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    first_part = parts[0] if isinstance(parts, list) and parts else None
    text = first_part.get("text") if isinstance(first_part, dict) else None

    if not isinstance(text, str) or not text.strip():
        raise NoTextResponseError("No text response from API.", error_code="NO_TEXT")

    return text


def parse_generated_json(text: str, strip_fences: bool = True) -> Any:
    """
    Parse generated text as a JSON document.

    Args:
        text: Text produced in JSON output mode
        strip_fences: Remove a surrounding markdown code fence first

    Returns:
        The decoded JSON value, unchanged

    Raises:
        NonJSONResponseError: The text is not valid JSON
    """
    candidate_text = strip_code_fences(text) if strip_fences else text

    try:
        return json.loads(candidate_text)
    except json.JSONDecodeError as e:
        logger.warning(f"Generated text is not valid JSON: {truncate_text(candidate_text)}")
        raise NonJSONResponseError(
            "The upstream API returned non-JSON text.",
            error_code="NON_JSON_RESPONSE",
            details=str(e)
        ) from e

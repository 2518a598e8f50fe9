"""
Data models for Prompt Relay.
"""

from .generation import (
    Content,
    GenerateContentRequest,
    GenerationConfig,
    JSON_MIME_TYPE,
    Part,
    PromptRequest,
    RelayResponse,
)

__all__ = [
    "Content",
    "GenerateContentRequest",
    "GenerationConfig",
    "JSON_MIME_TYPE",
    "Part",
    "PromptRequest",
    "RelayResponse"
]

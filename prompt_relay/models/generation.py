"""
Request, upstream payload and response models for the prompt relay.
Payload models serialize to the camelCase shape the Gemini API expects.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from ..core.config import GenerationSettings


JSON_MIME_TYPE = "application/json"


# =============================================================================
# Inbound request
# =============================================================================

class PromptRequest(BaseModel):
    """Body accepted by the relay endpoint."""

    prompt: StrictStr

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v):
        if not v.strip():
            raise ValueError("prompt must not be empty")
        return v


# =============================================================================
# Upstream payload
# =============================================================================

class Part(BaseModel):
    text: str


class Content(BaseModel):
    parts: List[Part]


class GenerationConfig(BaseModel):
    """Sampling block of a generateContent request."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: float
    top_k: int = Field(alias="topK")
    top_p: float = Field(alias="topP")
    max_output_tokens: int = Field(alias="maxOutputTokens")
    response_mime_type: Optional[str] = Field(default=None, alias="responseMimeType")

    @classmethod
    def from_settings(cls, generation: GenerationSettings) -> "GenerationConfig":
        return cls(
            temperature=generation.temperature,
            top_k=generation.top_k,
            top_p=generation.top_p,
            max_output_tokens=generation.max_output_tokens,
            response_mime_type=JSON_MIME_TYPE if generation.json_mode else None,
        )


class GenerateContentRequest(BaseModel):
    """Body of ``POST models/<model>:generateContent``."""

    model_config = ConfigDict(populate_by_name=True)

    contents: List[Content]
    generation_config: GenerationConfig = Field(alias="generationConfig")

    @classmethod
    def from_prompt(cls, prompt: str, generation: GenerationSettings) -> "GenerateContentRequest":
        return cls(
            contents=[Content(parts=[Part(text=prompt)])],
            generation_config=GenerationConfig.from_settings(generation),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation; unset optional fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Outbound response
# =============================================================================

class RelayResponse(BaseModel):
    """Platform-neutral HTTP response produced by the handler."""

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @classmethod
    def json_body(cls, status_code: int, content: Any, headers: Dict[str, str]) -> "RelayResponse":
        return cls(
            status_code=status_code,
            headers={**headers, "Content-Type": JSON_MIME_TYPE},
            body=json.dumps(content, ensure_ascii=False, separators=(",", ":")),
        )

    def json_content(self) -> Any:
        return json.loads(self.body)

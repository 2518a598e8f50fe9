"""
Configuration management for Prompt Relay.
Loads environment variables and provides centralized config access.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-09-2025"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GenerationSettings(BaseModel):
    """Sampling parameters sent with every generation request."""

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.7
    top_k: int = 1
    top_p: float = 1.0
    max_output_tokens: int = 2048
    json_mode: bool = True


class RelayConfig(BaseModel):
    """Immutable configuration injected into the prompt relay handler."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    base_url: str = DEFAULT_GEMINI_BASE_URL
    generation: GenerationSettings = GenerationSettings()
    strip_code_fences: bool = True
    timeout_seconds: Optional[float] = None
    cors_allow_origin: str = "*"

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # =============================================================================
    # APPLICATION SETTINGS
    # =============================================================================
    app_name: str = "Prompt Relay"
    version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # =============================================================================
    # GEMINI CONFIGURATION
    # =============================================================================
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_KEY", "GOOGLE_GEMINI_API_KEY"),
    )
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL

    @field_validator("gemini_api_key")
    @classmethod
    def normalize_api_key(cls, v):
        # A blank key is reported per request, not at startup
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("gemini_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    # =============================================================================
    # AI PROCESSING SETTINGS
    # =============================================================================
    ai_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    ai_top_k: int = Field(default=1, ge=1)
    ai_top_p: float = Field(default=1.0, ge=0.0, le=1.0)
    max_output_tokens: int = Field(default=2048, gt=0)
    json_mode: bool = True
    strip_code_fences: bool = True
    upstream_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    # =============================================================================
    # HTTP SETTINGS
    # =============================================================================
    cors_allow_origin: str = "*"

    # =============================================================================
    # COMPUTED PROPERTIES
    # =============================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    def generation_settings(self) -> GenerationSettings:
        return GenerationSettings(
            temperature=self.ai_temperature,
            top_k=self.ai_top_k,
            top_p=self.ai_top_p,
            max_output_tokens=self.max_output_tokens,
            json_mode=self.json_mode,
        )

    def relay_config(self) -> RelayConfig:
        """Build the handler configuration from the loaded settings."""
        return RelayConfig(
            api_key=self.gemini_api_key,
            gemini_model=self.gemini_model,
            base_url=self.gemini_base_url,
            generation=self.generation_settings(),
            strip_code_fences=self.strip_code_fences,
            timeout_seconds=self.upstream_timeout_seconds,
            cors_allow_origin=self.cors_allow_origin,
        )

    # =============================================================================
    # PYDANTIC SETTINGS CONFIG
    # =============================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# GLOBAL SETTINGS INSTANCE
# =============================================================================
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()


# =============================================================================
# CONFIGURATION UTILITIES
# =============================================================================
def validate_configuration(config: Optional[Settings] = None) -> dict:
    """
    Validate configuration settings and return status report.

    Args:
        config: Settings to inspect (loaded from the environment when omitted)

    Returns:
        dict: Configuration validation report
    """
    try:
        config = config or get_settings()

        status = {
            "valid": True,
            "errors": [],
            "warnings": [],
            "services": {
                "google_gemini": bool(config.gemini_api_key),
                "json_mode": config.json_mode,
                "strip_code_fences": config.strip_code_fences,
            }
        }

        if not config.gemini_api_key:
            status["valid"] = False
            status["errors"].append("GEMINI_KEY is not configured; every POST will fail with 500")

        if not config.json_mode:
            status["warnings"].append("JSON mode disabled; free-form replies will fail to parse")

        if config.cors_allow_origin == "*" and config.is_production:
            status["warnings"].append("CORS allows any origin in production")

        if config.is_production and config.debug:
            status["warnings"].append("DEBUG mode enabled in production")

        return status

    except Exception as e:
        return {
            "valid": False,
            "errors": [str(e)],
            "warnings": [],
            "services": {}
        }


def print_configuration_status():
    """Print a human-readable configuration status report."""
    status = validate_configuration()

    print(f"\n{'='*60}")
    print("PROMPT RELAY - CONFIGURATION STATUS")
    print(f"{'='*60}")

    if status["valid"]:
        print("[OK] Configuration: VALID")
    else:
        print("[ERROR] Configuration: INVALID")
        for error in status["errors"]:
            print(f"   [ERROR] {error}")

    print(f"\nService Status:")
    for service, enabled in status["services"].items():
        icon = "[OK]" if enabled else "[X]"
        print(f"   {icon} {service.replace('_', ' ').title()}")

    if status["warnings"]:
        print(f"\n[WARNING] Warnings:")
        for warning in status["warnings"]:
            print(f"   [WARNING] {warning}")

    print(f"\nEnvironment: {settings.environment.upper()}")
    print(f"Model: {settings.gemini_model}")
    print(f"Log Level: {settings.log_level}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    print_configuration_status()

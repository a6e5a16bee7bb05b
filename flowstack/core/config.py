"""Configuration management for FlowStack Proposal Engine."""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"

SCOUT_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
QWEN_MODEL = "qwen/qwen3-32b"
LLAMA_INSTANT_MODEL = "llama-3.1-8b-instant"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ===========================================
    # LLM Provider Configuration (Groq, OpenAI-compatible)
    # ===========================================
    GROQ_API_KEY: str = Field(default="", description="Groq API key")
    GROQ_API_URL: str = Field(
        default=DEFAULT_GROQ_API_URL,
        description="Chat-completions endpoint URL"
    )

    # ===========================================
    # Pass 1 - Full Report
    # ===========================================
    PASS1_MODELS: List[str] = Field(
        default=[SCOUT_MODEL, QWEN_MODEL, LLAMA_INSTANT_MODEL],
        description="Pass 1 models in fallback order"
    )
    PASS1_MAX_TOKENS: int = Field(default=1200, gt=0)
    PASS1_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    PASS1_TIMEOUT_MS: int = Field(default=25_000, gt=0)

    # ===========================================
    # Pass 2 - Executive Summary / Solution Polish
    # ===========================================
    PASS2_MODELS: List[str] = Field(
        default=[QWEN_MODEL, SCOUT_MODEL, LLAMA_INSTANT_MODEL],
        description="Pass 2 models in fallback order"
    )
    PASS2_MAX_TOKENS: int = Field(default=700, gt=0)
    PASS2_TEMPERATURE: float = Field(default=0.25, ge=0.0, le=2.0)
    PASS2_TIMEOUT_MS: int = Field(default=20_000, gt=0)

    # ===========================================
    # n8n Lead Webhook
    # ===========================================
    N8N_WEBHOOK_URL: str = Field(default="", description="n8n webhook URL for lead export")
    N8N_WEBHOOK_SECRET: str = Field(default="", description="Shared secret sent as x-flowstack-secret")
    WEBHOOK_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # ===========================================
    # Server Configuration
    # ===========================================
    DEBUG: bool = Field(default=True, description="Debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def provider(self) -> "ProviderConfig":
        """Provider credentials as passed to the model client."""
        return ProviderConfig(
            api_key=self.GROQ_API_KEY or None,
            api_url=self.GROQ_API_URL,
        )


class ProviderConfig(BaseModel):
    """Explicit provider configuration handed to the model client."""
    api_key: Optional[str] = Field(None, description="Bearer token; None when not configured")
    api_url: str = Field(DEFAULT_GROQ_API_URL, description="Chat-completions endpoint")

    model_config = ConfigDict(frozen=True)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

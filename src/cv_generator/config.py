"""Configuration management for CV Generator."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Path: config.py -> cv_generator/ -> src/ -> project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CV_GENERATOR_",
        env_file=".env.local",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # API keys (no prefix, standard env vars)
    together_api_key: str | None = Field(default=None, alias="TOGETHER_API_KEY")
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    anthropic_api_key: str | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    github_token: str | None = Field(default=None, alias="GITHUB_TOKEN")

    # Provider configuration
    provider: Literal["together", "ollama", "openai", "anthropic"] = "together"
    model: str | None = Field(
        default=None,
        description="Model ID; the provider default is used when unset",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, ge=1, le=32000)
    analysis_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Temperature for repository analysis prompts",
    )

    # Local model server
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # GitHub
    github_repo_count: int = Field(
        default=6,
        ge=1,
        le=20,
        description="Number of top-starred repositories turned into projects",
    )
    request_timeout: float = Field(default=60.0, gt=0, le=600)

    # Rendering
    fonts_dir: Path = Field(
        default=PROJECT_ROOT / "fonts",
        description="Directory holding NotoSans-Regular.ttf and NotoSans-Bold.ttf",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    def api_key_for(self, provider: str) -> str | None:
        """Return the API key configured for a provider, if any."""
        return {
            "together": self.together_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }.get(provider)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

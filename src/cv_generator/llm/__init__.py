"""LLM provider abstraction."""

from cv_generator.llm.base import (
    ChatModelProvider,
    LLMProvider,
    get_llm_provider,
    provider_from_settings,
)

__all__ = ["ChatModelProvider", "LLMProvider", "get_llm_provider", "provider_from_settings"]

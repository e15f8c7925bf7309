"""Base LLM provider abstraction."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from cv_generator.exceptions import LLMError

if TYPE_CHECKING:
    from cv_generator.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant that provides accurate and concise information."

# Default timeout in seconds for API requests
DEFAULT_TIMEOUT = 120.0
DEFAULT_MAX_RETRIES = 1

DEFAULT_MODELS = {
    "together": "meta-llama/Llama-3.3-70B-Instruct-Turbo-Free",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-5-20250929",
    "ollama": "llama3.2",
}


class LLMProvider(ABC):
    """A text completion backend.

    Implementations turn one prompt into one completion string and raise
    ``LLMError`` when the backend cannot answer.
    """

    name: str = "llm"

    @abstractmethod
    def complete(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Return the model's completion for ``prompt``."""


class ChatModelProvider(LLMProvider):
    """Provider backed by a LangChain chat model.

    Implements model caching to avoid repeated instantiation overhead: one
    chat model is created per (temperature, max_tokens) pair and reused.
    """

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.model = model
        self.api_key = api_key
        self.default_temperature = temperature
        self.default_max_tokens = max_tokens
        self.timeout = timeout
        self.max_retries = max_retries
        self.system_prompt = system_prompt
        self._chat_models: dict[tuple[float, int], BaseChatModel] = {}

    def get_chat_model(
        self, temperature: float | None = None, max_tokens: int | None = None
    ) -> BaseChatModel:
        """Get a cached chat model for the given sampling settings."""
        key = (
            self.default_temperature if temperature is None else temperature,
            self.default_max_tokens if max_tokens is None else max_tokens,
        )
        if key not in self._chat_models:
            self._chat_models[key] = self._create_chat_model(*key)
        return self._chat_models[key]

    @abstractmethod
    def _create_chat_model(self, temperature: float, max_tokens: int) -> BaseChatModel:
        """Create a new chat model instance. Override in subclasses."""

    def complete(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        model = self.get_chat_model(temperature, max_tokens)
        messages = [SystemMessage(content=self.system_prompt), HumanMessage(content=prompt)]
        try:
            response = model.invoke(messages)
        except Exception as e:
            raise LLMError(f"{self.name} request failed: {e}") from e

        text = _message_text(response.content)
        if not text.strip():
            raise LLMError(f"{self.name} returned an empty completion")
        logger.debug(f"{self.name} completion: {len(text)} characters")
        return text


def _message_text(content: Any) -> str:
    """Flatten LangChain message content (a string or a list of parts)."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def get_llm_provider(
    provider: str,
    model: str | None = None,
    api_key: str | None = None,
    **kwargs: Any,
) -> LLMProvider:
    """Factory function to get an LLM provider instance.

    Extra keyword arguments go to the provider's constructor (``temperature``,
    ``max_tokens``, ``timeout``, ``base_url`` for Ollama...).
    """
    model = model or DEFAULT_MODELS.get(provider)
    if provider == "together":
        from cv_generator.llm.together import TogetherProvider

        return TogetherProvider(model=model, api_key=api_key, **kwargs)
    elif provider == "openai":
        from cv_generator.llm.openai import OpenAIProvider

        return OpenAIProvider(model=model, api_key=api_key, **kwargs)
    elif provider == "anthropic":
        from cv_generator.llm.anthropic import AnthropicProvider

        return AnthropicProvider(model=model, api_key=api_key, **kwargs)
    elif provider == "ollama":
        from cv_generator.llm.ollama import OllamaProvider

        return OllamaProvider(model=model, **kwargs)
    else:
        raise ValueError(f"Unknown provider: {provider}")


def provider_from_settings(
    settings: "Settings", provider: str | None = None, model: str | None = None
) -> LLMProvider:
    """Build the configured provider, letting ``provider``/``model`` override settings."""
    name = provider or settings.provider
    if name == "ollama":
        return get_llm_provider(
            name,
            model=model or settings.model or settings.ollama_model,
            base_url=settings.ollama_base_url,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
        )
    return get_llm_provider(
        name,
        model=model or settings.model,
        api_key=settings.api_key_for(name),
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout=settings.request_timeout,
    )

"""Anthropic Claude LLM provider."""

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel

from cv_generator.llm.base import DEFAULT_MODELS, ChatModelProvider

DEFAULT_MAX_RETRIES = 3  # Handles transient connection errors


class AnthropicProvider(ChatModelProvider):
    """Anthropic Claude provider with model caching."""

    name = "anthropic"

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        **kwargs,
    ):
        super().__init__(
            model=model or DEFAULT_MODELS["anthropic"],
            api_key=api_key,
            max_retries=max_retries,
            **kwargs,
        )

    def _create_chat_model(self, temperature: float, max_tokens: int) -> BaseChatModel:
        return ChatAnthropic(
            model=self.model,
            api_key=self.api_key,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

"""OpenAI LLM provider."""

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from cv_generator.llm.base import DEFAULT_MODELS, ChatModelProvider


class OpenAIProvider(ChatModelProvider):
    """OpenAI GPT provider.

    Without an explicit key the OpenAI client falls back to the
    ``OPENAI_API_KEY`` environment variable.
    """

    name = "openai"

    def __init__(self, model: str | None = None, api_key: str | None = None, **kwargs):
        super().__init__(model=model or DEFAULT_MODELS["openai"], api_key=api_key, **kwargs)

    def _create_chat_model(self, temperature: float, max_tokens: int) -> BaseChatModel:
        return ChatOpenAI(
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

"""Together AI provider (OpenAI-compatible chat completions)."""

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from cv_generator.exceptions import LLMError
from cv_generator.llm.base import DEFAULT_MODELS, ChatModelProvider

TOGETHER_BASE_URL = "https://api.together.xyz/v1"


class TogetherProvider(ChatModelProvider):
    """Hosted open-weight models served by Together AI."""

    name = "together"

    def __init__(self, model: str | None = None, api_key: str | None = None, **kwargs):
        if not api_key:
            raise LLMError("TOGETHER_API_KEY is not set")
        super().__init__(model=model or DEFAULT_MODELS["together"], api_key=api_key, **kwargs)

    def _create_chat_model(self, temperature: float, max_tokens: int) -> BaseChatModel:
        return ChatOpenAI(
            model=self.model,
            api_key=self.api_key,
            base_url=TOGETHER_BASE_URL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

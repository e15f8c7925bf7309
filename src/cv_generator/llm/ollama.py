"""Local models served by Ollama."""

import json
import logging

import httpx

from cv_generator.exceptions import LLMError
from cv_generator.llm.base import DEFAULT_MODELS, DEFAULT_TIMEOUT, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_TOP_P = 0.9


class OllamaProvider(LLMProvider):
    """Streaming completions from a local Ollama server.

    ``/api/generate`` answers with one JSON object per line; the ``response``
    fields are concatenated until a line reports ``done``.
    """

    name = "ollama"

    def __init__(
        self,
        model: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.7,
        top_p: float = DEFAULT_TOP_P,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.model = model or DEFAULT_MODELS["ollama"]
        self.base_url = base_url.rstrip("/")
        self.default_temperature = temperature
        self.top_p = top_p
        self.timeout = timeout
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def complete(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        options: dict[str, float | int] = {
            "temperature": self.default_temperature if temperature is None else temperature,
            "top_p": self.top_p,
        }
        if max_tokens is not None:
            options["num_predict"] = max_tokens
        payload = {"model": self.model, "prompt": prompt, "stream": True, "options": options}

        chunks: list[str] = []
        try:
            with self._client.stream("POST", "/api/generate", json=payload) as response:
                if response.status_code != 200:
                    response.read()
                    raise LLMError(
                        f"Ollama returned HTTP {response.status_code}: {response.text[:200]}"
                    )
                for line in response.iter_lines():
                    if not line.strip():
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        logger.warning(f"Skipping malformed Ollama stream line: {line[:80]!r}")
                        continue
                    if data.get("error"):
                        raise LLMError(f"Ollama error: {data['error']}")
                    chunks.append(data.get("response", ""))
                    if data.get("done"):
                        break
        except httpx.HTTPError as e:
            raise LLMError(f"Could not reach Ollama at {self.base_url}: {e}") from e

        text = "".join(chunks)
        if not text.strip():
            raise LLMError("Ollama returned an empty completion")
        return text

    def list_models(self) -> list[str]:
        """Names of the models installed on the server."""
        try:
            response = self._client.get("/api/tags")
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LLMError(f"Ollama returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LLMError(f"Could not reach Ollama at {self.base_url}: {e}") from e

        return [model["name"] for model in response.json().get("models", []) if model.get("name")]

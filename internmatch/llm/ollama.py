"""Ollama local LLM provider (native HTTP API)."""

import logging

import requests

from internmatch.core.config import LLMConfig
from internmatch.llm.base import SYSTEM_PROMPT, GenerationOptions, LLMProvider

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """LLM provider talking to a local Ollama instance over ``/api/*``.

    A single request per call: no retries, no streaming.
    """

    def __init__(
        self,
        config: LLMConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(config)
        self._session = session or requests.Session()

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "llama2"

    @property
    def env_var(self) -> None:
        return None

    def list_models(self, timeout: float | None = None) -> list[str]:
        response = self._session.get(
            f"{self.config.base_url}/api/tags",
            headers={"Content-Type": "application/json"},
            timeout=timeout or self.config.health_timeout_s,
        )
        response.raise_for_status()
        models = response.json().get("models") or []
        return [m["name"] for m in models if isinstance(m, dict) and "name" in m]

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        options: GenerationOptions | None = None,
        timeout: float | None = None,
    ) -> str:
        use_model = model or self.model
        opts = options or GenerationOptions.from_config(self.config)

        payload: dict[str, object] = {
            "model": use_model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": opts.temperature,
                "num_predict": opts.max_tokens,
                "top_p": opts.top_p,
                "repeat_penalty": opts.repeat_penalty,
            },
        }
        payload["system"] = system if system is not None else SYSTEM_PROMPT

        logger.info("Sending prompt to Ollama (%s)...", use_model)
        response = self._session.post(
            f"{self.config.base_url}/api/generate",
            json=payload,
            timeout=timeout or self.config.timeout_s,
        )
        response.raise_for_status()

        data = response.json()
        if "response" not in data:
            msg = "Ollama response missing 'response' field"
            raise ValueError(msg)
        return str(data["response"])

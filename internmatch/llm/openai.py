"""OpenAI LLM provider."""

import logging
import os
from typing import Any

from internmatch.llm.base import SYSTEM_PROMPT, GenerationOptions, LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"

    def _client(self, timeout: float) -> Any:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            msg = "OPENAI_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for OpenAI ranking. "
                "Install with: pip install 'internship-match-engine[openai]'"
            )
            raise ImportError(msg) from None

        return openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def list_models(self, timeout: float | None = None) -> list[str]:
        client = self._client(timeout or self.config.health_timeout_s)
        return [m.id for m in client.models.list()]

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        options: GenerationOptions | None = None,
        timeout: float | None = None,
    ) -> str:
        client = self._client(timeout or self.config.timeout_s)
        use_model = model or self.model
        use_system = system if system is not None else SYSTEM_PROMPT
        opts = options or GenerationOptions.from_config(self.config)

        logger.info("Sending prompt to OpenAI API (%s)...", use_model)
        response = client.chat.completions.create(
            model=use_model,
            messages=[
                {"role": "system", "content": use_system},
                {"role": "user", "content": prompt},
            ],
            temperature=opts.temperature,
            max_tokens=opts.max_tokens,
            top_p=opts.top_p,
        )

        return response.choices[0].message.content or ""

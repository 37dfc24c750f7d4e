"""Anthropic Claude LLM provider."""

import logging
import os
from typing import Any

from internmatch.llm.base import SYSTEM_PROMPT, GenerationOptions, LLMProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """LLM provider using the Anthropic Claude API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def _client(self, timeout: float) -> Any:
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            msg = "ANTHROPIC_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for Claude ranking. "
                "Install with: pip install 'internship-match-engine[anthropic]'"
            )
            raise ImportError(msg) from None

        return anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)

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

        logger.info("Sending prompt to Anthropic API (%s)...", use_model)
        message = client.messages.create(
            model=use_model,
            max_tokens=opts.max_tokens,
            temperature=opts.temperature,
            top_p=opts.top_p,
            system=use_system,
            messages=[{"role": "user", "content": prompt}],
        )

        return message.content[0].text  # type: ignore[no-any-return]

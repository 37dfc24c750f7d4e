"""Abstract base class for text-generation providers and shared options."""

import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel

from internmatch.core.config import LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI career counselor specializing in internship recommendations "
    "for Indian students. Answer precisely and follow the requested output format."
)


class GenerationOptions(BaseModel):
    """Sampling parameters sent with a single completion request."""

    temperature: float = 0.3
    max_tokens: int = 2000
    top_p: float = 0.9
    repeat_penalty: float = 1.1

    @classmethod
    def from_config(cls, config: LLMConfig) -> "GenerationOptions":
        return cls(
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            top_p=config.top_p,
            repeat_penalty=config.repeat_penalty,
        )


class LLMProvider(ABC):
    """Base class that every text-generation provider must implement."""

    def __init__(self, config: LLMConfig | None = None) -> None:
        self.config = config or LLMConfig()

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'ollama')."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    @property
    def model(self) -> str:
        """Configured model, falling back to the provider default."""
        return self.config.model or self.default_model

    @abstractmethod
    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        options: GenerationOptions | None = None,
        timeout: float | None = None,
    ) -> str:
        """Send a prompt and return the raw completion text.

        Args:
            prompt: The full user prompt.
            model: Override the configured model. None uses the configured one.
            system: Optional system prompt.
            options: Sampling parameters. None derives them from the config.
            timeout: Request timeout in seconds. None uses ``config.timeout_s``.

        Raises:
            Any transport, HTTP-status or SDK error. Callers decide how to degrade.
        """

    @abstractmethod
    def list_models(self, timeout: float | None = None) -> list[str]:
        """Return model names reported by the service. Raises on failure."""

    def ping(self, timeout: float | None = None) -> bool:
        """Health probe: True if the service answers. Never raises."""
        try:
            self.list_models(timeout=timeout or self.config.health_timeout_s)
        except Exception:
            logger.warning("%s health check failed", self.provider_id, exc_info=True)
            return False
        return True

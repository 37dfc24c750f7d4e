"""Text-generation provider registry with lazy loading.

Usage:
    from internmatch.llm import get_provider

    provider = get_provider("ollama", settings.llm)
    if provider.ping():
        raw = provider.complete(prompt)
"""

from __future__ import annotations

import importlib

from internmatch.core.config import LLMConfig
from internmatch.llm.base import GenerationOptions, LLMProvider

__all__ = ["GenerationOptions", "LLMProvider", "available_providers", "get_provider"]

# Lazy registry: maps provider name → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("internmatch.llm.anthropic", "AnthropicProvider"),
    "ollama": ("internmatch.llm.ollama", "OllamaProvider"),
    "openai": ("internmatch.llm.openai", "OpenAIProvider"),
}


def get_provider(name: str, config: LLMConfig | None = None) -> LLMProvider:
    """Instantiate and return a provider by name.

    Args:
        name: Provider identifier (anthropic, ollama, openai).
        config: Endpoint, model and sampling settings. None uses defaults.

    Returns:
        An LLMProvider instance.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls(config)  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)

"""Configuration models and YAML loader for the internship match engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class LLMConfig(BaseModel):
    """External text-generation service used for reranking."""

    enabled: bool = True
    provider: str = "ollama"
    base_url: str = "http://localhost:11434"
    model: str | None = None
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, ge=1)
    top_p: float = Field(default=0.9, ge=0.0, le=1.0)
    repeat_penalty: float = Field(default=1.1, ge=0.0)
    timeout_s: float = Field(default=30.0, gt=0.0)
    health_timeout_s: float = Field(default=5.0, gt=0.0)

    @field_validator("provider")
    @classmethod
    def provider_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "provider must not be empty"
            raise ValueError(msg)
        return v.strip().lower()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class RecommendationConfig(BaseModel):
    """Ranking, caching and fairness knobs."""

    fairness_enabled: bool = False
    cache_validity_s: float = Field(default=300.0, ge=0.0)
    candidate_limit: int = Field(default=50, ge=1)
    prompt_limit: int = Field(default=20, ge=1)
    top_n: int = Field(default=10, ge=1)
    fallback_size: int = Field(default=5, ge=1)
    capacity_ratio_threshold: float = Field(default=0.2, ge=0.0, le=1.0)
    capacity_penalty_factor: float = Field(default=0.85, ge=0.0, le=1.0)


class CatalogConfig(BaseModel):
    """Where the internship catalog comes from."""

    path: str | None = None


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

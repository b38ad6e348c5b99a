"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``slanger.toml`` only holds
overrides. An empty or missing file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveInt

from slanger.domain.types import OperationName


class CacheConfig(BaseModel):
    """[cache] section."""

    model_config = {"frozen": True}

    redis_url: str | None = None
    key_prefix: str = "slanger:llm"
    connect_timeout: float = Field(default=2.0, gt=0)
    ttl_overrides: dict[OperationName, PositiveInt] = Field(default_factory=dict)


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    paradigm_sample_size: int = Field(default=50, ge=0)
    minimum_vocabulary: int = Field(default=200, ge=0)


class PruneConfig(BaseModel):
    """[prune] section."""

    model_config = {"frozen": True}

    world_char_budget: int = Field(default=500, ge=0)

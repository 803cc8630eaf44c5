"""Configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables.

    The estimation constants below (exit multiple, budget ratio, ROE and rate
    base multiples) are dashboard heuristics, not finance theory.
    """

    numeric_backend: str = "numpy"
    fallback_backend: str = "native"
    compute_timeout_seconds: float = Field(default=5.0, gt=0)

    exit_multiple: float = Field(default=15.0, gt=0)
    budget_default_ratio: float = Field(default=0.95, gt=0)

    integrity_penalty: int = Field(default=5, ge=0)
    integrity_score_floor: int = Field(default=0, ge=0, le=100)
    min_plausible_year: int = 2000
    max_plausible_year: int = 2030

    roe_equity_multiple: float = Field(default=5.0, gt=0)
    rate_base_multiple: float = Field(default=1.5, gt=0)

    model_config = {
        "env_prefix": "FINMETRICS_",
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings for the current process."""
    return Settings()

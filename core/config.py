"""Deployment settings, read from ``RENTWISE_*`` environment variables."""
from __future__ import annotations

import sys
from functools import lru_cache
from typing import Dict

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rentwise.presets import ANNUAL_DISCOUNT_RATE, DEFAULT_CREDIT_SCORE, VALID_COUPONS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RENTWISE_", extra="ignore")

    # -- Draft storage --
    draft_file: str = "application_draft.json"
    draft_key: str = "applicationFormData"
    draft_debounce_seconds: float = Field(
        default=1.0,
        description="Quiet period after the last edit before the draft is written.",
    )

    # -- Logging --
    log_level: str = "INFO"

    # -- Pricing --
    valid_coupons: Dict[str, float] = Field(default_factory=lambda: dict(VALID_COUPONS))
    annual_discount_rate: float = ANNUAL_DISCOUNT_RATE
    default_credit_score: int = Field(
        default=DEFAULT_CREDIT_SCORE,
        description="Score used for the deposit alternative when no screening score is known.",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def setup_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single stderr sink at ``level``."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
    )

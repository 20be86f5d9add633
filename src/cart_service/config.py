"""
Application settings, read from the environment (prefix ``CART_SERVICE_``)
and an optional ``.env`` file.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CART_SERVICE_", env_file=".env", extra="ignore"
    )

    environment: str = "development"
    log_level: Optional[str] = None

    # cart operations fail once this many milliseconds have passed between steps
    operation_timeout_ms: int = Field(default=5000, gt=0)

    default_tax_rate: Decimal = Field(default=Decimal("0.10"), ge=0)
    # JSON in the environment, e.g. '{"JP": "0.10", "US": "0.07"}'
    tax_rates: Dict[str, Decimal] = Field(default_factory=dict)
    currency: str = "JPY"

    seed_demo_data: bool = True

    host: str = "0.0.0.0"
    port: int = 8000


def get_settings() -> Settings:
    return Settings()

"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All deployment-specific values come from environment variables or .env
    - get_settings() is cached (lru_cache): single instance per process
    - Addresses are validated and lower-cased before the core sees them

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env support
    - Defaults provided for every setting: `vrf_mode=seeded` and
      `payment_rail_mode=memory` run without any external collaborator
"""

import re
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://eggs:eggs@db:5432/eastereggs"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    persist_ledger: bool = True

    # Contract
    owner_address: str = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"

    # Randomness coordinator
    vrf_mode: Literal["seeded", "http"] = "seeded"
    vrf_coordinator_url: str = "http://localhost:8545/vrf"
    vrf_coordinator_address: str = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
    vrf_seed: int = 0
    vrf_subscription_fund_amount: int = 10**18
    gas_lane: str = (
        "0xd89b2bf150e3b9e13446986e571fb9cab24b13cea0a43ea20a6049a85cc807cc"
    )
    subscription_id: int = 0
    callback_gas_limit: int = 500_000

    # Value-transfer rail
    payment_rail_mode: Literal["memory", "http"] = "memory"
    payment_rail_url: str = "http://localhost:8545/payments"

    # Outbound HTTP resilience
    http_timeout_seconds: int = 30
    http_max_retries: int = 3
    http_base_delay_ms: int = 500
    http_max_delay_ms: int = 10_000

    @field_validator("owner_address", "vrf_coordinator_address")
    @classmethod
    def normalise_address(cls, v: str) -> str:
        if not ADDRESS_PATTERN.match(v):
            raise ValueError(f"not a 20-byte hex address: {v!r}")
        return v.lower()

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

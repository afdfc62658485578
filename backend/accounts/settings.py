"""Persistence and dependency configuration via environment variables."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings


class PersistenceMode(StrEnum):
    MEMORY = "memory"
    DURABLE = "durable"


class AccountsSettings(BaseSettings):
    model_config = {"env_prefix": "ACCOUNTS_"}

    # Chosen once at startup; the process never switches backends.
    persistence_mode: PersistenceMode = PersistenceMode.MEMORY

    # SQLite database file path (durable mode only)
    database_path: str = Field(default="backend/data/accounts.db", min_length=1)

    # Empty string runs durable mode without a cache
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float = Field(default=2.0, gt=0)

    health_latency_threshold_ms: int = Field(default=100, ge=1)
    health_probe_timeout_seconds: float = Field(default=2.0, gt=0)

    # Messaging is a no-op stand-in; enabling it only affects lifecycle and health output
    messaging_enabled: bool = False
    messaging_nameserver: str = "127.0.0.1:9876"
    messaging_producer_group: str = "accounts-producer"

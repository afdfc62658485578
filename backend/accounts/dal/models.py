"""Player record and its read-only projection."""

import json
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

_CENTS = Decimal("0.01")


class PlayerView(BaseModel, frozen=True):
    """Public projection of a player. Never carries the secret."""

    id: int
    username: str
    balance: Decimal
    created_at: datetime | None = None


class Player(BaseModel):
    """Player account as stored by a repository backend.

    ``id`` and the timestamps are assigned by the backend on creation; any
    value supplied by the caller is overwritten. ``secret`` is excluded from
    every dump so it cannot leak into responses or logs.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int | None = Field(default=None, gt=0)
    username: str = Field(min_length=1)
    secret: SecretStr = Field(exclude=True)
    balance: Decimal = Decimal("0.00")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("username")
    @classmethod
    def _username_encodable(cls, value: str) -> str:
        value.encode("utf-8")
        return value

    @field_validator("secret")
    @classmethod
    def _secret_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("secret must not be empty")
        value.get_secret_value().encode("utf-8")
        return value

    @field_validator("balance")
    @classmethod
    def _quantize_balance(cls, value: Decimal) -> Decimal:
        return value.quantize(_CENTS, rounding=ROUND_HALF_UP)

    def to_view(self) -> PlayerView:
        if self.id is None:
            raise ValueError("player has not been persisted yet")
        return PlayerView(
            id=self.id,
            username=self.username,
            balance=self.balance,
            created_at=self.created_at,
        )

    def to_cache_json(self) -> str:
        """Serialize for the internal cache, secret included."""
        data = self.model_dump(mode="json")
        data["secret"] = self.secret.get_secret_value()
        return json.dumps(data)

    @classmethod
    def from_cache_json(cls, raw: str | bytes) -> Self:
        """Inverse of to_cache_json. Raises ValueError on malformed payloads."""
        return cls.model_validate_json(raw)

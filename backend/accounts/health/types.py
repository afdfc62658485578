"""Health status values reported per dependency and for the service as a whole."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class HealthState(StrEnum):
    UP = "UP"
    DEGRADED = "DEGRADED"
    DOWN = "DOWN"
    DISABLED = "DISABLED"


@dataclass(frozen=True, slots=True)
class ComponentStatus:
    status: HealthState
    latency_ms: float | None = None
    message: str | None = None
    details: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value}
        if self.latency_ms is not None:
            data["latency_ms"] = round(self.latency_ms, 3)
        if self.message:
            data["message"] = self.message
        if self.details:
            data["details"] = self.details
        return data


@dataclass(frozen=True, slots=True)
class HealthReport:
    status: HealthState
    components: dict[str, ComponentStatus]
    uptime_seconds: float = 0.0
    system: dict[str, Any] = field(default_factory=dict)

    @property
    def is_up(self) -> bool:
        return self.status == HealthState.UP

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "uptime_seconds": round(self.uptime_seconds, 3),
            "system": self.system,
            "components": {name: c.to_dict() for name, c in self.components.items()},
        }

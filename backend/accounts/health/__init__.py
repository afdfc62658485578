"""Aggregated health status for the persistence backend and its dependencies."""

from accounts.health.checker import HealthChecker, aggregate_status
from accounts.health.types import ComponentStatus, HealthReport, HealthState

__all__ = ["ComponentStatus", "HealthChecker", "HealthReport", "HealthState", "aggregate_status"]

"""Failure taxonomy shared by every repository backend."""

from enum import StrEnum


class ErrorKind(StrEnum):
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class RepositoryError(Exception):
    """Base class for real repository failures (never used for "not found")."""

    kind: ErrorKind = ErrorKind.INTERNAL


class PlayerConflictError(RepositoryError):
    """Username already belongs to a live player."""

    kind = ErrorKind.CONFLICT

    def __init__(self, username: str) -> None:
        super().__init__(f"Username '{username}' already exists")
        self.username = username


class StoreUnavailableError(RepositoryError):
    """Store unreachable, disconnected, or the request deadline expired."""

    kind = ErrorKind.UNAVAILABLE


class RepositoryInternalError(RepositoryError):
    """Unexpected driver failure or a record that cannot be decoded."""

    kind = ErrorKind.INTERNAL

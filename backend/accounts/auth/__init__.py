"""Placeholder authentication for player accounts."""

from accounts.auth.service import PLACEHOLDER_TOKEN_PREFIX, AuthError, AuthService, LoginResult

__all__ = ["PLACEHOLDER_TOKEN_PREFIX", "AuthError", "AuthService", "LoginResult"]

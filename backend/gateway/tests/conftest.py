"""Shared fixtures for gateway tests."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from accounts.bootstrap import build_dependencies
from accounts.settings import AccountsSettings, PersistenceMode
from gateway.server.app import create_app
from gateway.server.settings import GatewayServerSettings


@pytest.fixture
def gateway_settings() -> GatewayServerSettings:
    return GatewayServerSettings(log_dir=None, request_timeout_seconds=5.0)


@pytest.fixture
def memory_app(gateway_settings):
    deps = build_dependencies(AccountsSettings(persistence_mode=PersistenceMode.MEMORY, messaging_enabled=False))
    return create_app(settings=gateway_settings, dependencies=deps)


@pytest.fixture
def client(memory_app):
    with TestClient(memory_app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def durable_app(gateway_settings, tmp_path):
    settings = AccountsSettings(
        persistence_mode=PersistenceMode.DURABLE,
        database_path=str(tmp_path / "accounts.db"),
        redis_url="",
        messaging_enabled=False,
    )
    return create_app(settings=gateway_settings, dependencies=build_dependencies(settings))


@pytest.fixture
def durable_client(durable_app):
    with TestClient(durable_app, raise_server_exceptions=False) as c:
        yield c

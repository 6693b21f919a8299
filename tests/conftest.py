"""Pytest configuration and fixtures."""

import os

# The rate limiter is process-wide and reads this once, at import
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from tinyapp.core.setting import Settings
from tinyapp.main import create_app
from tinyapp.services.link_store import LinkStore
from tinyapp.services.user_directory import UserDirectory

# bcrypt's minimum cost keeps registration fast in tests
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        SECRET_KEY="test-secret",
        BCRYPT_ROUNDS=TEST_BCRYPT_ROUNDS,
        BASE_URL="http://testserver",
    )


@pytest.fixture
def link_store() -> LinkStore:
    return LinkStore()


@pytest.fixture
def user_directory() -> UserDirectory:
    return UserDirectory(bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def app(test_settings, link_store, user_directory):
    """Create a fresh app with empty stores for each test."""
    return create_app(test_settings, link_store=link_store, user_directory=user_directory)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def other_client(app) -> TestClient:
    """A second browser session against the same app."""
    return TestClient(app)


@pytest.fixture
def anyio_backend():
    return "asyncio"


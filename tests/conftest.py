"""Shared pytest fixtures for Logosmith tests."""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from logosmith.api.main import create_app
from logosmith.core.config import LogosmithConfig

TEST_API_KEY = "sk-test-0123456789"


def mock_image_response(url: str | None = "https://images.example.com/logo.png") -> MagicMock:
    """Create a mock OpenAI images response carrying one URL."""
    data_item = MagicMock()
    data_item.url = url
    response = MagicMock()
    response.data = [data_item]
    return response


def make_openai_client(side_effect=None, response: MagicMock | None = None) -> MagicMock:
    """Build a mock AsyncOpenAI client with images.generate as AsyncMock."""
    mock_client = MagicMock()
    mock_client.images = MagicMock()
    mock_client.images.generate = AsyncMock()
    if side_effect is not None:
        mock_client.images.generate.side_effect = side_effect
    else:
        mock_client.images.generate.return_value = response or mock_image_response()
    return mock_client


def make_config(**overrides) -> LogosmithConfig:
    """Create a configuration that ignores any .env file on disk."""
    values = {
        "openai_api_key": TEST_API_KEY,
        "rate_limit_enabled": False,
    }
    values.update(overrides)
    return LogosmithConfig(_env_file=None, **values)


@pytest.fixture
def image_response():
    """Factory for mock OpenAI image responses."""
    return mock_image_response


@pytest.fixture
def client_factory():
    """Factory for mock AsyncOpenAI clients."""
    return make_openai_client


@pytest.fixture
def config_factory():
    """Factory for configurations with per-test overrides."""
    return make_config


@pytest.fixture
def test_config() -> LogosmithConfig:
    """Configuration with the rate limiter switched off.

    Returns:
        LogosmithConfig instance for testing
    """
    return make_config()


@pytest.fixture
def openai_client() -> MagicMock:
    """Mock provider client; every call returns the same URL by default."""
    return make_openai_client()


@pytest.fixture
def app(test_config: LogosmithConfig, openai_client: MagicMock) -> FastAPI:
    """Application wired to the mock provider client.

    The lifespan keeps a client that is already on ``app.state``.
    """
    application = create_app(test_config)
    application.state.openai_client = openai_client
    return application


@pytest.fixture
def test_client(app: FastAPI) -> Generator[TestClient, None, None]:
    """TestClient with the lifespan running.

    Yields:
        TestClient for the application

    Cleanup:
        Lifespan shutdown runs when the context exits
    """
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client

"""Shared fixtures for the test suite."""

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from tests.fakes import FakeProvider, FakeWeatherClient


@pytest.fixture
def settings():
    return Settings(anthropic_api_key="test-key")


@pytest.fixture
def weather_client():
    return FakeWeatherClient()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def client(settings, provider, weather_client):
    app = create_app(settings, completion_provider=provider, weather_client=weather_client)
    with TestClient(app) as test_client:
        yield test_client

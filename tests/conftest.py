"""Shared fixtures for switchyard tests."""

import pytest

from switchyard.app import App
from switchyard.config import ServerConfig


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(host="localhost", port=5000, url="http://localhost:5000")


@pytest.fixture
def app(config: ServerConfig) -> App:
    return App(config)

"""Fixtures for exercising the HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture
def app(memory_store, sound_player):
    return create_app(store=memory_store, sound_player=sound_player, start_scheduler=False)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client

"""
Pytest configuration and shared fixtures for the signup API tests.
"""
import json

import pytest
from fastapi.testclient import TestClient

from main import app
from utils.email_store import email_store


@pytest.fixture
def store_path(tmp_path, monkeypatch):
    """Point the shared email store at a fresh file for each test."""
    path = tmp_path / "emails.json"
    monkeypatch.setattr(email_store, "path", str(path))
    return path


@pytest.fixture
def client(store_path):
    # Context manager runs the startup hook, which creates the store file
    with TestClient(app) as c:
        yield c


@pytest.fixture
def read_store(store_path):
    def _read():
        return json.loads(store_path.read_text(encoding="utf-8"))
    return _read

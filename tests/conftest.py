# tests/conftest.py
"""Shared fixtures: a throwaway data dir, its route table, the store and the app."""
from __future__ import annotations
import json

import pytest

from iberiava.config import Config, config
from iberiava.store import CollectionStore

ROUTES = ["MAD", "BCN", "LHR", "JFK"]
AIRCRAFT = ["A350", "A320", "B757", "B727"]


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    d = tmp_path / "data"
    d.mkdir()
    (d / "routes.json").write_text(json.dumps([{"code": c} for c in ROUTES]))
    monkeypatch.setattr(config, "DATA_DIR", str(d))
    monkeypatch.setattr(config, "ROUTES_FILE", str(d / "routes.json"))
    monkeypatch.setattr(config, "AIRCRAFT", tuple(AIRCRAFT))
    monkeypatch.setattr(config, "RATELIMIT_ENABLED", False)
    return d


@pytest.fixture
def store(data_dir):
    return CollectionStore(str(data_dir))


@pytest.fixture
def app_config(data_dir):
    return Config(
        DATA_DIR=str(data_dir),
        ROUTES_FILE=str(data_dir / "routes.json"),
        AIRCRAFT=tuple(AIRCRAFT),
        RATELIMIT_ENABLED=False,
    )


@pytest.fixture
def app(app_config):
    from iberiava.app import create_app

    app = create_app(app_config)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in(client):
    """Client with a Discord user already in the session."""

    def _sign_in(user_id="u1", username="pilot1"):
        with client.session_transaction() as sess:
            sess["user"] = {"id": user_id, "username": username}
        return client

    return _sign_in

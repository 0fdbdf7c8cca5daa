from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from whiskey_recs.analytics.store import EventLog
from whiskey_recs.app import create_app
from whiskey_recs.auth.users import CredentialStore
from whiskey_recs.catalog.data_store import CatalogStore
from whiskey_recs.llm.config import LLMConfig


@pytest.fixture
def store() -> CatalogStore:
    return CatalogStore.from_seed()


@pytest.fixture(scope="session")
def credentials() -> CredentialStore:
    # bcrypt hashing is slow; one seeded credential store serves every test
    return CredentialStore.seeded()


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def client(store, credentials, events) -> TestClient:
    app = create_app(
        store=store, credentials=credentials, events=events, llm=LLMConfig(api_key="", enabled=False),
    )
    return TestClient(app)


@pytest.fixture
def login(client):
    def _login(username: str = "islay_fan", password: str = "peat123") -> dict:
        resp = client.post("/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200
        return resp.json()["user"]

    return _login

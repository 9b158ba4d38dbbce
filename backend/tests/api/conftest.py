"""API test fixtures — isolated FastAPI apps with injected store, DB and event bus.

Invariants:
    - Each test builds its own app via create_app(); the module-level app is untouched
    - The DB session scope is the per-test in-memory database from the root conftest
"""

import pytest
from httpx import ASGITransport, AsyncClient

from emoji_plugin.config import Settings
from emoji_plugin.main import create_app


@pytest.fixture
async def make_client(db, events):
    """Factory: build an app with the given store/settings and an AsyncClient for it."""
    clients = []

    async def _make(store=None, **settings_overrides):
        values = {
            "database_url": "sqlite+aiosqlite:///:memory:",
            "emoji_store_path": None,
            "emoji_set_dirs": [],
        } | settings_overrides
        settings = Settings(**values)
        app = create_app(settings, store=store, session_scope=db.session, events=events)
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(client)
        return app, client

    yield _make
    for client in clients:
        await client.aclose()


@pytest.fixture
async def memory_app(make_client, store):
    return await make_client(store=store)

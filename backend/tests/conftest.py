"""Root conftest — shared fixtures: in-memory database, blob store, fakes.

Invariants:
    - Every test gets a fresh in-memory SQLite database with tables created
    - Fakes record every call so tests can assert on side effects
"""

import os

import pytest

# Ensure tests never touch a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from emoji_plugin.infrastructure.blob_store import MemoryBlobStore  # noqa: E402
from emoji_plugin.infrastructure.custom_emoji_registry import SqlCustomEmojiRegistry  # noqa: E402
from emoji_plugin.infrastructure.database import DatabaseSessionManager  # noqa: E402
from emoji_plugin.services.emoji_manager import EmojiManager  # noqa: E402
from tests.fakes import FakeUser, RecordingEventBus  # noqa: E402


@pytest.fixture
async def db():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
def registry(db):
    return SqlCustomEmojiRegistry(db.session)


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def events():
    return RecordingEventBus()


@pytest.fixture
def manager(registry, events, store):
    return EmojiManager(registry, events, store=store)


@pytest.fixture
def admin():
    return FakeUser("u-admin", {"emoji.add", "emoji.remove"})


@pytest.fixture
def guest():
    return FakeUser("u-guest")

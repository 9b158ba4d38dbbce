"""Host Contract — what the emoji plugin needs from the application it attaches to.

Invariants:
    - The host owns the FastAPI app, the event bus and the DB session scope
    - host.emoji is None until the plugin is installed
    - HostApp registers itself on app.state.host so routes can reach the manager
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from emoji_plugin.core.repository_protocols import EventBus

if TYPE_CHECKING:
    from emoji_plugin.services.emoji_manager import EmojiManager


class EmojiHost(Protocol):
    app: FastAPI
    events: EventBus
    session_scope: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    emoji: Any


@dataclass
class HostApp:
    """Concrete host used by main.py and tests."""
    app: FastAPI
    events: EventBus
    session_scope: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    emoji: "EmojiManager | None" = field(default=None)

    def __post_init__(self) -> None:
        self.app.state.host = self

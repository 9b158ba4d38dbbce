"""Boundary Protocols — contracts between the emoji core and its collaborators.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - Blob store, registry, users and event bus are accessed through Protocol types only
    - Implementations provided by the host or infrastructure/ via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, emoji set packages need not import us
    - Async in Protocol: boundary methods do IO; core resolution functions stay sync
      and the service layer orchestrates the awaits around them
"""

from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from starlette.types import ASGIApp

from emoji_plugin.core.domain_types import CustomEmojiRecord


class ByteSink(Protocol):
    """Writable end of a blob. Content is committed when the owning context exits cleanly."""
    async def write(self, chunk: bytes) -> None: ...


class BlobStore(Protocol):
    """Binary store for custom emoji images, keyed by file name."""
    def open_write(self, key: str) -> AbstractAsyncContextManager[ByteSink]: ...
    async def open_read(self, key: str) -> AsyncIterator[bytes]: ...


class CustomEmojiRegistry(Protocol):
    """Persistent registry of custom emoji. Shortcode is unique and indexed."""
    async def find_one(self, shortcode: str) -> CustomEmojiRecord | None: ...
    async def list_pairs(self) -> list[tuple[str, str]]: ...
    async def create(
        self, shortcode: str, name: str, added_by: Any,
    ) -> CustomEmojiRecord: ...
    async def remove(self, shortcode: str) -> None: ...


class ActingUser(Protocol):
    """A user performing a mutation; permission checks may do IO."""
    id: Any

    async def can(self, permission: str) -> bool: ...


class EventBus(Protocol):
    """Host event bus. Delivery guarantees belong to the implementation."""
    async def publish(self, topic: str, payload: dict) -> None: ...


class EmojiSetProvider(Protocol):
    """Externally supplied emoji set. `name` is optional on real providers."""
    name: str | None
    emoji: Mapping[str, str]

    def middleware(self) -> ASGIApp: ...


MiddlewareFactory = Callable[[], ASGIApp]

"""Plugin Bootstrap — wires an EmojiManager into a host application.

Invariants:
    - Exactly one manager per install; it is stored on host.emoji
    - The custom emoji registry is declared once, at install time
    - An explicit store wins over path; path alone means a FileSystemBlobStore;
      neither means custom emoji are disabled
    - The manager's dispatch chain is mounted at mount_path
"""

import logging
from collections.abc import Callable
from pathlib import Path

from emoji_plugin.core.repository_protocols import BlobStore
from emoji_plugin.host import EmojiHost
from emoji_plugin.infrastructure.blob_store import FileSystemBlobStore
from emoji_plugin.infrastructure.custom_emoji_registry import SqlCustomEmojiRegistry
from emoji_plugin.services.emoji_manager import EmojiManager

logger = logging.getLogger(__name__)


def emoji_plugin(
    store: BlobStore | None = None,
    path: str | Path | None = None,
    mount_path: str = "/emoji",
) -> Callable[[EmojiHost], EmojiManager]:
    """Build an installer that attaches the emoji manager to a host."""

    def install(host: EmojiHost) -> EmojiManager:
        blob_store = store
        if blob_store is None and path is not None:
            blob_store = FileSystemBlobStore(path)
        registry = SqlCustomEmojiRegistry(host.session_scope)
        manager = EmojiManager(registry, host.events, store=blob_store)
        host.emoji = manager
        host.app.mount(mount_path, manager.asgi_app, name="emoji")
        logger.info(
            f"Emoji plugin installed at {mount_path} "
            f"(custom emoji {'enabled' if blob_store else 'disabled'})",
        )
        return manager

    return install

"""Emoji Serving — ASGI handlers that serve stored emoji images.

Invariants:
    - DispatchChain tries handlers in order; a 404 from one falls through to the next
    - When every handler misses, a 404 HTTPException reaches the host's error handlers
    - Non-404 errors propagate immediately
    - StoredEmojiHandler uses the path after the leading "/" verbatim as the blob key

Design Decisions:
    - A FileSystemBlobStore is served by StaticFiles over its root directory,
      hiding in-progress writes; any other store is streamed through StoredEmojiHandler
"""

import logging
from collections.abc import Iterable

from starlette.exceptions import HTTPException
from starlette.responses import Response, StreamingResponse
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send

from emoji_plugin.core.errors import BlobNotFoundError
from emoji_plugin.core.image_sniffer import MIME_BY_EXT
from emoji_plugin.core.repository_protocols import BlobStore
from emoji_plugin.infrastructure.blob_store import PARTIAL_SUFFIX, FileSystemBlobStore

logger = logging.getLogger(__name__)


def route_path(scope: Scope) -> str:
    """Request path relative to the mount point."""
    path = scope["path"]
    root_path = scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        path = path[len(root_path):]
    return path or "/"


def media_type_for(key: str) -> str:
    _, _, ext = key.rpartition(".")
    return MIME_BY_EXT.get(ext.lower(), "application/octet-stream")


class DispatchChain:
    """Ordered sequence of ASGI handlers exposed as a single ASGI app."""

    def __init__(self, handlers: Iterable[ASGIApp] = ()) -> None:
        self._handlers: list[ASGIApp] = list(handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def append(self, handler: ASGIApp) -> None:
        self._handlers.append(handler)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        for handler in tuple(self._handlers):
            try:
                await handler(scope, receive, send)
                return
            except HTTPException as exc:
                if exc.status_code != 404:
                    raise
        raise HTTPException(status_code=404)


class StoredEmojiHandler:
    """Streams a blob from any BlobStore."""

    def __init__(self, store: BlobStore) -> None:
        self.store = store

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            raise HTTPException(status_code=404)
        if scope["method"] not in ("GET", "HEAD"):
            raise HTTPException(status_code=405)
        key = route_path(scope)[1:]
        try:
            chunks = await self.store.open_read(key)
        except BlobNotFoundError as exc:
            logger.debug("Stored emoji not found", extra={"emoji_key": key})
            raise HTTPException(status_code=404) from exc
        response = StreamingResponse(chunks, media_type=media_type_for(key))
        await response(scope, receive, send)


class BlobDirectoryFiles(StaticFiles):
    """StaticFiles over a blob store root that never serves partial writes."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        if path.endswith(PARTIAL_SUFFIX):
            raise HTTPException(status_code=404)
        return await super().get_response(path, scope)


def custom_emoji_handler(store: BlobStore) -> ASGIApp:
    """Pick the serving handler for `store`."""
    if isinstance(store, FileSystemBlobStore):
        return BlobDirectoryFiles(directory=store.root, check_dir=False)
    return StoredEmojiHandler(store)

"""Blob Stores — binary storage for custom emoji images.

Invariants:
    - A write is committed only when its open_write() context exits cleanly;
      a failed or partial write leaves no blob under the key
    - open_read() raises BlobNotFoundError before any byte is streamed
    - Keys are flat file names; keys that could escape the store root are rejected
    - Keys ending in PARTIAL_SUFFIX are reserved for in-progress writes

Design Decisions:
    - FileSystemBlobStore writes to "<key>.part" then atomically replaces the target
    - anyio for file IO: same event loop abstraction Starlette runs on
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import anyio

from emoji_plugin.core.errors import BlobNotFoundError, BlobStoreError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PARTIAL_SUFFIX = ".part"


def _check_key(key: str) -> str:
    if not key or "/" in key or "\\" in key or key in (".", "..") or "\x00" in key:
        raise BlobNotFoundError(key)
    if key.endswith(PARTIAL_SUFFIX):
        raise BlobNotFoundError(key)
    return key


class _BufferSink:
    def __init__(self) -> None:
        self.chunks: list[bytes] = []

    async def write(self, chunk: bytes) -> None:
        self.chunks.append(bytes(chunk))


class MemoryBlobStore:
    """Dict-backed blob store for tests and hosts without a disk."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._blobs

    def keys(self) -> list[str]:
        return list(self._blobs)

    @asynccontextmanager
    async def open_write(self, key: str) -> AsyncIterator[_BufferSink]:
        _check_key(key)
        sink = _BufferSink()
        yield sink
        self._blobs[key] = b"".join(sink.chunks)

    async def open_read(self, key: str) -> AsyncIterator[bytes]:
        _check_key(key)
        try:
            data = self._blobs[key]
        except KeyError:
            raise BlobNotFoundError(key) from None
        return self._iter(data)

    @staticmethod
    async def _iter(data: bytes) -> AsyncIterator[bytes]:
        for start in range(0, len(data), CHUNK_SIZE):
            yield data[start:start + CHUNK_SIZE]


class _FileSink:
    def __init__(self, file: anyio.AsyncFile, key: str) -> None:
        self._file = file
        self._key = key

    async def write(self, chunk: bytes) -> None:
        try:
            await self._file.write(chunk)
        except OSError as e:
            raise BlobStoreError(str(e), self._key) from e


class FileSystemBlobStore:
    """Blob store rooted at a directory; each key is a file in that directory."""

    def __init__(self, path: str | Path) -> None:
        self.root = Path(path)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> anyio.Path:
        return anyio.Path(self.root / _check_key(key))

    @asynccontextmanager
    async def open_write(self, key: str) -> AsyncIterator[_FileSink]:
        target = self._path(key)
        partial = target.with_name(target.name + PARTIAL_SUFFIX)
        try:
            file = await anyio.open_file(partial, "wb")
        except OSError as e:
            raise BlobStoreError(str(e), key) from e
        try:
            async with file:
                yield _FileSink(file, key)
        except BaseException:
            await partial.unlink(missing_ok=True)
            raise
        try:
            await partial.replace(target)
        except OSError as e:
            await partial.unlink(missing_ok=True)
            raise BlobStoreError(str(e), key) from e
        logger.debug("Stored blob", extra={"emoji_key": key})

    async def open_read(self, key: str) -> AsyncIterator[bytes]:
        path = self._path(key)
        try:
            file = await anyio.open_file(path, "rb")
        except (FileNotFoundError, IsADirectoryError):
            raise BlobNotFoundError(key) from None
        except OSError as e:
            raise BlobStoreError(str(e), key) from e
        return self._iter(file)

    @staticmethod
    async def _iter(file: anyio.AsyncFile) -> AsyncIterator[bytes]:
        async with file:
            while chunk := await file.read(CHUNK_SIZE):
                yield chunk

"""Image Sniffer — validate an image stream from its first chunk without buffering it.

Invariants:
    - Only the first non-empty chunk is inspected; the rest is forwarded lazily
    - A source that fails the signature check is closed before NotAnImageError is raised
    - A source that ends before producing bytes raises EmptyInputError
    - The returned stream replays the peeked chunk, then the remainder, exactly once
    - Readable file objects are read in READ_CHUNK_SIZE pieces; sync reads run in a
      worker thread so the event loop never blocks on disk

Design Decisions:
    - Peek-and-replay over a tee: one consumer, no extra task, no extra queue
    - Signature table is data, ordered: more specific signatures precede looser ones
      (cr2 before tif, bpg before bmp)
"""

import inspect
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass

import anyio.to_thread

from emoji_plugin.core.errors import (
    EmptyInputError, InvalidInputKindError, NotAnImageError,
)

READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ImageType:
    """Detected image format."""
    ext: str
    mime: str


@dataclass(frozen=True)
class _Signature:
    image_type: ImageType
    parts: tuple[tuple[int, bytes], ...]

    def matches(self, head: bytes) -> bool:
        return all(
            head[offset:offset + len(magic)] == magic
            for offset, magic in self.parts
        )


def _sig(ext: str, mime: str, *parts: tuple[int, bytes]) -> _Signature:
    return _Signature(ImageType(ext, mime), parts)


_FTYP = (4, b"ftyp")

SIGNATURES: tuple[_Signature, ...] = (
    _sig("jpg", "image/jpeg", (0, b"\xff\xd8\xff")),
    _sig("png", "image/png", (0, b"\x89PNG\r\n\x1a\n")),
    _sig("gif", "image/gif", (0, b"GIF")),
    _sig("webp", "image/webp", (8, b"WEBP")),
    _sig("flif", "image/flif", (0, b"FLIF")),
    _sig("cr2", "image/x-canon-cr2", (0, b"II*\x00"), (8, b"CR")),
    _sig("cr2", "image/x-canon-cr2", (0, b"MM\x00*"), (8, b"CR")),
    _sig("tif", "image/tiff", (0, b"II*\x00")),
    _sig("tif", "image/tiff", (0, b"MM\x00*")),
    _sig("bpg", "image/bpg", (0, b"BPG\xfb")),
    _sig("bmp", "image/bmp", (0, b"BM")),
    _sig("jxr", "image/vnd.ms-photo", (0, b"II\xbc")),
    _sig("psd", "image/vnd.adobe.photoshop", (0, b"8BPS")),
    _sig("ico", "image/x-icon", (0, b"\x00\x00\x01\x00")),
    _sig("cur", "image/x-icon", (0, b"\x00\x00\x02\x00")),
    _sig("jp2", "image/jp2", (0, b"\x00\x00\x00\x0cjP  \r\n\x87\n")),
    _sig("avif", "image/avif", _FTYP, (8, b"avif")),
    _sig("avif", "image/avif", _FTYP, (8, b"avis")),
    _sig("heic", "image/heic", _FTYP, (8, b"heic")),
    _sig("heic", "image/heic", _FTYP, (8, b"heix")),
    _sig("heic", "image/heif", _FTYP, (8, b"mif1")),
)

# reversed: the first signature listed for an extension wins
MIME_BY_EXT: dict[str, str] = {
    s.image_type.ext: s.image_type.mime for s in reversed(SIGNATURES)
} | {"jpeg": "image/jpeg", "tiff": "image/tiff"}


def detect_image_type(head: bytes) -> ImageType | None:
    """Match leading bytes against known image signatures."""
    for signature in SIGNATURES:
        if signature.matches(head):
            return signature.image_type
    return None


class ValidatedImageStream:
    """Async byte stream known to start with a recognized image signature.

    Iterating yields the already-peeked first chunk, then forwards the
    remaining chunks from the source as they arrive.
    """

    def __init__(
        self, image_type: ImageType, head: bytes, rest: AsyncIterator[bytes],
    ):
        self.image_type = image_type
        self._head: bytes | None = head
        self._rest = rest

    @property
    def ext(self) -> str:
        return self.image_type.ext

    @property
    def mime(self) -> str:
        return self.image_type.mime

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        if self._head is not None:
            head, self._head = self._head, None
            return head
        return bytes(await self._rest.__anext__())

    async def aclose(self) -> None:
        self._head = None
        await _close(self._rest)


async def _single_chunk(buffer: bytes) -> AsyncIterator[bytes]:
    yield buffer


async def _close(stream: object) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


async def _read_chunks(source) -> AsyncIterator[bytes]:
    if inspect.iscoroutinefunction(source.read):
        read = source.read
    else:
        async def read(size: int):
            return await anyio.to_thread.run_sync(source.read, size)
    while chunk := await read(READ_CHUNK_SIZE):
        if not isinstance(chunk, (bytes, bytearray, memoryview)):
            raise InvalidInputKindError(f"text stream ({type(source).__name__})")
        yield bytes(chunk)


def _to_stream(source: object) -> AsyncIterator[bytes]:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return _single_chunk(bytes(source))
    if callable(getattr(source, "read", None)):
        return _read_chunks(source)
    if isinstance(source, AsyncIterable):
        return aiter(source)
    raise InvalidInputKindError(type(source).__name__)


async def sniff_image(source: object) -> ValidatedImageStream:
    """Peek the first chunk of `source` and return a validated image stream.

    Raises:
        InvalidInputKindError: source is not bytes-like, a binary file object
            or an async byte stream
        EmptyInputError: source ended before producing any bytes
        NotAnImageError: first chunk does not carry a known image signature
    """
    stream = _to_stream(source)
    async for chunk in stream:
        if not chunk:
            continue
        head = bytes(chunk)
        image_type = detect_image_type(head)
        if image_type is None:
            await _close(stream)
            raise NotAnImageError()
        return ValidatedImageStream(image_type, head, stream)
    raise EmptyInputError()

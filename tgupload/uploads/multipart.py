from __future__ import annotations

import logging
import mimetypes
import secrets
from contextlib import ExitStack
from dataclasses import dataclass
from typing import AsyncIterator, Iterator, List, Mapping, Optional, Sequence, Union

from ..settings import settings
from .data import RequestFile
from .errors import EncodingFailure, IOFailure
from .source import UploadDescriptor, resolve_file_data


logger = logging.getLogger("tgupload.multipart")

CRLF = b"\r\n"

# Percent-escape characters that would break out of a quoted header value.
_HEADER_ESCAPES = {'"': "%22", "\r": "%0D", "\n": "%0A"}


def _quote(value: str) -> str:
    return "".join(_HEADER_ESCAPES.get(ch, ch) for ch in value)


def _guess_content_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


@dataclass
class _FieldPart:
    name: str
    value: str

    def headers(self) -> bytes:
        return f'Content-Disposition: form-data; name="{_quote(self.name)}"\r\n\r\n'.encode("utf-8")


@dataclass
class _FilePart:
    name: str
    descriptor: UploadDescriptor
    content_type: str

    def headers(self) -> bytes:
        return (
            f'Content-Disposition: form-data; name="{_quote(self.name)}"; filename="{_quote(self.descriptor.name)}"\r\n'
            f"Content-Type: {self.content_type}\r\n\r\n"
        ).encode("utf-8")


_Part = Union[_FieldPart, _FilePart]


class MultipartPayload:
    """A `multipart/form-data` body ready to hand to the HTTP client.

    The body is produced lazily: file contents are read in chunks while the
    body is iterated, so large uploads never sit in memory at once. It can be
    iterated once, either with `iter_bytes()` or `aiter_bytes()`. Every open
    upload is closed after it has been streamed, on error, or by `close()`
    when the body is dropped unsent.
    """

    def __init__(self, boundary: str, parts: List[_Part], *, chunk_size: int) -> None:
        self.boundary = boundary
        self.content_type = f"multipart/form-data; boundary={boundary}"
        self._parts = parts
        self._chunk_size = chunk_size
        self._consumed = False

    @property
    def descriptors(self) -> List[UploadDescriptor]:
        return [p.descriptor for p in self._parts if isinstance(p, _FilePart)]

    def iter_bytes(self) -> Iterator[bytes]:
        if self._consumed:
            raise EncodingFailure("multipart body can only be consumed once")
        self._consumed = True
        return self._generate()

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        """Async view of `iter_bytes()` for `httpx.AsyncClient`.

        File reads stay synchronous and run on the event loop, one
        `chunk_size` read per step. Keep the chunk size modest for slow disks.
        """
        chunks = self.iter_bytes()
        try:
            for chunk in chunks:
                yield chunk
        finally:
            chunks.close()

    def read(self) -> bytes:
        return b"".join(self.iter_bytes())

    def close(self) -> None:
        for descriptor in self.descriptors:
            descriptor.close()

    def __enter__(self) -> "MultipartPayload":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _generate(self) -> Iterator[bytes]:
        delimiter = b"--" + self.boundary.encode("ascii") + CRLF
        try:
            for part in self._parts:
                yield delimiter
                yield part.headers()
                if isinstance(part, _FilePart):
                    yield from self._stream_file(part)
                else:
                    yield part.value.encode("utf-8")
                yield CRLF
            yield b"--" + self.boundary.encode("ascii") + b"--" + CRLF
        finally:
            self.close()

    def _stream_file(self, part: _FilePart) -> Iterator[bytes]:
        descriptor = part.descriptor
        try:
            while True:
                try:
                    chunk = descriptor.read(self._chunk_size)
                except (OSError, ValueError) as ex:  # ValueError: stream already closed
                    raise IOFailure(f"failed reading upload {descriptor.name!r} for field {part.name!r}: {ex}") from ex
                if not chunk:
                    break
                if not isinstance(chunk, (bytes, bytearray, memoryview)):
                    raise EncodingFailure(f"upload {descriptor.name!r} produced {type(chunk).__name__}, expected bytes")
                yield bytes(chunk)
        finally:
            descriptor.close()


def build_multipart_payload(
    params: Optional[Mapping[str, str]],
    files: Sequence[RequestFile],
    *,
    chunk_size: Optional[int] = None,
) -> MultipartPayload:
    """Encode `params` and `files` as a streaming multipart body.

    Every file is resolved here. Uploads are opened immediately, so a missing
    path raises `IOFailure` from this call (closing anything already opened);
    reference values (URLs, file ids) become plain form fields under their
    field name.
    """
    size = settings.UPLOAD_CHUNK_SIZE if chunk_size is None else chunk_size
    if size <= 0:
        raise ValueError(f"chunk_size must be positive, got {size}")

    parts: List[_Part] = []
    for key, value in (params or {}).items():
        if not isinstance(value, str):
            raise EncodingFailure(f"param {key!r} must be a string, got {type(value).__name__}")
        parts.append(_FieldPart(name=key, value=value))

    with ExitStack() as cleanup:
        for file in files:
            source = resolve_file_data(file.data)
            if not source.kind_is_upload():
                parts.append(_FieldPart(name=file.name, value=source.reference_value()))
                continue
            descriptor = source.open_upload()
            cleanup.callback(descriptor.close)
            if not descriptor.name:
                descriptor.name = settings.DEFAULT_UPLOAD_NAME
            parts.append(_FilePart(name=file.name, descriptor=descriptor, content_type=_guess_content_type(descriptor.name)))
        # Descriptors now belong to the payload.
        cleanup.pop_all()

    payload = MultipartPayload(secrets.token_hex(16), parts, chunk_size=size)
    logger.debug(
        "multipart.build: payload ready",
        extra={"fields": sum(1 for p in parts if isinstance(p, _FieldPart)), "uploads": len(payload.descriptors)},
    )
    return payload

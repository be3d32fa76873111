from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import IO, TYPE_CHECKING, Callable, Optional

from .errors import IOFailure, MissingData, SourceAlreadyResolved, UnsupportedOperation

if TYPE_CHECKING:
    from .data import RequestFileData


class FileSourceKind(str, Enum):
    UPLOAD = "upload"
    FILE_ID = "file_id"
    URL = "url"
    ATTACH = "attach"
    INLINE = "inline"


@dataclass
class UploadDescriptor:
    """A file name plus the byte stream to upload.

    Whoever receives a descriptor owns the stream: read it to the end and
    call `close()` on every exit path. Closing more than once is harmless,
    the underlying stream only sees the first call.
    """

    name: str
    stream: IO[bytes]
    closed: bool = field(default=False, init=False)

    def read(self, size: int = -1) -> bytes:
        return self.stream.read(size)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        close = getattr(self.stream, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "UploadDescriptor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


UploadResolver = Callable[[], UploadDescriptor]
ReferenceResolver = Callable[[], str]


class FileSource:
    """Lazily resolved reference to a single file, tagged with its kind.

    Upload sources carry a resolver producing an `UploadDescriptor`; every
    other kind carries a resolver producing the literal string to send.
    Resolvers run at most once per source.
    """

    __slots__ = ("kind", "_upload_fn", "_reference_fn", "_resolved")

    def __init__(
        self,
        kind: FileSourceKind,
        *,
        upload_fn: Optional[UploadResolver] = None,
        reference_fn: Optional[ReferenceResolver] = None,
    ) -> None:
        if kind is FileSourceKind.UPLOAD:
            if upload_fn is None or reference_fn is not None:
                raise ValueError("upload sources need exactly an upload resolver")
        elif reference_fn is None or upload_fn is not None:
            raise ValueError(f"{kind.value} sources need exactly a reference resolver")
        self.kind = kind
        self._upload_fn = upload_fn
        self._reference_fn = reference_fn
        self._resolved = False

    def __repr__(self) -> str:
        return f"FileSource(kind={self.kind.value!r}, resolved={self._resolved})"

    def kind_is_upload(self) -> bool:
        return self.kind is FileSourceKind.UPLOAD

    def open_upload(self) -> UploadDescriptor:
        if self._upload_fn is None:
            raise UnsupportedOperation(f"file source of kind {self.kind.value!r} does not support uploads")
        self._mark_resolved()
        return self._upload_fn()

    def reference_value(self) -> str:
        if self._reference_fn is None:
            raise UnsupportedOperation(f"file source of kind {self.kind.value!r} does not support reference values")
        self._mark_resolved()
        return self._reference_fn()

    def _mark_resolved(self) -> None:
        if self._resolved:
            raise SourceAlreadyResolved(f"file source of kind {self.kind.value!r} was already resolved")
        self._resolved = True

    # Constructors

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "FileSource":
        payload = bytes(data)
        return cls(FileSourceKind.UPLOAD, upload_fn=lambda: UploadDescriptor(name=name, stream=BytesIO(payload)))

    @classmethod
    def from_reader(cls, name: str, reader: IO[bytes]) -> "FileSource":
        return cls(FileSourceKind.UPLOAD, upload_fn=lambda: UploadDescriptor(name=name, stream=reader))

    @classmethod
    def from_path(cls, path: str | os.PathLike) -> "FileSource":
        def _open() -> UploadDescriptor:
            try:
                handle = open(path, "rb")
            except OSError as ex:
                raise IOFailure(f"cannot open upload {os.fspath(path)!r}: {ex}") from ex
            return UploadDescriptor(name=os.path.basename(os.fspath(path)), stream=handle)

        return cls(FileSourceKind.UPLOAD, upload_fn=_open)

    @classmethod
    def from_url(cls, url: str) -> "FileSource":
        return cls(FileSourceKind.URL, reference_fn=lambda: url)

    @classmethod
    def from_file_id(cls, file_id: str) -> "FileSource":
        return cls(FileSourceKind.FILE_ID, reference_fn=lambda: file_id)

    @classmethod
    def from_attach(cls, token: str) -> "FileSource":
        return cls(FileSourceKind.ATTACH, reference_fn=lambda: token)

    @classmethod
    def inline(cls, value: str) -> "FileSource":
        return cls(FileSourceKind.INLINE, reference_fn=lambda: value)


def resolve_file_data(data: Optional["RequestFileData"]) -> FileSource:
    """Turn a file-data capability into a fresh `FileSource`.

    Values that already know their source (the built-in carriers and attach
    tokens) hand it over directly. Anything else is adapted through its
    `needs_upload` / `upload_data` / `send_data` methods.
    """
    if data is None:
        raise MissingData("file data is required")

    source = data.file_source()
    if source is not None:
        return source

    if data.needs_upload():
        def _upload() -> UploadDescriptor:
            try:
                name, stream = data.upload_data()
            except OSError as ex:
                if isinstance(ex, IOFailure):
                    raise
                raise IOFailure(f"cannot open upload: {ex}") from ex
            return UploadDescriptor(name=name, stream=stream)

        return FileSource(FileSourceKind.UPLOAD, upload_fn=_upload)

    return FileSource.inline(data.send_data())

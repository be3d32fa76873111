from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from io import BytesIO
from typing import IO, Optional, Tuple

from .errors import UnsupportedOperation
from .source import FileSource


class RequestFileData(ABC):
    """Data to be sent for a file field.

    A value either needs to be uploaded (`needs_upload()` is true and
    `upload_data()` returns a name and a byte stream) or is sent as a plain
    string (`send_data()`), e.g. a URL or a file id the platform already
    knows about.
    """

    @abstractmethod
    def needs_upload(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def upload_data(self) -> Tuple[str, IO[bytes]]:
        """Return the file name and a stream to read. Only valid for uploads."""
        raise NotImplementedError

    @abstractmethod
    def send_data(self) -> str:
        """Return the value to send. Only valid when no upload is needed."""
        raise NotImplementedError

    def file_source(self) -> Optional[FileSource]:
        return None


@dataclass(frozen=True)
class RequestFile:
    """A file field name paired with its data."""

    name: str
    data: RequestFileData


@dataclass(frozen=True)
class FileBytes(RequestFileData):
    name: str
    data: bytes

    def needs_upload(self) -> bool:
        return True

    def upload_data(self) -> Tuple[str, IO[bytes]]:
        return self.name, BytesIO(self.data)

    def send_data(self) -> str:
        raise UnsupportedOperation("FileBytes must be uploaded")

    def file_source(self) -> FileSource:
        return FileSource.from_bytes(self.name, self.data)


@dataclass(frozen=True)
class FileReader(RequestFileData):
    """An already open binary stream. Uploading takes ownership of it."""

    name: str
    reader: IO[bytes]

    def needs_upload(self) -> bool:
        return True

    def upload_data(self) -> Tuple[str, IO[bytes]]:
        return self.name, self.reader

    def send_data(self) -> str:
        raise UnsupportedOperation("FileReader must be uploaded")

    def file_source(self) -> FileSource:
        return FileSource.from_reader(self.name, self.reader)


@dataclass(frozen=True)
class FilePath(RequestFileData):
    """A local file, opened only when the request is encoded."""

    path: str

    def needs_upload(self) -> bool:
        return True

    def upload_data(self) -> Tuple[str, IO[bytes]]:
        return os.path.basename(self.path), open(self.path, "rb")

    def send_data(self) -> str:
        raise UnsupportedOperation("FilePath must be uploaded")

    def file_source(self) -> FileSource:
        return FileSource.from_path(self.path)


@dataclass(frozen=True)
class FileURL(RequestFileData):
    url: str

    def needs_upload(self) -> bool:
        return False

    def upload_data(self) -> Tuple[str, IO[bytes]]:
        raise UnsupportedOperation("FileURL cannot be uploaded")

    def send_data(self) -> str:
        return self.url

    def file_source(self) -> FileSource:
        return FileSource.from_url(self.url)


@dataclass(frozen=True)
class FileID(RequestFileData):
    """Id of a file already stored on the platform."""

    file_id: str

    def needs_upload(self) -> bool:
        return False

    def upload_data(self) -> Tuple[str, IO[bytes]]:
        raise UnsupportedOperation("FileID cannot be uploaded")

    def send_data(self) -> str:
        return self.file_id

    def file_source(self) -> FileSource:
        return FileSource.from_file_id(self.file_id)


@dataclass(frozen=True)
class FileAttach(RequestFileData):
    # Internal: an attach://... reference to another part of the same request.
    token: str

    def needs_upload(self) -> bool:
        return False

    def upload_data(self) -> Tuple[str, IO[bytes]]:
        raise UnsupportedOperation("FileAttach cannot be uploaded")

    def send_data(self) -> str:
        return self.token

    def file_source(self) -> FileSource:
        return FileSource.from_attach(self.token)

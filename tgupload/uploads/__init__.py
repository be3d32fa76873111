from __future__ import annotations

from .errors import EncodingFailure, IOFailure, MissingData, SourceAlreadyResolved, UnsupportedOperation, UploadError
from .source import FileSource, FileSourceKind, UploadDescriptor, resolve_file_data
from .data import FileAttach, FileBytes, FileID, FilePath, FileReader, FileURL, RequestFile, RequestFileData
from .payload import UploadPayload, payload_from_fileable
from .media_attach import (
    attach_name,
    attach_token,
    clone_input_media,
    media_upload_payload,
    prepare_input_media,
    prepare_input_media_for_files,
    prepare_input_media_for_params,
)
from .multipart import MultipartPayload, build_multipart_payload

__all__ = [
    "EncodingFailure",
    "IOFailure",
    "MissingData",
    "SourceAlreadyResolved",
    "UnsupportedOperation",
    "UploadError",
    "FileSource",
    "FileSourceKind",
    "UploadDescriptor",
    "resolve_file_data",
    "FileAttach",
    "FileBytes",
    "FileID",
    "FilePath",
    "FileReader",
    "FileURL",
    "RequestFile",
    "RequestFileData",
    "UploadPayload",
    "payload_from_fileable",
    "attach_name",
    "attach_token",
    "clone_input_media",
    "media_upload_payload",
    "prepare_input_media",
    "prepare_input_media_for_files",
    "prepare_input_media_for_params",
    "MultipartPayload",
    "build_multipart_payload",
]

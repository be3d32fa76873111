from __future__ import annotations


class UploadError(Exception):
    """Base class for failures while resolving or encoding file uploads."""


class UnsupportedOperation(UploadError):
    """A file source was asked for a capability its kind does not have."""


class SourceAlreadyResolved(UnsupportedOperation):
    """A single-shot resolver was invoked a second time."""


class MissingData(UploadError, ValueError):
    pass


class IOFailure(UploadError, OSError):
    pass


class EncodingFailure(UploadError):
    pass

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..schemas.params import Params
from .data import RequestFile, RequestFileData
from .source import resolve_file_data


logger = logging.getLogger("tgupload.payload")


class UploadPayload:
    """Collects a request's file fields, split at add time.

    Fields that must be uploaded keep their insertion order in `files_slice()`.
    Fields that resolve to a plain reference (URL, file id, attach token) are
    kept as inline strings and folded into the request params by
    `apply_inline()`. Resolution errors propagate to the caller.
    """

    def __init__(self) -> None:
        self._files: List[RequestFile] = []
        self._inline: Dict[str, str] = {}

    def add(self, field: str, data: Optional[RequestFileData]) -> None:
        if data is None:
            return
        source = resolve_file_data(data)
        if source.kind_is_upload():
            self._files.append(RequestFile(name=field, data=data))
            return
        self._inline[field] = source.reference_value()

    def add_upload_only(self, field: str, data: Optional[RequestFileData]) -> None:
        """Like `add`, but reference values are dropped instead of inlined."""
        if data is None:
            return
        source = resolve_file_data(data)
        if source.kind_is_upload():
            self._files.append(RequestFile(name=field, data=data))
        else:
            logger.debug("payload.add_upload_only: skipping non-upload field", extra={"field": field, "kind": source.kind.value})

    def needs_upload(self) -> bool:
        return len(self._files) > 0

    def files_slice(self) -> List[RequestFile]:
        return list(self._files)

    def inline_values(self) -> Dict[str, str]:
        return dict(self._inline)

    def apply_inline(self, params: Optional[Params]) -> Optional[Params]:
        if not self._inline:
            return params
        if params is None:
            params = Params()
        params.update(self._inline)
        return params


def payload_from_fileable(config: Any) -> UploadPayload:
    """Build the upload payload for a file-bearing request config.

    Configs that need finer control (media groups drop reference values that
    were already written into their JSON params) provide `file_payload()`.
    """
    build = getattr(config, "file_payload", None)
    if callable(build):
        return build()

    payload = UploadPayload()
    for file in config.files():
        payload.add(file.name, file.data)
    return payload

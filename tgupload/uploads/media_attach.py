from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

from ..schemas.media import (
    InputMedia,
    InputMediaAnimation,
    InputMediaAudio,
    InputMediaDocument,
    InputMediaPhoto,
    InputMediaVideo,
    InputPaidMedia,
    InputSticker,
)
from .data import RequestFile
from .payload import UploadPayload


# Anything whose files are carried as attach:// parts of the same request.
Attachable = Union[InputMedia, InputSticker]


ATTACH_PREFIX = "attach://"


def attach_name(index: int, *, thumb: bool = False) -> str:
    """Part name for the media item at `index` ("file-0", "file-0-thumb", ...).

    Both the attach:// tokens written into params and the names of the
    uploaded parts come from here, so they always match.
    """
    return f"file-{index}-thumb" if thumb else f"file-{index}"


def attach_token(index: int, *, thumb: bool = False) -> str:
    return ATTACH_PREFIX + attach_name(index, thumb=thumb)


def clone_input_media(media: Optional[Attachable]) -> Optional[Attachable]:
    if media is None:
        return None
    if isinstance(media, (InputMediaPhoto, InputMediaVideo, InputMediaAnimation, InputMediaAudio, InputMediaDocument, InputSticker)):
        return media.model_copy()
    if isinstance(media, InputPaidMedia):
        clone = media.model_copy()
        clone.media = clone_input_media(media.media)
        return clone
    raise TypeError(f"unsupported input media type: {type(media).__name__}")


def clone_media_list(media: Sequence[Attachable]) -> List[Attachable]:
    return [clone_input_media(m) for m in media]


def prepare_input_media_for_params(media: Sequence[Attachable]) -> List[Attachable]:
    """Copy `media`, pointing every upload at its attach:// part.

    URLs and file ids are left as they are. The caller's items are not touched.
    """
    prepared = clone_media_list(media)
    for idx, item in enumerate(prepared):
        primary = item.get_media()
        if primary is not None and primary.needs_upload():
            item.set_upload_media(attach_token(idx))
        thumb = item.get_thumb()
        if thumb is not None and thumb.needs_upload():
            item.set_upload_thumb(attach_token(idx, thumb=True))
    return prepared


def prepare_input_media_for_files(media: Sequence[Attachable]) -> List[RequestFile]:
    """Named files for every upload in `media`, primary before thumbnail."""
    files: List[RequestFile] = []
    for idx, item in enumerate(media):
        primary = item.get_media()
        if primary is not None and primary.needs_upload():
            files.append(RequestFile(name=attach_name(idx), data=primary))
        thumb = item.get_thumb()
        if thumb is not None and thumb.needs_upload():
            files.append(RequestFile(name=attach_name(idx, thumb=True), data=thumb))
    return files


def media_upload_payload(media: Sequence[Attachable]) -> UploadPayload:
    """Upload payload for `media`: only the parts the attach:// tokens point at."""
    payload = UploadPayload()
    for file in prepare_input_media_for_files(media):
        payload.add_upload_only(file.name, file.data)
    return payload


def prepare_input_media(media: Sequence[Attachable]) -> Tuple[List[Attachable], UploadPayload]:
    return prepare_input_media_for_params(media), media_upload_payload(media)

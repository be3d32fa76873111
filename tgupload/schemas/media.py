from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_serializer, model_validator

from ..uploads.data import FileAttach, RequestFileData


# File fields serialize to the string the platform expects: a URL, a file id
# or an attach:// token. Upload values must be rewritten before dumping.
FileField = Annotated[RequestFileData, PlainSerializer(lambda v: v.send_data(), return_type=str)]


class _InputMediaBase(BaseModel):
    """Shared accessors used when rewriting media for upload."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def get_media(self) -> Optional[RequestFileData]:
        return getattr(self, "media", None)

    def get_thumb(self) -> Optional[RequestFileData]:
        return getattr(self, "thumbnail", None)

    def set_upload_media(self, token: str) -> None:
        self.media = FileAttach(token)

    def set_upload_thumb(self, token: str) -> None:
        self.thumbnail = FileAttach(token)


class _CaptionFields(BaseModel):
    caption: Optional[str] = None
    parse_mode: Optional[str] = None
    caption_entities: Optional[List[Dict[str, Any]]] = None


class InputMediaPhoto(_InputMediaBase, _CaptionFields):
    type: Literal["photo"] = "photo"
    media: FileField
    show_caption_above_media: Optional[bool] = None
    has_spoiler: Optional[bool] = None


class InputMediaVideo(_InputMediaBase, _CaptionFields):
    type: Literal["video"] = "video"
    media: FileField
    thumbnail: Optional[FileField] = None
    start_timestamp: Optional[int] = None
    show_caption_above_media: Optional[bool] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    supports_streaming: Optional[bool] = None
    has_spoiler: Optional[bool] = None


class InputMediaAnimation(_InputMediaBase, _CaptionFields):
    type: Literal["animation"] = "animation"
    media: FileField
    thumbnail: Optional[FileField] = None
    show_caption_above_media: Optional[bool] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    has_spoiler: Optional[bool] = None


class InputMediaAudio(_InputMediaBase, _CaptionFields):
    type: Literal["audio"] = "audio"
    media: FileField
    thumbnail: Optional[FileField] = None
    duration: Optional[int] = None
    performer: Optional[str] = None
    title: Optional[str] = None


class InputMediaDocument(_InputMediaBase, _CaptionFields):
    type: Literal["document"] = "document"
    media: FileField
    thumbnail: Optional[FileField] = None
    disable_content_type_detection: Optional[bool] = None


class InputPaidMedia(_InputMediaBase):
    """Paid media wrapping a photo or video item.

    The primary file lives on the wrapped item. The thumbnail belongs to the
    wrapper: one set on a wrapped video is moved up here at validation time,
    since only the wrapped item's `media` is sent. `type` follows the wrapped
    item when omitted.
    """

    type: Optional[Literal["photo", "video"]] = None
    media: Union[InputMediaPhoto, InputMediaVideo]
    thumbnail: Optional[FileField] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    supports_streaming: Optional[bool] = None

    @model_validator(mode="after")
    def _match_wrapped_item(self) -> "InputPaidMedia":
        if self.type is None:
            self.type = self.media.type
        elif self.type != self.media.type:
            raise ValueError(f"paid media type {self.type!r} does not match wrapped {self.media.type!r} item")

        nested_thumb = getattr(self.media, "thumbnail", None)
        if nested_thumb is not None:
            if self.thumbnail is not None and self.thumbnail != nested_thumb:
                raise ValueError("thumbnail set on both the paid media and its wrapped video")
            self.thumbnail = nested_thumb
        return self

    @field_serializer("media")
    def _serialize_media(self, media: Union[InputMediaPhoto, InputMediaVideo]) -> str:
        return media.media.send_data()

    def get_media(self) -> Optional[RequestFileData]:
        return self.media.get_media() if self.media is not None else None

    def set_upload_media(self, token: str) -> None:
        self.media.set_upload_media(token)


class InputSticker(_InputMediaBase):
    """A sticker to add to a set. Its file goes through the same attach:// rewrite as media."""

    sticker: FileField
    format: Literal["static", "animated", "video"]
    emoji_list: List[str]
    mask_position: Optional[Dict[str, Any]] = None
    keywords: Optional[List[str]] = None

    def get_media(self) -> Optional[RequestFileData]:
        return self.sticker

    def set_upload_media(self, token: str) -> None:
        self.sticker = FileAttach(token)


InputMedia = Union[
    InputMediaPhoto,
    InputMediaVideo,
    InputMediaAnimation,
    InputMediaAudio,
    InputMediaDocument,
    InputPaidMedia,
]

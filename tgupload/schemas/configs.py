from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..uploads.data import RequestFile, RequestFileData
from ..uploads.media_attach import (
    media_upload_payload,
    prepare_input_media_for_files,
    prepare_input_media_for_params,
)
from ..uploads.payload import UploadPayload
from .media import InputMedia, InputPaidMedia, InputSticker
from .params import Params


class _Config(BaseModel):
    """Base for request configs: an API method name plus its params and files."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api_method: ClassVar[str] = ""

    def method(self) -> str:
        return self.api_method

    def params(self) -> Params:
        return Params()

    def files(self) -> List[RequestFile]:
        return []


class _BaseChat(_Config):
    chat_id: Union[int, str]
    business_connection_id: Optional[str] = None
    message_thread_id: Optional[int] = None
    disable_notification: bool = False
    protect_content: bool = False
    reply_parameters: Optional[Dict[str, Any]] = None
    reply_markup: Optional[Dict[str, Any]] = None

    def params(self) -> Params:
        params = Params()
        params["chat_id"] = str(self.chat_id)
        params.add_non_empty("business_connection_id", self.business_connection_id)
        params.add_non_zero("message_thread_id", self.message_thread_id)
        params.add_bool("disable_notification", self.disable_notification)
        params.add_bool("protect_content", self.protect_content)
        params.add_json("reply_parameters", self.reply_parameters)
        params.add_json("reply_markup", self.reply_markup)
        return params


class _Caption(BaseModel):
    caption: Optional[str] = None
    parse_mode: Optional[str] = None
    caption_entities: Optional[List[Dict[str, Any]]] = None

    def _add_caption(self, params: Params) -> None:
        params.add_non_empty("caption", self.caption)
        params.add_non_empty("parse_mode", self.parse_mode)
        params.add_json("caption_entities", self.caption_entities)


class _BaseFile(_BaseChat):
    """A chat message carrying one main file, optionally with a thumbnail."""

    file_field: ClassVar[str] = "document"

    file: RequestFileData
    thumbnail: Optional[RequestFileData] = None

    def files(self) -> List[RequestFile]:
        files = [RequestFile(name=self.file_field, data=self.file)]
        if self.thumbnail is not None:
            files.append(RequestFile(name="thumbnail", data=self.thumbnail))
        return files


class PhotoConfig(_BaseFile, _Caption):
    api_method: ClassVar[str] = "sendPhoto"
    file_field: ClassVar[str] = "photo"

    show_caption_above_media: bool = False
    has_spoiler: bool = False

    def params(self) -> Params:
        params = super().params()
        self._add_caption(params)
        params.add_bool("show_caption_above_media", self.show_caption_above_media)
        params.add_bool("has_spoiler", self.has_spoiler)
        return params


class DocumentConfig(_BaseFile, _Caption):
    api_method: ClassVar[str] = "sendDocument"
    file_field: ClassVar[str] = "document"

    disable_content_type_detection: bool = False

    def params(self) -> Params:
        params = super().params()
        self._add_caption(params)
        params.add_bool("disable_content_type_detection", self.disable_content_type_detection)
        return params


class AudioConfig(_BaseFile, _Caption):
    api_method: ClassVar[str] = "sendAudio"
    file_field: ClassVar[str] = "audio"

    duration: Optional[int] = None
    performer: Optional[str] = None
    title: Optional[str] = None

    def params(self) -> Params:
        params = super().params()
        self._add_caption(params)
        params.add_non_zero("duration", self.duration)
        params.add_non_empty("performer", self.performer)
        params.add_non_empty("title", self.title)
        return params


class VideoConfig(_BaseFile, _Caption):
    api_method: ClassVar[str] = "sendVideo"
    file_field: ClassVar[str] = "video"

    cover: Optional[RequestFileData] = None
    start_timestamp: Optional[int] = None
    duration: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    supports_streaming: bool = False
    show_caption_above_media: bool = False
    has_spoiler: bool = False

    def params(self) -> Params:
        params = super().params()
        self._add_caption(params)
        params.add_non_zero("start_timestamp", self.start_timestamp)
        params.add_non_zero("duration", self.duration)
        params.add_non_zero("width", self.width)
        params.add_non_zero("height", self.height)
        params.add_bool("supports_streaming", self.supports_streaming)
        params.add_bool("show_caption_above_media", self.show_caption_above_media)
        params.add_bool("has_spoiler", self.has_spoiler)
        return params

    def files(self) -> List[RequestFile]:
        files = super().files()
        if self.cover is not None:
            files.append(RequestFile(name="cover", data=self.cover))
        return files


class AnimationConfig(_BaseFile, _Caption):
    api_method: ClassVar[str] = "sendAnimation"
    file_field: ClassVar[str] = "animation"

    duration: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    show_caption_above_media: bool = False
    has_spoiler: bool = False

    def params(self) -> Params:
        params = super().params()
        self._add_caption(params)
        params.add_non_zero("duration", self.duration)
        params.add_non_zero("width", self.width)
        params.add_non_zero("height", self.height)
        params.add_bool("show_caption_above_media", self.show_caption_above_media)
        params.add_bool("has_spoiler", self.has_spoiler)
        return params


class VoiceConfig(_BaseFile, _Caption):
    api_method: ClassVar[str] = "sendVoice"
    file_field: ClassVar[str] = "voice"

    duration: Optional[int] = None

    def params(self) -> Params:
        params = super().params()
        self._add_caption(params)
        params.add_non_zero("duration", self.duration)
        return params


class VideoNoteConfig(_BaseFile):
    api_method: ClassVar[str] = "sendVideoNote"
    file_field: ClassVar[str] = "video_note"

    duration: Optional[int] = None
    length: Optional[int] = None

    def params(self) -> Params:
        params = super().params()
        params.add_non_zero("duration", self.duration)
        params.add_non_zero("length", self.length)
        return params


class StickerConfig(_BaseFile):
    api_method: ClassVar[str] = "sendSticker"
    file_field: ClassVar[str] = "sticker"

    emoji: Optional[str] = None

    def params(self) -> Params:
        params = super().params()
        params.add_non_empty("emoji", self.emoji)
        return params


class MediaGroupConfig(_BaseChat):
    """sendMediaGroup: several photos/videos/documents/audios in one message."""

    api_method: ClassVar[str] = "sendMediaGroup"

    media: List[InputMedia] = Field(default_factory=list)

    def params(self) -> Params:
        params = super().params()
        params.add_json("media", prepare_input_media_for_params(self.media))
        return params

    def files(self) -> List[RequestFile]:
        return prepare_input_media_for_files(self.media)

    def file_payload(self) -> UploadPayload:
        return media_upload_payload(self.media)


class EditMessageMediaConfig(_Config):
    api_method: ClassVar[str] = "editMessageMedia"

    media: InputMedia
    chat_id: Optional[Union[int, str]] = None
    message_id: Optional[int] = None
    inline_message_id: Optional[str] = None
    business_connection_id: Optional[str] = None
    reply_markup: Optional[Dict[str, Any]] = None

    def params(self) -> Params:
        params = Params()
        if self.inline_message_id:
            params["inline_message_id"] = self.inline_message_id
        else:
            params.add_first_valid("chat_id", self.chat_id)
            params.add_non_zero("message_id", self.message_id)
        params.add_non_empty("business_connection_id", self.business_connection_id)
        params.add_json("reply_markup", self.reply_markup)
        params.add_json("media", prepare_input_media_for_params([self.media])[0])
        return params

    def files(self) -> List[RequestFile]:
        return prepare_input_media_for_files([self.media])

    def file_payload(self) -> UploadPayload:
        return media_upload_payload([self.media])


class PaidMediaConfig(_BaseChat, _Caption):
    api_method: ClassVar[str] = "sendPaidMedia"

    star_count: int
    media: List[InputPaidMedia] = Field(default_factory=list)
    payload: Optional[str] = None
    show_caption_above_media: bool = False

    def params(self) -> Params:
        params = super().params()
        params.add_non_zero("star_count", self.star_count)
        params.add_non_empty("payload", self.payload)
        self._add_caption(params)
        params.add_bool("show_caption_above_media", self.show_caption_above_media)
        params.add_json("media", prepare_input_media_for_params(self.media))
        return params

    def files(self) -> List[RequestFile]:
        return prepare_input_media_for_files(self.media)

    def file_payload(self) -> UploadPayload:
        return media_upload_payload(self.media)


class WebhookConfig(_Config):
    api_method: ClassVar[str] = "setWebhook"

    url: str
    certificate: Optional[RequestFileData] = None
    ip_address: Optional[str] = None
    max_connections: Optional[int] = None
    allowed_updates: Optional[List[str]] = None
    drop_pending_updates: bool = False
    secret_token: Optional[str] = None

    def params(self) -> Params:
        params = Params()
        params["url"] = self.url
        params.add_non_empty("ip_address", self.ip_address)
        params.add_non_zero("max_connections", self.max_connections)
        params.add_json("allowed_updates", self.allowed_updates)
        params.add_bool("drop_pending_updates", self.drop_pending_updates)
        params.add_non_empty("secret_token", self.secret_token)
        return params

    def files(self) -> List[RequestFile]:
        if self.certificate is None:
            return []
        return [RequestFile(name="certificate", data=self.certificate)]


class SetChatPhotoConfig(_Config):
    api_method: ClassVar[str] = "setChatPhoto"

    chat_id: Union[int, str]
    photo: RequestFileData

    def params(self) -> Params:
        params = Params()
        params["chat_id"] = str(self.chat_id)
        return params

    def files(self) -> List[RequestFile]:
        return [RequestFile(name="photo", data=self.photo)]


class UploadStickerConfig(_Config):
    """uploadStickerFile: store a sticker file for later use in a set."""

    api_method: ClassVar[str] = "uploadStickerFile"

    user_id: int
    sticker: RequestFileData
    sticker_format: str

    def params(self) -> Params:
        params = Params()
        params.add_non_zero("user_id", self.user_id)
        params["sticker_format"] = self.sticker_format
        return params

    def files(self) -> List[RequestFile]:
        return [RequestFile(name="sticker", data=self.sticker)]


class NewStickerSetConfig(_Config):
    """createNewStickerSet: each uploaded sticker becomes its own attach:// part."""

    api_method: ClassVar[str] = "createNewStickerSet"

    user_id: int
    name: str
    title: str
    stickers: List[InputSticker] = Field(default_factory=list)
    sticker_type: Optional[str] = None
    needs_repainting: bool = False

    def params(self) -> Params:
        params = Params()
        params.add_non_zero("user_id", self.user_id)
        params["name"] = self.name
        params["title"] = self.title
        params.add_bool("needs_repainting", self.needs_repainting)
        params.add_non_empty("sticker_type", self.sticker_type)
        params.add_json("stickers", prepare_input_media_for_params(self.stickers))
        return params

    def files(self) -> List[RequestFile]:
        return prepare_input_media_for_files(self.stickers)

    def file_payload(self) -> UploadPayload:
        return media_upload_payload(self.stickers)


class AddStickerConfig(_Config):
    api_method: ClassVar[str] = "addStickerToSet"

    user_id: int
    name: str
    sticker: InputSticker

    def params(self) -> Params:
        params = Params()
        params.add_non_zero("user_id", self.user_id)
        params["name"] = self.name
        params.add_json("sticker", prepare_input_media_for_params([self.sticker])[0])
        return params

    def files(self) -> List[RequestFile]:
        return prepare_input_media_for_files([self.sticker])

    def file_payload(self) -> UploadPayload:
        return media_upload_payload([self.sticker])


class SetStickerSetThumbConfig(_Config):
    api_method: ClassVar[str] = "setStickerSetThumbnail"

    name: str
    user_id: int
    format: str
    thumbnail: Optional[RequestFileData] = None

    def params(self) -> Params:
        params = Params()
        params["name"] = self.name
        params["format"] = self.format
        params.add_non_zero("user_id", self.user_id)
        return params

    def files(self) -> List[RequestFile]:
        if self.thumbnail is None:
            return []
        return [RequestFile(name="thumbnail", data=self.thumbnail)]

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from tgupload.schemas.configs import (
    AddStickerConfig,
    EditMessageMediaConfig,
    MediaGroupConfig,
    NewStickerSetConfig,
    PaidMediaConfig,
    SetStickerSetThumbConfig,
    UploadStickerConfig,
)
from tgupload.schemas.media import (
    InputMediaAudio,
    InputMediaDocument,
    InputMediaPhoto,
    InputMediaVideo,
    InputPaidMedia,
    InputSticker,
)
from tgupload.uploads import (
    FileAttach,
    FileBytes,
    FileID,
    FileURL,
    attach_name,
    attach_token,
    clone_input_media,
    media_upload_payload,
    payload_from_fileable,
    prepare_input_media,
    prepare_input_media_for_files,
    prepare_input_media_for_params,
)


def _snapshot(items):
    return [dict(item.__dict__) for item in items]


def test_prepare_input_media():
    photo = InputMediaPhoto(media=FileBytes(name="image.png", data=b"media"))
    video = InputMediaVideo(media=FileBytes(name="video.mp4", data=b"clip"))
    video.thumbnail = FileBytes(name="thumb.jpg", data=b"thumb")

    prepared, payload = prepare_input_media([photo, video])

    assert prepared[0].get_media().send_data() == "attach://file-0"
    assert prepared[1].get_media().send_data() == "attach://file-1"
    assert prepared[1].get_thumb().send_data() == "attach://file-1-thumb"

    names = [f.name for f in payload.files_slice()]
    assert names == ["file-0", "file-1", "file-1-thumb"]


def test_tokens_match_file_names_for_every_slot():
    items = [
        InputMediaDocument(media=FileBytes(name="a.txt", data=b"a"), thumbnail=FileBytes(name="a.jpg", data=b"t")),
        InputMediaPhoto(media=FileID("existing")),
        InputMediaAudio(media=FileURL("https://example.com/a.mp3"), thumbnail=FileBytes(name="c.jpg", data=b"t")),
        InputMediaVideo(media=FileBytes(name="d.mp4", data=b"d")),
    ]

    prepared = prepare_input_media_for_params(items)
    files = prepare_input_media_for_files(items)

    tokens = []
    for item in prepared:
        for value in (item.get_media(), item.get_thumb()):
            if isinstance(value, FileAttach):
                tokens.append(value.token)

    assert tokens == ["attach://" + f.name for f in files]
    assert [f.name for f in files] == ["file-0", "file-0-thumb", "file-2-thumb", "file-3"]
    # Named files carry the caller's original data, not the rewritten token
    assert files[0].data is items[0].media


def test_references_are_not_renamed():
    items = [InputMediaPhoto(media=FileID("photo-id")), InputMediaVideo(media=FileURL("https://example.com/v.mp4"))]

    prepared = prepare_input_media_for_params(items)

    assert prepared[0].media == FileID("photo-id")
    assert prepared[1].media == FileURL("https://example.com/v.mp4")
    assert prepare_input_media_for_files(items) == []


def test_rewrite_leaves_caller_media_untouched():
    photo_data = FileBytes(name="image.png", data=b"media")
    thumb_data = FileBytes(name="thumb.jpg", data=b"thumb")
    items = [
        InputMediaPhoto(media=photo_data, caption="hi"),
        InputMediaVideo(media=FileBytes(name="video.mp4", data=b"clip"), thumbnail=thumb_data),
    ]
    before = _snapshot(items)

    prepare_input_media(items)

    assert _snapshot(items) == before
    assert items[0].media is photo_data
    assert items[1].thumbnail is thumb_data


def test_paid_media_clone_copies_nested_media():
    nested = InputMediaVideo(media=FileBytes(name="v.mp4", data=b"v"))
    paid = InputPaidMedia(type="video", media=nested, thumbnail=FileBytes(name="t.jpg", data=b"t"))

    clone = clone_input_media(paid)
    assert clone is not paid
    assert clone.media is not nested

    prepared = prepare_input_media_for_params([paid])
    assert prepared[0].get_media() == FileAttach("attach://file-0")
    assert prepared[0].get_thumb() == FileAttach("attach://file-0-thumb")
    assert nested.media == FileBytes(name="v.mp4", data=b"v")
    assert paid.thumbnail == FileBytes(name="t.jpg", data=b"t")


def test_clone_none_and_unknown_types():
    assert clone_input_media(None) is None
    with pytest.raises(TypeError):
        clone_input_media(object())


def test_attach_naming():
    assert attach_name(3) == "file-3"
    assert attach_name(3, thumb=True) == "file-3-thumb"
    assert attach_token(0) == "attach://file-0"
    assert attach_token(0, thumb=True) == "attach://file-0-thumb"


def test_media_group_params_reference_uploaded_parts():
    photo = InputMediaPhoto(media=FileID("photo-id"), caption="first")
    video = InputMediaVideo(
        media=FileBytes(name="video.mp4", data=b"clip"),
        thumbnail=FileBytes(name="thumb.jpg", data=b"thumb"),
        supports_streaming=True,
    )
    config = MediaGroupConfig(chat_id=42, media=[photo, video])

    params = config.params()

    assert config.method() == "sendMediaGroup"
    assert json.loads(params["media"]) == [
        {"type": "photo", "media": "photo-id", "caption": "first"},
        {
            "type": "video",
            "media": "attach://file-1",
            "thumbnail": "attach://file-1-thumb",
            "supports_streaming": True,
        },
    ]
    payload = payload_from_fileable(config)
    assert [f.name for f in payload.files_slice()] == ["file-1", "file-1-thumb"]
    assert payload.inline_values() == {}
    # Caller's items still hold their upload data
    assert video.media == FileBytes(name="video.mp4", data=b"clip")


def test_edit_message_media_has_no_stray_thumbnail_field():
    media = InputMediaDocument(media=FileBytes(name="doc.txt", data=b"doc"), thumbnail=FileID("thumb-id"))
    config = EditMessageMediaConfig(chat_id=7, message_id=99, media=media)

    params = payload_from_fileable(config).apply_inline(config.params())

    assert "thumbnail" not in params
    assert json.loads(params["media"]) == {"type": "document", "media": "attach://file-0", "thumbnail": "thumb-id"}
    assert params["message_id"] == "99"
    assert [f.name for f in payload_from_fileable(config).files_slice()] == ["file-0"]


def test_paid_media_config_params():
    config = PaidMediaConfig(
        chat_id=5,
        star_count=10,
        media=[
            InputPaidMedia(type="photo", media=InputMediaPhoto(media=FileBytes(name="p.jpg", data=b"p"))),
            InputPaidMedia(type="photo", media=InputMediaPhoto(media=FileID("paid-id"))),
        ],
    )

    params = config.params()

    assert params["star_count"] == "10"
    assert json.loads(params["media"]) == [
        {"type": "photo", "media": "attach://file-0"},
        {"type": "photo", "media": "paid-id"},
    ]
    assert [f.name for f in config.files()] == ["file-0"]


def test_paid_media_adopts_thumbnail_of_wrapped_video():
    thumb = FileBytes(name="t.jpg", data=b"t")
    config = PaidMediaConfig(
        chat_id=5,
        star_count=1,
        media=[InputPaidMedia(type="video", media=InputMediaVideo(media=FileBytes(name="v.mp4", data=b"v"), thumbnail=thumb))],
    )

    assert config.media[0].thumbnail is thumb
    assert [f.name for f in config.files()] == ["file-0", "file-0-thumb"]
    assert json.loads(config.params()["media"]) == [
        {"type": "video", "media": "attach://file-0", "thumbnail": "attach://file-0-thumb"},
    ]


def test_paid_media_rejects_two_different_thumbnails():
    with pytest.raises(ValidationError):
        InputPaidMedia(
            media=InputMediaVideo(media=FileID("v"), thumbnail=FileID("inner")),
            thumbnail=FileID("outer"),
        )


def test_paid_media_type_follows_wrapped_item():
    assert InputPaidMedia(media=InputMediaPhoto(media=FileID("p"))).type == "photo"
    assert InputPaidMedia(media=InputMediaVideo(media=FileID("v"))).type == "video"
    with pytest.raises(ValidationError):
        InputPaidMedia(type="video", media=InputMediaPhoto(media=FileID("p")))


def test_file_payload_does_not_rewrite_media(monkeypatch):
    import tgupload.uploads.media_attach as media_attach

    def _no_clone(media):
        raise AssertionError("file_payload should not clone media")

    monkeypatch.setattr(media_attach, "clone_media_list", _no_clone)
    config = MediaGroupConfig(
        chat_id=1,
        media=[InputMediaPhoto(media=FileBytes(name="a.jpg", data=b"a")), InputMediaPhoto(media=FileID("b"))],
    )

    payload = config.file_payload()

    assert [f.name for f in payload.files_slice()] == ["file-0"]
    assert payload.inline_values() == {}


def test_media_upload_payload_matches_files():
    items = [
        InputMediaDocument(media=FileBytes(name="a.txt", data=b"a"), thumbnail=FileURL("https://example.com/t.jpg")),
        InputMediaVideo(media=FileID("v"), thumbnail=FileBytes(name="t.jpg", data=b"t")),
    ]

    payload = media_upload_payload(items)

    assert payload.files_slice() == prepare_input_media_for_files(items)


def test_new_sticker_set_attaches_each_uploaded_sticker():
    stickers = [
        InputSticker(sticker=FileBytes(name="a.webp", data=b"a"), format="static", emoji_list=["😀"]),
        InputSticker(sticker=FileID("existing"), format="static", emoji_list=["🙂"]),
        InputSticker(sticker=FileBytes(name="c.webm", data=b"c"), format="video", emoji_list=["🎬"], keywords=["clip"]),
    ]
    config = NewStickerSetConfig(user_id=7, name="pack_by_bot", title="Pack", stickers=stickers)

    params = config.params()

    assert config.method() == "createNewStickerSet"
    assert json.loads(params["stickers"]) == [
        {"sticker": "attach://file-0", "format": "static", "emoji_list": ["😀"]},
        {"sticker": "existing", "format": "static", "emoji_list": ["🙂"]},
        {"sticker": "attach://file-2", "format": "video", "emoji_list": ["🎬"], "keywords": ["clip"]},
    ]
    assert [f.name for f in payload_from_fileable(config).files_slice()] == ["file-0", "file-2"]
    assert stickers[0].sticker == FileBytes(name="a.webp", data=b"a")


def test_add_sticker_and_thumbnail_configs():
    add = AddStickerConfig(
        user_id=7,
        name="pack_by_bot",
        sticker=InputSticker(sticker=FileBytes(name="s.webp", data=b"s"), format="static", emoji_list=["😀"]),
    )
    assert json.loads(add.params()["sticker"])["sticker"] == "attach://file-0"
    assert [f.name for f in add.files()] == ["file-0"]

    upload = UploadStickerConfig(user_id=7, sticker=FileBytes(name="s.png", data=b"s"), sticker_format="static")
    assert upload.params() == {"user_id": "7", "sticker_format": "static"}
    assert [f.name for f in payload_from_fileable(upload).files_slice()] == ["sticker"]

    thumb = SetStickerSetThumbConfig(name="pack_by_bot", user_id=7, format="static", thumbnail=FileID("thumb-id"))
    payload = payload_from_fileable(thumb)
    assert not payload.needs_upload()
    assert payload.apply_inline(thumb.params())["thumbnail"] == "thumb-id"
    assert SetStickerSetThumbConfig(name="p", user_id=7, format="static").files() == []

import argparse
import asyncio
import logging
import os
import sys
from typing import List

# Ensure 'tgupload' is importable when running as a script
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tgupload import BotAPI, FilePath
from tgupload.logging_config import configure_logging
from tgupload.schemas.configs import MediaGroupConfig
from tgupload.schemas.media import InputMedia, InputMediaDocument, InputMediaPhoto, InputMediaVideo


logger = logging.getLogger("tgupload.scripts.send_media_group")

_VIDEO_EXTS = {".mp4", ".mov", ".webm", ".mkv"}
_PHOTO_EXTS = {".jpg", ".jpeg", ".png", ".webp"}


def _media_for(path: str) -> InputMedia:
    ext = os.path.splitext(path)[1].lower()
    if ext in _PHOTO_EXTS:
        return InputMediaPhoto(media=FilePath(path))
    if ext in _VIDEO_EXTS:
        return InputMediaVideo(media=FilePath(path), supports_streaming=True)
    return InputMediaDocument(media=FilePath(path))


async def main(chat_id: str, paths: List[str], caption: str | None) -> None:
    media = [_media_for(p) for p in paths]
    if caption and media:
        media[0].caption = caption

    async with BotAPI() as api:
        messages = await api.send(MediaGroupConfig(chat_id=chat_id, media=media))
    logger.info("send_media_group: sent", extra={"chat_id": chat_id, "messages": len(messages or [])})
    print(f"Sent {len(messages or [])} message(s) to {chat_id}.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Upload local files to a chat as one album.")
    parser.add_argument("chat_id")
    parser.add_argument("paths", nargs="+")
    parser.add_argument("--caption")
    args = parser.parse_args()

    configure_logging()
    asyncio.run(main(args.chat_id, args.paths, args.caption))

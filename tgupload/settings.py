from __future__ import annotations

import os

from dotenv import load_dotenv

# Load default .env and optional ENV_FILE override for local runs
load_dotenv()
env_file_override = os.getenv("ENV_FILE")
if env_file_override:
    load_dotenv(env_file_override, override=False)


class Settings:
    def __init__(self) -> None:
        # Bot API
        self.BOT_TOKEN: str | None = os.getenv("BOT_TOKEN")
        # Formatted with token= and method=
        self.BOT_API_ENDPOINT: str = os.getenv("BOT_API_ENDPOINT", "https://api.telegram.org/bot{token}/{method}")
        self.BOT_FILE_ENDPOINT: str = os.getenv("BOT_FILE_ENDPOINT", "https://api.telegram.org/file/bot{token}/{path}")

        # HTTP
        self.HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))
        self.HTTP_CONNECT_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_CONNECT_TIMEOUT_SECONDS", "10"))

        # Uploads
        self.UPLOAD_CHUNK_SIZE: int = int(os.getenv("UPLOAD_CHUNK_SIZE", str(64 * 1024)))
        if self.UPLOAD_CHUNK_SIZE <= 0:
            raise ValueError(f"UPLOAD_CHUNK_SIZE must be positive, got {self.UPLOAD_CHUNK_SIZE}")
        self.DEFAULT_UPLOAD_NAME: str = os.getenv("DEFAULT_UPLOAD_NAME", "file")

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()

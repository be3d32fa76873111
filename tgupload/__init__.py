"""File upload resolution and multipart request assembly for the Bot API."""
from __future__ import annotations

from .uploads import *  # noqa: F401,F403
from .uploads import __all__ as _uploads_all
from .schemas.params import Params
from .services.bot_api import BotAPI, BotAPIError

__all__ = [*_uploads_all, "Params", "BotAPI", "BotAPIError"]

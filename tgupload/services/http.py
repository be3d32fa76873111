from __future__ import annotations

import httpx

from ..settings import settings


def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS, connect=settings.HTTP_CONNECT_TIMEOUT_SECONDS)
    )

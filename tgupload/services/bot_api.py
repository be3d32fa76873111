from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from ..schemas.params import Params
from ..settings import settings
from ..uploads.data import RequestFile
from ..uploads.multipart import build_multipart_payload
from ..uploads.payload import payload_from_fileable
from .http import create_http_client


logger = logging.getLogger("tgupload.bot_api")


class BotAPIError(RuntimeError):
    def __init__(self, method: str, error_code: Optional[int], description: str, parameters: Optional[Dict[str, Any]] = None) -> None:
        self.method = method
        self.error_code = error_code
        self.description = description
        self.parameters = parameters or {}
        super().__init__(f"{method} failed ({error_code}): {description}")


class BotAPI:
    """Sends request configs to the Bot API over an `httpx.AsyncClient`.

    Requests that carry uploads go out as a streamed multipart body; anything
    else is a plain urlencoded form. Retries are left to the caller.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        endpoint: Optional[str] = None,
        file_endpoint: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.token = token or settings.BOT_TOKEN
        if not self.token:
            raise ValueError("BotAPI requires a token. Pass one or set BOT_TOKEN")
        self.endpoint = endpoint or settings.BOT_API_ENDPOINT
        self.file_endpoint = file_endpoint or settings.BOT_FILE_ENDPOINT
        self._http = http
        self._owns_http = http is None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = create_http_client()
        return self._http

    def method_url(self, method: str) -> str:
        return self.endpoint.format(token=self.token, method=method)

    def file_url(self, file_path: str) -> str:
        """Download URL for a `file_path` returned by getFile."""
        return self.file_endpoint.format(token=self.token, path=file_path)

    async def send(self, config: Any) -> Any:
        """Send a request config (anything with `method()` and `params()`)."""
        params = config.params()
        if not callable(getattr(config, "files", None)):
            return await self.request(config.method(), params)

        payload = payload_from_fileable(config)
        params = payload.apply_inline(params)
        return await self.request(config.method(), params, payload.files_slice())

    async def request(self, method: str, params: Optional[Params] = None, files: Optional[Sequence[RequestFile]] = None) -> Any:
        url = self.method_url(method)
        if files:
            multipart = build_multipart_payload(params, list(files))
            try:
                logger.info("bot_api.request: uploading", extra={"method": method, "uploads": len(multipart.descriptors)})
                resp = await self.http.post(url, content=multipart.aiter_bytes(), headers={"Content-Type": multipart.content_type})
            finally:
                multipart.close()
        else:
            logger.info("bot_api.request: sending", extra={"method": method})
            resp = await self.http.post(url, data=dict(params or {}))
        return self._unwrap(method, resp)

    def _unwrap(self, method: str, resp: httpx.Response) -> Any:
        try:
            body = resp.json()
        except ValueError as ex:
            raise BotAPIError(method, resp.status_code, f"invalid JSON response: {resp.text[:200]}") from ex
        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description", "unknown error") if isinstance(body, dict) else "unknown error"
            error_code = body.get("error_code", resp.status_code) if isinstance(body, dict) else resp.status_code
            parameters = body.get("parameters") if isinstance(body, dict) else None
            logger.warning("bot_api.request: API error", extra={"method": method, "error_code": error_code, "description": description})
            raise BotAPIError(method, error_code, description, parameters)
        return body.get("result")

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "BotAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

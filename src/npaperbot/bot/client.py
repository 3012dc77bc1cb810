"""Minimal asynchronous Telegram Bot API client built on httpx."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config.settings import settings
from ..core.exceptions import TransportError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class TelegramClient:
    """
    Telegram Bot API client.

    Only the handful of methods the bot needs are wrapped.  Every call
    returns the ``result`` member of the API envelope and raises
    :class:`TransportError` when the API reports ``ok: false`` or cannot
    be reached.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        token = token or settings.teloxide_token
        if not token:
            raise ValueError("TELOXIDE_TOKEN env variable missing")
        self.token = token
        self.base_url = f"{(api_url or settings.telegram_api_url).rstrip('/')}/bot{token}"
        # Long polling holds the request open for poll_timeout seconds.
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.poll_timeout + 10.0, connect=10.0),
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _post(self, method: str, payload: Dict[str, Any]) -> httpx.Response:
        return await self.client.post(f"{self.base_url}/{method}", json=payload)

    async def call(self, method: str, **params: Any) -> Any:
        """Invoke a Bot API method and return its result."""
        payload = {key: value for key, value in params.items() if value is not None}
        try:
            response = await self._post(method, payload)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} failed: {e!r}") from e
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(f"{method} returned HTTP {response.status_code} without JSON") from e
        if not body.get("ok"):
            raise TransportError(f"{method} failed: {body.get('description', 'unknown error')}")
        return body.get("result")

    async def get_me(self) -> Dict[str, Any]:
        return await self.call("getMe")

    async def get_updates(self, offset: Optional[int] = None, timeout: int = 0) -> List[Dict[str, Any]]:
        return await self.call(
            "getUpdates",
            offset=offset,
            timeout=timeout,
            allowed_updates=["message"],
        )

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: Optional[int] = None,
        parse_mode: Optional[str] = "MarkdownV2",
    ) -> Dict[str, Any]:
        return await self.call(
            "sendMessage",
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
            reply_to_message_id=reply_to_message_id,
        )

    async def set_webhook(self, url: str) -> bool:
        return await self.call("setWebhook", url=url, allowed_updates=["message"])

    async def delete_webhook(self) -> bool:
        return await self.call("deleteWebhook")

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "TelegramClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

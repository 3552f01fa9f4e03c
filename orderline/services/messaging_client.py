"""
Messaging Client

Thin async client for the LINE Messaging API: download message content and
send replies.
"""

import logging
from typing import Optional

import httpx

from orderline.errors import DeliveryFailure, UpstreamFetchError

logger = logging.getLogger(__name__)

LINE_API_BASE = "https://api.line.me"
LINE_DATA_API_BASE = "https://api-data.line.me"


class MessagingClient:
    """Bearer-authenticated calls to the messaging platform."""

    def __init__(
        self,
        access_token: str,
        api_base: str = LINE_API_BASE,
        data_api_base: str = LINE_DATA_API_BASE,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.api_base = api_base.rstrip("/")
        self.data_api_base = data_api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def fetch_content(self, message_id: str) -> bytes:
        """
        Download the binary content of a message (e.g. an audio clip).

        Raises:
            UpstreamFetchError: non-2xx status or transport failure
        """
        url = f"{self.data_api_base}/v2/bot/message/{message_id}/content"
        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._headers)
        except httpx.HTTPError as e:
            raise UpstreamFetchError(
                f"Content fetch failed for message {message_id}: {e}",
                details={"message_id": message_id},
            ) from e

        if not response.is_success:
            raise UpstreamFetchError(
                f"Content fetch for message {message_id} returned {response.status_code}",
                details={"message_id": message_id, "status_code": response.status_code},
            )

        logger.info(f"Fetched {len(response.content)} bytes for message {message_id}")
        return response.content

    async def reply(self, reply_token: str, text: str):
        """
        Send a single text reply.

        Raises:
            DeliveryFailure: non-2xx status or transport failure. Not retried.
        """
        url = f"{self.api_base}/v2/bot/message/reply"
        payload = {
            "replyToken": reply_token,
            "messages": [{"type": "text", "text": text}],
        }
        try:
            async with self._client() as client:
                response = await client.post(url, headers=self._headers, json=payload)
        except httpx.HTTPError as e:
            raise DeliveryFailure(f"Reply failed: {e}") from e

        if not response.is_success:
            raise DeliveryFailure(
                f"Reply returned {response.status_code}: {response.text[:200]}",
                details={"status_code": response.status_code},
            )

        logger.debug(f"Reply sent: {text!r}")

# koshien_digest/notifications/slack_client.py
from typing import Optional

import httpx
from loguru import logger


class DispatchError(Exception):
    """Raised when the digest could not be delivered to the webhook."""

    pass


class SlackWebhookClient:
    """Posts messages to a Slack-style incoming webhook."""

    def __init__(
        self,
        webhook_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.webhook_url = webhook_url
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def post_message(self, text: str) -> None:
        """Post `text` as `{"text": ...}`.

        Raises:
            DispatchError: on transport failure or a non-2xx response.
        """
        logger.info(f"Posting digest to webhook ({len(text)} chars)")
        try:
            response = await self.client.post(self.webhook_url, json={"text": text})
        except httpx.RequestError as e:
            raise DispatchError(f"Request to webhook failed: {e!r}") from e

        if response.is_error:
            raise DispatchError(
                f"Webhook answered HTTP {response.status_code}: {response.text[:200]}"
            )
        logger.success("Digest delivered to webhook.")

    async def close(self):
        await self.client.aclose()

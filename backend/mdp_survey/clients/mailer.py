from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class MailerError(Exception):
    message: str
    status_code: int | None = None
    body: str | None = None

    def __str__(self) -> str:
        return self.message


class MailerClient:
    """Thin client for an HTTP mail relay. Requests are never retried."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._sender = sender
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def send_message(self, *, to: str, subject: str, text: str) -> dict[str, Any]:
        payload = {"from": self._sender, "to": to, "subject": subject, "text": text}
        try:
            response = await self._client.post("/messages", json=payload)
        except httpx.RequestError as exc:
            raise MailerError(f"Mail relay request failed: {exc}") from exc
        if not response.is_success:
            raise MailerError(
                f"Mail relay error {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.text:
            return {}
        return response.json()

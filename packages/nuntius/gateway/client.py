from __future__ import annotations

import logging
from typing import Protocol

import httpx


logger = logging.getLogger("nuntius.gateway")


class MessageGateway(Protocol):
    def send_text(self, instance_name: str, number: str, text: str) -> bool:
        """Send one text message. Returns True when the gateway accepted it."""


class EvolutionClient(MessageGateway):
    """Evolution API (WhatsApp) client used by the reminder scheduler."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 15) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    def send_text(self, instance_name: str, number: str, text: str) -> bool:
        if not self._base_url:
            logger.error("gateway_not_configured instance=%s", instance_name)
            return False
        digits = "".join(ch for ch in str(number or "") if ch.isdigit())
        try:
            response = httpx.post(
                f"{self._base_url}/message/sendText/{instance_name}",
                headers={"apikey": self._api_key},
                json={"number": digits, "text": text, "linkPreview": False},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            logger.error(
                "gateway_send_error instance=%s number=%s error=%s",
                instance_name,
                digits,
                exc,
            )
            return False
        if not response.is_success:
            logger.error(
                "gateway_send_rejected instance=%s number=%s status=%s",
                instance_name,
                digits,
                response.status_code,
            )
            return False
        return True

"""Telegram Bot API provider."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from comms_sdk.core.exceptions import ProviderError, ValidationError
from comms_sdk.core.schemas import TelegramRequest
from comms_sdk.infra.http import request as http_request
from comms_sdk.providers.base import BaseProvider, ProviderConfig

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramBotConfig(ProviderConfig):
    bot_token: str = Field(min_length=1)
    chat_id: str | int | None = None


class TelegramBotProvider(BaseProvider):
    """Send a text message with ``sendMessage``.

    The request ``chatId`` overrides the configured default chat.
    """

    provider_type = "bot"
    config_model = TelegramBotConfig
    request_model = TelegramRequest

    config: TelegramBotConfig

    async def _do_send(self, request: dict[str, Any]) -> str:
        message = self.parse_request(request)
        chat_id = message.chat_id or self.config.chat_id
        if not chat_id:
            msg = "Telegram request must include chatId"
            raise ValidationError(msg, field="chatId")

        body: dict[str, Any] = {"chat_id": chat_id, "text": message.text}
        if message.parse_mode:
            body["parse_mode"] = message.parse_mode
        if message.disable_notification is not None:
            body["disable_notification"] = message.disable_notification
        if message.reply_to_message_id is not None:
            body["reply_to_message_id"] = message.reply_to_message_id

        response = await http_request(
            f"{TELEGRAM_API_BASE}/bot{self.config.bot_token}/sendMessage",
            "POST",
            json=body,
            throw_on_error=False,
        )
        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.is_success and data.get("ok") and data.get("result"):
            return str(data["result"]["message_id"])
        raise ProviderError(
            f"Telegram API error: {data.get('description', response.status_code)}",
            self.id,
            self.channel,
            "API_ERROR",
            status_code=data.get("error_code") or response.status_code,
        )


__all__ = ["TelegramBotConfig", "TelegramBotProvider"]

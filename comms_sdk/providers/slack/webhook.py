"""Slack incoming webhook provider."""

from __future__ import annotations

from typing import Any

from comms_sdk.core.exceptions import ConfigurationError, ProviderError
from comms_sdk.core.schemas import SlackRequest
from comms_sdk.infra.http import request as http_request
from comms_sdk.providers.base import BaseProvider, ProviderConfig


class SlackWebhookConfig(ProviderConfig):
    webhook_url: str | None = None


class SlackWebhookProvider(BaseProvider):
    """Post a message to a Slack incoming webhook.

    The request may carry its own ``webhookUrl``, which takes precedence over
    the configured one. Slack webhooks return no message id, so an empty
    string is returned on success.
    """

    provider_type = "webhook"
    config_model = SlackWebhookConfig
    request_model = SlackRequest

    config: SlackWebhookConfig

    async def _do_send(self, request: dict[str, Any]) -> str:
        slack = self.parse_request(request)
        webhook_url = slack.webhook_url or self.config.webhook_url
        if not webhook_url:
            msg = f"{self.id} has no webhookUrl configured and the request did not provide one"
            raise ConfigurationError(msg, "INVALID_PROVIDER_CONFIG")

        body = slack.model_dump(
            by_alias=True,
            exclude={"webhook_url", "id", "user_id"},
            exclude_none=True,
        )
        response = await http_request(webhook_url, "POST", json=body, throw_on_error=False)
        if response.is_success:
            return ""
        raise ProviderError(
            f"Slack webhook error: {response.text}",
            self.id,
            self.channel,
            "API_ERROR",
            status_code=response.status_code,
        )


__all__ = ["SlackWebhookConfig", "SlackWebhookProvider"]

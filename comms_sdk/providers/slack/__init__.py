"""Slack providers."""

from __future__ import annotations

from .webhook import SlackWebhookProvider

__all__ = ["SlackWebhookProvider"]

"""Telegram providers."""

from __future__ import annotations

from .bot import TelegramBotProvider

__all__ = ["TelegramBotProvider"]

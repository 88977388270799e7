"""Notification channels."""
from __future__ import annotations

from ..config import NotificationsConfig
from ..interfaces.notifier import Notifier
from .telegram import TelegramNotifier

__all__ = ["TelegramNotifier", "build_notifiers"]


def build_notifiers(config: NotificationsConfig) -> list[Notifier]:
    notifiers: list[Notifier] = []
    if config.telegram.enabled:
        notifiers.append(TelegramNotifier(config.telegram))
    return notifiers

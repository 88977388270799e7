"""Notifier protocol: where capture logs and capture alerts are delivered."""
from typing import Protocol


class Notifier(Protocol):
    """Channel for capture summaries (logs) and risk events (alerts)."""

    async def send_alert(self, message: str, subject: str = "") -> bool: ...

    async def send_log(self, message: str, silent: bool = True) -> bool: ...

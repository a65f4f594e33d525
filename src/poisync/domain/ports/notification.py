"""Port for best-effort operator notifications."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """Delivers a plain-text message. Implementations must never raise."""

    def notify(self, message: str) -> None: ...

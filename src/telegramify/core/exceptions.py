"""Shared error hierarchy.

Transient/permanent mixins let integrations classify failures once so that
retry decorators and fallbacks agree on what is worth retrying.
"""

from __future__ import annotations

from typing import Optional


class TelegramifyError(Exception):
    """Base error for the telegramify package."""

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class TransientError(Exception):
    """Mixin for failures that may succeed when retried."""

    recoverable = True
    severity = "warning"


class PermanentError(Exception):
    """Mixin for failures that will not succeed when retried."""

    recoverable = False
    severity = "error"


class ConfigError(TelegramifyError):
    """Raised when render configuration is unreadable or invalid."""

from __future__ import annotations

from typing import Optional

from ...core.exceptions import PermanentError, TelegramifyError, TransientError


class MermaidRenderError(TelegramifyError):
    """Diagram could not be rendered to an image."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        user_message: Optional[str] = None,
    ) -> None:
        if user_message is None:
            user_message = "Diagram rendering failed; sending the source instead."
        super().__init__(message, user_message=user_message)
        self.status_code = status_code


class MermaidTransientError(MermaidRenderError, TransientError):
    """Retryable rendering failure (network errors, 5xx, rate limits)."""


class MermaidPermanentError(MermaidRenderError, PermanentError):
    """Non-retryable rendering failure (rejected diagram, non-image payload)."""

    recoverable = PermanentError.recoverable
    severity = PermanentError.severity

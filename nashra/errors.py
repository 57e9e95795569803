"""
Error types raised by the summary and briefing client.

Every error carries a message key that the locale catalog turns into the
text shown to the reader.
"""

from typing import Optional


class NashraError(Exception):
    """Base class for errors surfaced to the reader."""

    message_key = "unexpected_error"

    def __init__(self, detail: str = "", message_key: Optional[str] = None):
        super().__init__(detail or self.message_key)
        self.detail = detail
        if message_key:
            self.message_key = message_key


class ConfigurationError(NashraError):
    """No credential is available for the generative model."""

    message_key = "missing_api_key"


class UpstreamError(NashraError):
    """The model call failed, returned nothing, or returned an unusable payload."""

    message_key = "briefing_failed"

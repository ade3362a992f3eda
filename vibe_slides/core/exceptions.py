"""Error types raised by the Vibe Slides client."""
from typing import Optional


class VibeSlidesError(Exception):
    """Base class for all client errors."""


class ConfigurationError(VibeSlidesError):
    """Required configuration is missing or invalid."""


class UsageError(VibeSlidesError):
    """The caller supplied unusable input (e.g. an empty prompt)."""


class RemoteError(VibeSlidesError):
    """The API rejected a request or reported a failed job."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class TransientPollError(VibeSlidesError):
    """A status check failed; the poller retries after its interval."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class PollTimeoutError(VibeSlidesError, TimeoutError):
    """A polling loop passed its deadline without reaching a terminal state."""


class DownloadError(VibeSlidesError):
    """The export file could not be downloaded."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

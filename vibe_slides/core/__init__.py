"""Core configuration module for Vibe Slides."""

from .config import Settings, get_settings
from .exceptions import (
    VibeSlidesError,
    ConfigurationError,
    UsageError,
    RemoteError,
    TransientPollError,
    PollTimeoutError,
    DownloadError,
)
from .logging import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    # Errors
    "VibeSlidesError",
    "ConfigurationError",
    "UsageError",
    "RemoteError",
    "TransientPollError",
    "PollTimeoutError",
    "DownloadError",
]

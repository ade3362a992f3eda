"""Service layer for Vibe Slides."""

from .api_client import VibeSlidesClient
from .downloader import ArtifactDownloader
from .polling import (
    Terminal,
    WaitFor,
    deck_decision,
    export_decision,
    export_wait_interval,
    parse_retry_after,
    poll_deck,
    poll_export,
)
from .orchestrator import DeckPipeline

__all__ = [
    "VibeSlidesClient",
    "ArtifactDownloader",
    "DeckPipeline",
    # Polling
    "Terminal",
    "WaitFor",
    "deck_decision",
    "export_decision",
    "export_wait_interval",
    "parse_retry_after",
    "poll_deck",
    "poll_export",
]

"""Pydantic models and schemas for type-safe data handling."""

from .deck import (
    Deck,
    ExportJob,
    ApiResponse,
    Artifact,
    DeckSummary,
    ExportOptions,
    EXPORT_FORMATS,
    STATUS_COMPLETE,
    STATUS_ERROR,
)

__all__ = [
    # Remote resources
    "Deck",
    "ExportJob",
    "ApiResponse",
    # Local results
    "Artifact",
    "DeckSummary",
    "ExportOptions",
    # Constants
    "EXPORT_FORMATS",
    "STATUS_COMPLETE",
    "STATUS_ERROR",
]

"""Deck and export Pydantic models."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Deck / export lifecycle states reported by the API
STATUS_PENDING = "pending"
STATUS_GENERATING = "generating"
STATUS_COMPLETE = "complete"
STATUS_ERROR = "error"

EXPORT_FORMATS = ("pdf", "pptx", "png")


class Deck(BaseModel):
    """A remote deck as returned by ``POST /v1/decks`` and ``GET /v1/decks/{id}``."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default="", description="Opaque deck identifier")
    name: Optional[str] = Field(default=None, description="Deck name")
    status: str = Field(default=STATUS_PENDING, description="Lifecycle status")
    slides_count: int = Field(default=0, ge=0, description="Total slides planned")
    slides_complete: int = Field(default=0, ge=0, description="Slides rendered so far")
    error: Optional[str] = Field(default=None, description="Failure reason")

    @field_validator("slides_count", "slides_complete", mode="before")
    @classmethod
    def null_count_is_zero(cls, v):
        return 0 if v is None else v

    @property
    def is_ready(self) -> bool:
        """Generation finished and every slide has been rendered."""
        return (
            self.status == STATUS_COMPLETE
            and self.slides_count > 0
            and self.slides_complete >= self.slides_count
        )

    @property
    def has_failed(self) -> bool:
        return self.status == STATUS_ERROR


class ExportJob(BaseModel):
    """An export job scoped to a deck."""

    model_config = ConfigDict(extra="ignore")

    export_id: Optional[str] = Field(default=None, description="Export identifier")
    status: Optional[str] = Field(default=None, description="Export status")
    progress: float = Field(default=0, description="Progress percentage (0-100)")
    download_url: Optional[str] = Field(default=None, description="File URL once finished")
    error: Optional[str] = Field(default=None, description="Failure reason")

    @field_validator("progress", mode="before")
    @classmethod
    def null_progress_is_zero(cls, v):
        return 0 if v is None else v

    @property
    def is_finished(self) -> bool:
        """Either signal is enough: some exports publish the URL before the status flips."""
        return self.status == STATUS_COMPLETE or bool(self.download_url)

    @property
    def has_failed(self) -> bool:
        return self.status == STATUS_ERROR


@dataclass
class ApiResponse:
    """Raw API response: JSON body when parseable, otherwise the text."""
    status: int
    headers: dict = field(default_factory=dict)
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status == 200


@dataclass
class Artifact:
    """A downloaded export file."""
    path: Path
    size_bytes: int
    format: str

    @property
    def size_kb(self) -> float:
        return round(self.size_bytes / 1024, 1)


class DeckSummary(BaseModel):
    """Machine-readable result printed to stdout."""

    id: str
    name: Optional[str] = None
    slides: int = 0
    format: Optional[str] = None
    file: Optional[str] = None
    url: str

    def to_json(self) -> str:
        """Serialize to a single JSON line, dropping export fields when absent."""
        return self.model_dump_json(exclude_none=True)


@dataclass
class ExportOptions:
    """Per-run choices for deck creation and export."""
    name: Optional[str] = None
    format: str = "pdf"
    upscale: bool = False
    out_dir: Path = Path(".")
    filename: Optional[str] = None
    skip_export: bool = False

    @property
    def extension(self) -> str:
        return "pptx" if self.format == "pptx" else "pdf"

    def output_path(self, deck_id: str) -> Path:
        """Absolute destination for the downloaded export."""
        stem = self.filename or f"deck-{deck_id[:8]}"
        return (Path(self.out_dir) / f"{stem}.{self.extension}").resolve()

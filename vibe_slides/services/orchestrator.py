"""Deck pipeline: create, wait, export, wait, download."""

import logging
from typing import Optional

from ..core.config import Settings
from ..core.exceptions import DownloadError, RemoteError, UsageError
from ..models.deck import DeckSummary, ExportOptions
from .api_client import VibeSlidesClient
from .downloader import ArtifactDownloader
from .polling import poll_deck, poll_export

logger = logging.getLogger(__name__)


class DeckPipeline:
    """Runs the full deck flow against an open ``VibeSlidesClient``.

    Each stage starts only after the previous one reached terminal success;
    any failure propagates and nothing is resumed.
    """

    def __init__(
        self,
        settings: Settings,
        client: VibeSlidesClient,
        downloader: Optional[ArtifactDownloader] = None,
    ):
        self._settings = settings
        self._client = client
        self._downloader = downloader

    @property
    def downloader(self) -> ArtifactDownloader:
        if self._downloader is None:
            self._downloader = ArtifactDownloader(
                self._client.http_session,
                timeout=self._settings.download_timeout,
                max_redirects=self._settings.max_redirects,
            )
        return self._downloader

    async def run(self, prompt: str, options: ExportOptions) -> DeckSummary:
        prompt = (prompt or "").strip()
        if not prompt:
            raise UsageError("A prompt is required")

        # 1. Create deck
        logger.info("Creating deck...")
        deck = await self._client.create_deck(prompt, options.name)
        logger.info(f'Deck created: id={deck.id}, name="{deck.name}", status={deck.status}')
        if not deck.id:
            raise RemoteError("Deck created without an id")

        # 2. Wait for generation
        completed = await poll_deck(
            self._client,
            deck.id,
            interval=self._settings.poll_deck_interval,
            timeout=self._settings.timeout,
        )

        summary = DeckSummary(
            id=deck.id,
            name=deck.name,
            slides=completed.slides_count,
            url=self._settings.deck_url(deck.id),
        )
        if options.skip_export:
            return summary

        # 3. Export
        logger.info(f"Starting {options.format.upper()} export...")
        export_job = await self._client.start_export(deck.id, options.format, options.upscale)
        if not export_job.export_id:
            raise RemoteError("Export started without an export_id")
        logger.info(f"Export started: id={export_job.export_id}")

        # 4. Wait for export
        finished = await poll_export(
            self._client,
            deck.id,
            export_job.export_id,
            interval=self._settings.poll_export_interval,
            timeout=self._settings.timeout,
        )
        if not finished.download_url:
            raise DownloadError("No download URL in export response")

        # 5. Download
        out_path = options.output_path(deck.id)
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DownloadError(f"Cannot create output directory {out_path.parent}: {e}") from e

        logger.info(f"Downloading {options.extension.upper()}...")
        artifact = await self.downloader.download(finished.download_url, out_path)
        logger.info(f"Saved: {artifact.path} ({artifact.size_kb:.1f} KB)")

        summary.format = options.extension
        summary.file = str(artifact.path)
        return summary

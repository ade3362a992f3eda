"""
Job polling - Waits for deck generation and export jobs to finish.

The decision logic is kept in pure functions (``deck_decision``,
``export_decision``, ``export_wait_interval``) so it can be tested without a
network. The async loops only fetch, decide, log and sleep.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

from ..core.exceptions import PollTimeoutError, RemoteError, TransientPollError
from ..models.deck import Deck, ExportJob, STATUS_COMPLETE

logger = logging.getLogger(__name__)

# Export polling speeds up once the job is at least half done
FAST_POLL_PROGRESS = 50
FAST_POLL_FACTOR = 0.3
MIN_POLL_INTERVAL = 0.3


@dataclass(frozen=True)
class Terminal:
    """No further polling needed."""
    succeeded: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class WaitFor:
    """Poll again after ``seconds``."""
    seconds: float


PollDecision = Union[Terminal, WaitFor]


def parse_retry_after(value: Optional[str], default: float) -> float:
    """Seconds from a ``Retry-After`` header, falling back to ``default``."""
    if value is None:
        return default
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return default
    return seconds if seconds >= 0 else default


def export_wait_interval(progress: float, configured: float) -> float:
    """Full interval below 50% progress, a shorter one once completion is near."""
    if progress >= FAST_POLL_PROGRESS:
        return max(MIN_POLL_INTERVAL, configured * FAST_POLL_FACTOR)
    return configured


def deck_decision(deck: Deck, retry_after: Optional[str], default_interval: float) -> PollDecision:
    if deck.has_failed:
        return Terminal(succeeded=False, error=deck.error or "unknown")
    if deck.is_ready:
        return Terminal(succeeded=True)
    return WaitFor(parse_retry_after(retry_after, default_interval))


def export_decision(job: ExportJob, configured_interval: float) -> PollDecision:
    if job.is_finished:
        return Terminal(succeeded=True)
    if job.has_failed:
        return Terminal(succeeded=False, error=job.error or "unknown")
    return WaitFor(export_wait_interval(job.progress or 0, configured_interval))


async def poll_deck(client, deck_id: str, interval: float, timeout: float) -> Deck:
    """
    Poll a deck until generation and rendering are complete.

    Args:
        client: ``VibeSlidesClient`` (anything with ``get_deck``)
        deck_id: Deck to watch
        interval: Default wait between polls; a ``retry-after`` header wins
        timeout: Wall-clock budget in seconds

    Raises:
        RemoteError: the deck reported ``status=error``
        PollTimeoutError: the deadline passed first
    """
    logger.info("Waiting for deck generation...")
    deadline = time.monotonic() + timeout

    while time.monotonic() < deadline:
        try:
            deck, res = await client.get_deck(deck_id)
        except TransientPollError as e:
            logger.warning(f"  {e}, retrying in {interval}s")
            await asyncio.sleep(interval)
            continue

        decision = deck_decision(deck, res.headers.get("retry-after"), interval)
        if isinstance(decision, Terminal):
            if not decision.succeeded:
                raise RemoteError(f"Deck generation failed: {decision.error}")
            logger.info(f"Deck complete: {deck.slides_count} slides")
            return deck

        if deck.status == STATUS_COMPLETE:
            logger.info(f"  Generation done, rendering: {deck.slides_complete}/{deck.slides_count}")
        else:
            logger.info(
                f"  Status: {deck.status}, slides: {deck.slides_complete}/{deck.slides_count}, "
                f"retry in {decision.seconds:g}s"
            )
        await asyncio.sleep(decision.seconds)

    raise PollTimeoutError(f"Timeout waiting for deck generation after {timeout:g}s")


async def poll_export(client, deck_id: str, export_id: str, interval: float, timeout: float) -> ExportJob:
    """
    Poll an export job until it finishes.

    Failed status checks are logged and retried; only an export reporting
    ``status=error`` or the deadline ends the loop unsuccessfully.
    """
    logger.info("Waiting for export...")
    deadline = time.monotonic() + timeout
    wait = interval

    while time.monotonic() < deadline:
        try:
            job = await client.get_export(deck_id, export_id)
        except TransientPollError as e:
            logger.warning(f"  {e}, retrying...")
            await asyncio.sleep(wait)
            continue

        decision = export_decision(job, interval)
        if isinstance(decision, Terminal):
            if not decision.succeeded:
                raise RemoteError(f"Export failed: {decision.error}")
            logger.info("Export complete!")
            return job

        logger.info(f"  Export progress: {job.progress:g}%")
        wait = decision.seconds
        await asyncio.sleep(wait)

    raise PollTimeoutError(f"Timeout waiting for export after {timeout:g}s")

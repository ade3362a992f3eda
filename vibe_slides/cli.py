#!/usr/bin/env python3
"""
Vibe Slides CLI - Create a presentation deck and export it

Flow:
  1. Create a deck from the prompt
  2. Wait for generation and slide rendering
  3. Start a PDF/PPTX/PNG export
  4. Wait for the export
  5. Download the file

Usage:
    vibe-slides "prompt text" [options]
    echo "prompt" | vibe-slides --stdin [options]

Environment:
    VIBE_API_KEY (required) - API key from https://vibeslides.app/api-keys
    VIBE_API_URL (optional) - API base URL (default: https://api.vibeslides.app)
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.config import Settings, get_settings
from .core.exceptions import UsageError, VibeSlidesError
from .core.logging import setup_logging
from .models.deck import EXPORT_FORMATS, DeckSummary, ExportOptions
from .services.api_client import VibeSlidesClient
from .services.orchestrator import DeckPipeline

logger = logging.getLogger(__name__)

USAGE_LINES = (
    'Usage: vibe-slides "prompt" [options]',
    '       echo "prompt" | vibe-slides --stdin [options]',
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vibe-slides",
        description="Create presentation decks with the Vibe Slides API and export them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vibe-slides "Quarterly update"                     # Create and export to PDF
  vibe-slides "Roadmap" --format pptx --out decks    # Export to decks/deck-<id>.pptx
  vibe-slides "Pitch" --no-export                    # Only create the deck
  cat notes.txt | vibe-slides --stdin --upscale      # Prompt from stdin
        """
    )

    parser.add_argument(
        "prompt",
        nargs="*",
        help="Prompt text (words are joined with spaces)"
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read the prompt from stdin"
    )
    parser.add_argument(
        "--name",
        type=str,
        help="Deck name (optional)"
    )
    parser.add_argument(
        "--format",
        choices=EXPORT_FORMATS,
        default="pdf",
        help="Export format (default: pdf)"
    )
    parser.add_argument(
        "--upscale",
        action="store_true",
        help="Upscale slide renders before export"
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("."),
        help="Output directory (default: cwd)"
    )
    parser.add_argument(
        "--filename",
        type=str,
        help="Output filename without extension (default: deck-<id>)"
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Skip export, just create the deck"
    )
    parser.add_argument(
        "--poll-deck",
        type=float,
        help="Deck poll interval in seconds (default: 5)"
    )
    parser.add_argument(
        "--poll-export",
        type=float,
        help="Export poll interval in seconds (default: 1)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Max wait per phase in seconds (default: 600)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    return parser


def read_prompt(args: argparse.Namespace) -> str:
    """Prompt from stdin (fully drained) or from the positional words."""
    if args.stdin:
        return sys.stdin.read().strip()
    return " ".join(args.prompt).strip()


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of ``settings`` with command-line values applied."""
    overrides = {
        "poll_deck_interval": args.poll_deck,
        "poll_export_interval": args.poll_export,
        "timeout": args.timeout,
    }
    update = {k: v for k, v in overrides.items() if v is not None}
    for key, value in update.items():
        if value <= 0:
            raise UsageError(f"--{key.replace('_interval', '').replace('_', '-')} must be positive")
    return settings.model_copy(update=update)


async def run(prompt: str, options: ExportOptions, settings: Settings) -> DeckSummary:
    async with VibeSlidesClient(settings) as client:
        pipeline = DeckPipeline(settings, client)
        return await pipeline.run(prompt, options)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        prompt = read_prompt(args)
        if not prompt:
            for line in USAGE_LINES:
                print(line, file=sys.stderr)
            sys.exit(1)

        settings = apply_overrides(get_settings(), args)
        settings.require_api_key()

        options = ExportOptions(
            name=args.name,
            format=args.format,
            upscale=args.upscale,
            out_dir=args.out,
            filename=args.filename,
            skip_export=args.no_export,
        )
        summary = asyncio.run(run(prompt, options, settings))
    except VibeSlidesError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.error("Interrupted")
        sys.exit(130)

    if summary.file:
        print(f"FILE: {summary.file}")
    print(summary.to_json())


if __name__ == "__main__":
    main()

"""
Vibe Slides - Command-line client for the Vibe Slides API

Creates a presentation deck from a text prompt, waits for generation,
exports it to PDF/PPTX/PNG and downloads the result.
"""

__version__ = "1.0.0"

"""Environment-driven defaults for the CLI and web server."""

import logging
import os
from pathlib import Path

from .export import FORMATS

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "html"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

SUFFIXES = {
    "html": ".html",
    "md": ".md",
    "json": ".json",
}


def get_default_format() -> str:
    """Return the output format to use when none is given."""
    env = os.environ.get("TRANSCRIPT_VIEWER_FORMAT")
    if env:
        fmt = env.strip().lower()
        if fmt in FORMATS:
            return fmt
        logger.warning("Ignoring unknown TRANSCRIPT_VIEWER_FORMAT=%r", env)

    return DEFAULT_FORMAT


def get_server_host() -> str:
    """Return the host the web server binds to."""
    return os.environ.get("TRANSCRIPT_VIEWER_HOST") or DEFAULT_HOST


def get_server_port() -> int:
    """Return the port the web server listens on."""
    env = os.environ.get("TRANSCRIPT_VIEWER_PORT")
    if env:
        try:
            return int(env)
        except ValueError:
            logger.warning("Ignoring non-numeric TRANSCRIPT_VIEWER_PORT=%r", env)

    return DEFAULT_PORT


def get_format_for_path(path: Path) -> str | None:
    """Return the format implied by a file's suffix, or None if it implies none."""
    suffix = path.suffix.lower()
    if suffix == ".markdown":
        return "md"
    for fmt, known in SUFFIXES.items():
        if suffix == known or (fmt == "html" and suffix == ".htm"):
            return fmt
    return None


def get_output_path(input_path: Path, fmt: str) -> Path:
    """Return the default output file for a transcript: same name, format suffix.

    When that would be the input file itself, ".rendered" is inserted before the suffix.
    """
    output = input_path.with_suffix(SUFFIXES[fmt])
    if output == input_path:
        output = input_path.with_suffix(".rendered" + SUFFIXES[fmt])
    return output

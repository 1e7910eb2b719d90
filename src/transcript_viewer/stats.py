"""Document metadata and aggregate statistics for parsed transcripts."""

import re
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from .core import Section, Statistics

DEFAULT_TITLE = "Claude Code Session"
DEFAULT_MODEL = "Claude"

# Substring -> display name, checked in order so a later match on the same line wins.
MODEL_FAMILIES = (
    ("Opus", "Claude Opus 4.5"),
    ("Sonnet", "Claude Sonnet"),
)

METADATA_SCAN_LINES = 20

# Inclusive codepoint ranges counted as emoji.
EMOJI_RANGES = (
    (0x1F600, 0x1F64F),  # emoticons
    (0x1F300, 0x1F5FF),  # symbols & pictographs
    (0x1F680, 0x1F6FF),  # transport & map
    (0x2600, 0x26FF),  # misc symbols
    (0x2700, 0x27BF),  # dingbats
    (0xFE00, 0xFE0F),  # variation selectors
    (0x1F900, 0x1F9FF),  # supplemental symbols & pictographs
    (0x1F1E6, 0x1F1FF),  # regional indicators
)

_EMOJI_RE = re.compile(
    "[" + "".join(f"{chr(lo)}-{chr(hi)}" for lo, hi in EMOJI_RANGES) + "]"
)
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
# Windows drive path or POSIX absolute path; not the tail of a URL or relative path.
_PATH_RE = re.compile(r"(?<![\w:/.~])([A-Za-z]:\\\S+|/[^\s/]+/\S*)")


@dataclass
class Metadata:
    """Header information recovered from a transcript."""

    title: str
    date: str
    model: str
    project_path: str


def extract_metadata(lines: list[str], text: str, today: Optional[date] = None) -> Metadata:
    """Scan the head of a transcript for model and project path, and the whole text for a date.

    Args:
        lines: Normalized transcript lines; only the first 20 are examined.
        text: The raw transcript, searched for the first YYYY-MM-DD token.
        today: Fallback date when the text carries none (defaults to today, UTC).
    """
    model = DEFAULT_MODEL
    project_path = ""

    for line in lines[:METADATA_SCAN_LINES]:
        for needle, name in MODEL_FAMILIES:
            if needle in line:
                model = name
        if not project_path:
            match = _PATH_RE.search(line)
            if match:
                project_path = match.group(1)

    match = _DATE_RE.search(text)
    if match:
        found_date = match.group(0)
    else:
        found_date = (today or datetime.now(timezone.utc).date()).isoformat()

    return Metadata(
        title=DEFAULT_TITLE,
        date=found_date,
        model=model,
        project_path=project_path,
    )


def count_emojis(text: str) -> Counter:
    """Count emoji codepoints in text."""
    return Counter(_EMOJI_RE.findall(text))


def calculate_statistics(sections: list[Section]) -> Statistics:
    """Aggregate message, file, code block and emoji counts across sections."""
    stats = Statistics()
    files: set[str] = set()
    emojis: Counter = Counter()

    for section in sections:
        for msg in section.messages:
            stats.total_messages += 1
            if msg.kind == "user":
                stats.user_messages += 1
            elif msg.kind == "assistant":
                stats.assistant_messages += 1
            elif msg.kind == "thinking":
                stats.thinking_messages += 1
            elif msg.kind == "git":
                stats.git_messages += 1
            elif msg.kind == "tool":
                stats.tool_messages += 1
                if msg.file_name:
                    files.add(msg.file_name)

            emojis.update(count_emojis(msg.content))
        stats.code_blocks_count += len(section.code_blocks)

    stats.files_modified = len(files)
    stats.emoji_counts = dict(emojis)
    return stats

"""Strip editor line-number prefixes ("    12→") from transcript lines."""

import re

_LINE_NUMBER_PREFIX = re.compile(r"^\s*\d+→(.*)$", re.ASCII)


def normalize_line(line: str) -> str:
    """Return the line without a leading "<digits>→" prefix, if it has one."""
    match = _LINE_NUMBER_PREFIX.match(line)
    return match.group(1) if match else line


def normalize_lines(text: str) -> list[str]:
    """Split raw text into physical lines and normalize each one."""
    return [normalize_line(line) for line in text.split("\n")]

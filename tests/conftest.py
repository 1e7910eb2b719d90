"""Shared test fixtures for transcript-viewer."""

import pytest

from transcript_viewer.parser import parse_transcript

# A short session as pasted from a terminal with an editor's line-number gutter.
SESSION_LINES = [
    " ▐▛███▜▌   Claude Code v2.0.50",
    "▝▜█████▛▘  Opus 4.5 · Claude Max",
    "  ▘▘ ▝▝    /home/dev/projects/auth-service",
    "",
    "> Fix the token refresh bug",
    "",
    "● I'll look at the auth module first. 🔍",
    "",
    "● Read(src/auth.py)",
    "  ⎿  Read 120 lines",
    "",
    "● Update(src/auth.py)",
    "  ⎿  Updated src/auth.py with 4 additions",
    "",
    "● Bash(git status)",
    "  ⎿  On branch main",
    "",
    "> Can you also add a regression test for the expiry path?",
    "",
    "● Sure, here is the test:",
    "```python",
    "def test_expiry():",
    "    assert refresh(expired) is None",
    "```",
    "  It covers the expired-token branch. ✅",
    "",
    "● Write(tests/test_auth.py)",
    "",
    "● Done 🎉 2025-03-14",
]


def numbered(lines: list[str]) -> str:
    """Join lines with a "     N→" gutter, the way transcripts are often copied."""
    return "\n".join(f"{n:6d}→{line}" for n, line in enumerate(lines, start=1)) + "\n"


@pytest.fixture
def sample_transcript():
    return numbered(SESSION_LINES)


@pytest.fixture
def transcript_file(tmp_path, sample_transcript):
    """Write the sample session to a .txt file."""
    path = tmp_path / "session.txt"
    path.write_text(sample_transcript, encoding="utf-8")
    return path


@pytest.fixture
def parsed(sample_transcript):
    return parse_transcript(sample_transcript)

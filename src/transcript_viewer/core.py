"""Core data models for transcript-viewer."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Message:
    """A single utterance or event within a transcript."""

    kind: str  # "user" | "assistant" | "tool" | "git" | "thinking" | "system"
    content: str
    tool_name: Optional[str] = None
    file_name: Optional[str] = None  # tool argument, e.g. "src/auth.go"
    is_git_action: bool = False


@dataclass
class CodeBlock:
    """A fenced code block."""

    code: str
    language: str = "text"


@dataclass
class FileChange:
    """A file touched by a tool invocation."""

    file_name: str
    type: str  # "read" | "update" | "create" | "search"
    details: str  # the raw line that produced it


@dataclass
class Section:
    """A topical group of consecutive messages."""

    title: str
    messages: list[Message] = field(default_factory=list)
    code_blocks: list[CodeBlock] = field(default_factory=list)
    file_changes: list[FileChange] = field(default_factory=list)


@dataclass
class Statistics:
    """Aggregate counters over a parsed transcript."""

    total_messages: int = 0
    user_messages: int = 0
    assistant_messages: int = 0
    thinking_messages: int = 0
    tool_messages: int = 0
    git_messages: int = 0
    files_modified: int = 0
    code_blocks_count: int = 0
    emoji_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class ParsedConversation:
    """A whole transcript turned into sections plus metadata."""

    title: str
    date: str  # YYYY-MM-DD
    model: str
    project_path: str = ""
    sections: list[Section] = field(default_factory=list)
    statistics: Statistics = field(default_factory=Statistics)

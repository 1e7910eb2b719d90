"""Parse coding-assistant session transcripts into structured documents."""

from .core import CodeBlock, FileChange, Message, ParsedConversation, Section, Statistics
from .parser import TranscriptParser, parse_transcript

__all__ = [
    "CodeBlock",
    "FileChange",
    "Message",
    "ParsedConversation",
    "Section",
    "Statistics",
    "TranscriptParser",
    "parse_transcript",
]

"""Transcript parser: turn a plain-text assistant session log into sections.

Transcript conventions recognized (after line-number prefixes are stripped):
- "> text": user prompt. Following lines up to the next "●" or "> " line belong to it.
- "● Read(path)": tool invocation, for a closed set of tool names.
- "● text": assistant reply.
- "<thinking>", "[thinking]", "thinking:": thinking block.
- "  ⎿  ...": tool output, attached to the preceding tool invocation.
- "```lang" ... "```": fenced code block.
- lines indented by two spaces: continuation of the open message.
Everything else is dropped.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .core import CodeBlock, FileChange, Message, ParsedConversation, Section
from .normalize import normalize_lines
from .stats import calculate_statistics, extract_metadata

logger = logging.getLogger(__name__)

BULLET = "●"
PROMPT_MARKER = "> "
RESULT_GLYPH = "⎿"
FENCE = "```"

TOOL_NAMES = (
    "Read", "Write", "Edit", "Bash", "Grep", "Glob", "Search", "Update",
    "TodoWrite", "MultiEdit", "Task", "WebFetch", "WebSearch", "NotebookEdit",
    "AskUserQuestion", "ExitPlanMode", "EnterPlanMode", "KillShell",
    "TaskOutput", "Skill", "SlashCommand",
)
UPDATE_TOOLS = frozenset({"Write", "Edit", "MultiEdit", "NotebookEdit"})
SEARCH_TOOLS = frozenset({"Grep", "Glob", "Search", "WebSearch"})

FIRST_SECTION_TITLE = "Session Start"
FALLBACK_SECTION_TITLE = "Conversation"
MAJOR_PROMPT_LENGTH = 50
TITLE_WORDS = 6
TITLE_MAX_LENGTH = 50

_TOOL_CALL_RE = re.compile(
    rf"^{BULLET} ({'|'.join(TOOL_NAMES)})\(([^)]*)\)?"
)
_GIT_RE = re.compile(r"\bgit\b")
_THINKING_TAG_RE = re.compile(r"^\s*<thinking>")
_THINKING_MARKER_RE = re.compile(r"^\s*\[thinking\]|^thinking:", re.IGNORECASE)


class LineKind(Enum):
    """What a single transcript line means, in classification priority order."""

    USER_PROMPT = "user_prompt"
    TOOL_CALL = "tool_call"
    ASSISTANT = "assistant"
    THINKING = "thinking"
    TOOL_RESULT = "tool_result"
    CODE_FENCE = "code_fence"
    CODE_BODY = "code_body"
    CONTINUATION = "continuation"
    DISCARD = "discard"


@dataclass
class ToolCall:
    """A recognized "● Tool(argument)" line."""

    name: str
    argument: str
    is_git: bool
    change_type: str


def classify_line(line: str, in_code_block: bool = False) -> LineKind:
    """Return the first matching kind for a line; every line gets one."""
    if line.startswith(PROMPT_MARKER):
        return LineKind.USER_PROMPT
    if _TOOL_CALL_RE.match(line):
        return LineKind.TOOL_CALL
    if line.startswith(BULLET + " "):
        return LineKind.ASSISTANT
    if _THINKING_TAG_RE.match(line) or _THINKING_MARKER_RE.match(line):
        return LineKind.THINKING
    if RESULT_GLYPH in line:
        return LineKind.TOOL_RESULT
    if line.strip().startswith(FENCE):
        return LineKind.CODE_FENCE
    if in_code_block:
        return LineKind.CODE_BODY
    if line.strip() and line.startswith("  "):
        return LineKind.CONTINUATION
    return LineKind.DISCARD


def parse_tool_call(line: str) -> Optional[ToolCall]:
    """Extract tool name and argument from a tool invocation line."""
    match = _TOOL_CALL_RE.match(line)
    if not match:
        return None

    name, argument = match.group(1), match.group(2)
    is_git = name == "Bash" and bool(_GIT_RE.search(argument))
    if name in UPDATE_TOOLS:
        change_type = "update"
    elif name in SEARCH_TOOLS:
        change_type = "search"
    else:
        change_type = "read"
    return ToolCall(name=name, argument=argument, is_git=is_git, change_type=change_type)


def derive_title(text: str) -> str:
    """Build a section title from the first few words of a prompt."""
    title = " ".join(text.split()[:TITLE_WORDS])
    if len(title) > TITLE_MAX_LENGTH:
        title = title[:TITLE_MAX_LENGTH - 3] + "..."
    return title or FALLBACK_SECTION_TITLE


def _is_prompt_boundary(line: str) -> bool:
    return line.startswith(BULLET) or line.startswith(PROMPT_MARKER)


class TranscriptParser:
    """Parser over one transcript.

    Holds the scan state: the section being built, the open message (if any)
    and the code fence buffer. Each call to parse() starts from a clean state.
    """

    def __init__(self, text: str):
        self.text = text
        self.lines = normalize_lines(text)
        self._reset()

    def _reset(self) -> None:
        self.sections: list[Section] = []
        self.current_section = Section(title=FIRST_SECTION_TITLE)
        self.current_message: Optional[Message] = None
        self.in_code_block = False
        self.code_buffer = ""
        self.code_language = ""

    def parse(self) -> ParsedConversation:
        """Scan all lines once and return the parsed document."""
        self._reset()
        i = 0
        while i < len(self.lines):
            i = self._handle_line(i)

        self._flush_message()
        if self.in_code_block:
            logger.warning("Unterminated %s code block dropped (%d chars)",
                           self.code_language, len(self.code_buffer))
        self._close_section()

        meta = extract_metadata(self.lines, self.text)
        statistics = calculate_statistics(self.sections)
        logger.debug("Parsed %d lines into %d sections, %d messages",
                     len(self.lines), len(self.sections), statistics.total_messages)

        return ParsedConversation(
            title=meta.title,
            date=meta.date,
            model=meta.model,
            project_path=meta.project_path,
            sections=self.sections,
            statistics=statistics,
        )

    def _handle_line(self, i: int) -> int:
        """Apply the rule for line i and return the index of the next unread line."""
        line = self.lines[i]
        kind = classify_line(line, self.in_code_block)

        if kind is LineKind.USER_PROMPT:
            prompt, i = self._collect_prompt(i)
            self._start_prompt(prompt)
        elif kind is LineKind.TOOL_CALL:
            self._start_tool_call(line)
        elif kind is LineKind.ASSISTANT:
            self._open_message(Message(kind="assistant", content=line[len(BULLET) + 1:]))
        elif kind is LineKind.THINKING:
            self._open_message(Message(kind="thinking", content=line))
        elif kind is LineKind.TOOL_RESULT:
            if self.current_message and self.current_message.kind in ("tool", "git"):
                self.current_message.content += "\n" + line
        elif kind is LineKind.CODE_FENCE:
            self._toggle_fence(line)
        elif kind is LineKind.CODE_BODY:
            self.code_buffer += line + "\n"
        elif kind is LineKind.CONTINUATION:
            if self.current_message:
                self.current_message.content += "\n" + line

        return i + 1

    def _collect_prompt(self, start: int) -> tuple[str, int]:
        """Gather a prompt and its follow-on lines.

        Returns the trimmed prompt text and the index of its last line.
        """
        parts = [self.lines[start][len(PROMPT_MARKER):]]
        end = start
        while end + 1 < len(self.lines) and not _is_prompt_boundary(self.lines[end + 1]):
            end += 1
            if self.lines[end].strip():
                parts.append(self.lines[end])
        return "\n".join(parts).strip(), end

    def _start_prompt(self, prompt: str) -> None:
        self._flush_message()

        if len(prompt) > MAJOR_PROMPT_LENGTH or "?" in prompt:
            if self.current_section.messages:
                self._close_section()
                self.current_section = Section(title=derive_title(prompt))
                logger.debug("New section: %s", self.current_section.title)
            else:
                # Nothing said yet: the prompt names the section it opens.
                self.current_section.title = derive_title(prompt)

        self.current_message = Message(kind="user", content=prompt)

    def _start_tool_call(self, line: str) -> None:
        call = parse_tool_call(line)
        if call.argument:
            self.current_section.file_changes.append(FileChange(
                file_name=call.argument,
                type=call.change_type,
                details=line,
            ))

        self._open_message(Message(
            kind="git" if call.is_git else "tool",
            content=line,
            tool_name="Git" if call.is_git else call.name,
            file_name=call.argument or None,
            is_git_action=call.is_git,
        ))

    def _toggle_fence(self, line: str) -> None:
        # The open message stays open across a fence; code goes to the buffer only.
        if self.in_code_block:
            self.current_section.code_blocks.append(CodeBlock(
                language=self.code_language,
                code=self.code_buffer.strip(),
            ))
            self.in_code_block = False
            self.code_buffer = ""
        else:
            self.in_code_block = True
            self.code_language = line.strip()[len(FENCE):] or "text"

    def _open_message(self, message: Message) -> None:
        self._flush_message()
        self.current_message = message

    def _flush_message(self) -> None:
        if self.current_message is not None:
            self.current_section.messages.append(self.current_message)
            self.current_message = None

    def _close_section(self) -> None:
        if self.current_section.messages:
            self.sections.append(self.current_section)
        elif self.current_section.code_blocks or self.current_section.file_changes:
            logger.debug("Dropping section %r with no messages", self.current_section.title)


def parse_transcript(text: str) -> ParsedConversation:
    """Parse a full transcript into a ParsedConversation."""
    return TranscriptParser(text).parse()

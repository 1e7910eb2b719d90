"""Export parsed transcripts to HTML, Markdown and JSON formats."""

import html
import json
import re

from .core import Message, ParsedConversation

FORMATS = ("html", "md", "json")

MEDIA_TYPES = {
    "html": "text/html",
    "md": "text/markdown",
    "json": "application/json",
}

KIND_LABELS = {
    "user": "You",
    "assistant": "Claude",
    "git": "Git",
    "thinking": "Thinking",
    "system": "System",
}

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")


def message_label(msg: Message) -> str:
    """Display label for a message, e.g. "You" or the tool name."""
    if msg.kind == "tool":
        return msg.tool_name or "Tool"
    return KIND_LABELS.get(msg.kind, "System")


def conversation_to_dict(doc: ParsedConversation) -> dict:
    """Convert a ParsedConversation to a JSON-serializable dict."""
    stats = doc.statistics
    return {
        "title": doc.title,
        "date": doc.date,
        "model": doc.model,
        "project_path": doc.project_path,
        "sections": [
            {
                "title": section.title,
                "messages": [
                    {
                        "kind": msg.kind,
                        "content": msg.content,
                        "tool_name": msg.tool_name,
                        "file_name": msg.file_name,
                        "is_git_action": msg.is_git_action,
                    }
                    for msg in section.messages
                ],
                "code_blocks": [
                    {"language": block.language, "code": block.code}
                    for block in section.code_blocks
                ],
                "file_changes": [
                    {"file_name": fc.file_name, "type": fc.type, "details": fc.details}
                    for fc in section.file_changes
                ],
            }
            for section in doc.sections
        ],
        "statistics": {
            "total_messages": stats.total_messages,
            "user_messages": stats.user_messages,
            "assistant_messages": stats.assistant_messages,
            "thinking_messages": stats.thinking_messages,
            "tool_messages": stats.tool_messages,
            "git_messages": stats.git_messages,
            "files_modified": stats.files_modified,
            "code_blocks_count": stats.code_blocks_count,
            "emoji_counts": dict(stats.emoji_counts),
        },
    }


def conversation_to_json(doc: ParsedConversation) -> str:
    """Export a parsed transcript as structured JSON."""
    return json.dumps(conversation_to_dict(doc), indent=2, ensure_ascii=False)


def conversation_to_markdown(doc: ParsedConversation) -> str:
    """Export a parsed transcript as clean Markdown."""
    stats = doc.statistics
    lines = [f"# {doc.title}", ""]

    lines.append(f"**Date:** {doc.date}")
    lines.append(f"**Model:** {doc.model}")
    if doc.project_path:
        lines.append(f"**Project:** {doc.project_path}")
    lines.append(
        f"**Messages:** {stats.total_messages} "
        f"({stats.user_messages} user, {stats.assistant_messages} assistant, "
        f"{stats.tool_messages} tool, {stats.git_messages} git)"
    )
    lines.append(f"**Files touched:** {stats.files_modified}")
    lines.append(f"**Code blocks:** {stats.code_blocks_count}")
    lines.extend(["", "---", ""])

    for section in doc.sections:
        lines.append(f"## {section.title}")
        lines.append("")

        for msg in section.messages:
            heading = f"### {message_label(msg)}"
            if msg.file_name and msg.kind == "tool":
                heading += f" `{msg.file_name}`"
            lines.append(heading)
            lines.append("")
            lines.append(msg.content)
            lines.append("")

        for block in section.code_blocks:
            lines.append(f"```{block.language}")
            lines.append(block.code)
            lines.append("```")
            lines.append("")

        if section.file_changes:
            lines.append("**Files touched:**")
            lines.append("")
            for fc in section.file_changes:
                lines.append(f"- `{fc.file_name}` ({fc.type})")
            lines.append("")

        lines.extend(["---", ""])

    return "\n".join(lines)


def format_content(content: str) -> str:
    """Escape message text and apply light inline formatting."""
    formatted = html.escape(content)
    formatted = _BOLD_RE.sub(r"<strong>\1</strong>", formatted)
    formatted = _INLINE_CODE_RE.sub(r'<code class="inline-code">\1</code>', formatted)
    return formatted.replace("\n", "<br>")


_STYLE = """
body { font-family: -apple-system, "Segoe UI", sans-serif; margin: 0; background: #f6f7f9; color: #1f2328; }
header, main { max-width: 960px; margin: 0 auto; padding: 1.5rem; }
.meta { color: #59636e; }
.stats { display: grid; grid-template-columns: repeat(auto-fill, minmax(140px, 1fr)); gap: .5rem; }
.stat { background: #fff; border: 1px solid #d1d9e0; border-radius: 6px; padding: .5rem .75rem; }
.stat-value { font-size: 1.4rem; font-weight: 600; }
details.section { background: #fff; border: 1px solid #d1d9e0; border-radius: 6px; margin: 1rem 0; padding: .5rem 1rem; }
details.section > summary { cursor: pointer; font-weight: 600; }
.message { border-left: 3px solid #d1d9e0; margin: .75rem 0; padding: .25rem .75rem; }
.message-user { border-color: #0969da; }
.message-assistant { border-color: #8250df; }
.message-tool { border-color: #bf8700; }
.message-git { border-color: #cf222e; }
.message-thinking { border-color: #59636e; font-style: italic; }
.message-label { font-weight: 600; margin-right: .5rem; }
.message-file, .inline-code { font-family: ui-monospace, monospace; background: #eff1f3; padding: 0 .25rem; border-radius: 3px; }
pre { background: #1f2328; color: #f0f3f6; padding: .75rem; border-radius: 6px; overflow-x: auto; }
.file-type-badge { font-size: .75rem; text-transform: uppercase; margin-right: .5rem; }
"""


def _render_message_html(msg: Message) -> str:
    file_html = ""
    if msg.file_name and msg.kind not in ("git", "thinking"):
        file_html = f'<span class="message-file">{html.escape(msg.file_name)}</span>'
    return (
        f'<div class="message message-{msg.kind}">'
        f'<div class="message-header"><span class="message-label">{html.escape(message_label(msg))}</span>{file_html}</div>'
        f'<div class="message-content">{format_content(msg.content)}</div>'
        "</div>"
    )


def conversation_to_html(doc: ParsedConversation) -> str:
    """Export a parsed transcript as a standalone HTML page."""
    stats = doc.statistics
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{html.escape(doc.title)}</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        "<header>",
        f"<h1>{html.escape(doc.title)}</h1>",
        f'<p class="meta">{html.escape(doc.date)} &middot; {html.escape(doc.model)}'
        + (f" &middot; <code>{html.escape(doc.project_path)}</code>" if doc.project_path else "")
        + "</p>",
        '<div class="stats">',
    ]

    for label, value in [
        ("Messages", stats.total_messages),
        ("Prompts", stats.user_messages),
        ("Responses", stats.assistant_messages),
        ("Tool calls", stats.tool_messages),
        ("Git actions", stats.git_messages),
        ("Thinking", stats.thinking_messages),
        ("Files touched", stats.files_modified),
        ("Code blocks", stats.code_blocks_count),
    ]:
        parts.append(
            f'<div class="stat"><div class="stat-value">{value}</div>'
            f'<div class="stat-label">{label}</div></div>'
        )
    parts.append("</div>")

    if stats.emoji_counts:
        top = sorted(stats.emoji_counts.items(), key=lambda kv: kv[1], reverse=True)
        parts.append('<p class="emoji-counts">')
        parts.append(" ".join(
            f'<span class="emoji" title="{count}">{html.escape(emoji)} {count}</span>'
            for emoji, count in top
        ))
        parts.append("</p>")

    parts.extend(["</header>", "<main>"])

    for index, section in enumerate(doc.sections):
        parts.append(f'<details class="section" id="section-{index}" open>')
        parts.append(
            f"<summary>{html.escape(section.title)} "
            f'<span class="meta">({len(section.messages)} messages)</span></summary>'
        )
        for msg in section.messages:
            parts.append(_render_message_html(msg))

        for block in section.code_blocks:
            lang = html.escape(block.language)
            parts.append(
                f'<pre class="code-block" data-language="{lang}">'
                f'<code class="language-{lang}">{html.escape(block.code)}</code></pre>'
            )

        if section.file_changes:
            parts.append('<div class="file-changes"><h4>Files Touched</h4><ul class="file-list">')
            for fc in section.file_changes:
                parts.append(
                    f'<li class="file-item file-{fc.type}">'
                    f'<span class="file-type-badge">{fc.type}</span>'
                    f'<span class="message-file">{html.escape(fc.file_name)}</span></li>'
                )
            parts.append("</ul></div>")

        parts.append("</details>")

    if not doc.sections:
        parts.append('<p class="meta">No messages found in this transcript.</p>')

    parts.extend(["</main>", "</body>", "</html>"])
    return "\n".join(parts)


def render(doc: ParsedConversation, fmt: str) -> str:
    """Render a parsed transcript in one of FORMATS."""
    if fmt == "html":
        return conversation_to_html(doc)
    if fmt == "md":
        return conversation_to_markdown(doc)
    if fmt == "json":
        return conversation_to_json(doc)
    raise ValueError(f"Unknown format: {fmt!r} (expected one of {', '.join(FORMATS)})")

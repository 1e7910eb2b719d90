"""CLI entry point for transcript-viewer."""

import logging
from pathlib import Path

import click
import uvicorn

from .config import (
    get_default_format,
    get_format_for_path,
    get_output_path,
    get_server_host,
    get_server_port,
)
from .export import FORMATS, conversation_to_json, render
from .parser import parse_transcript

logger = logging.getLogger(__name__)


def _read_transcript(path: Path) -> str:
    # Bytes, not text mode: line endings must reach the parser untranslated.
    try:
        return path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{path} is not valid UTF-8: {e}")
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e.strerror or e}")


@click.group()
@click.version_option(package_name="transcript-viewer")
@click.option("-v", "--verbose", is_flag=True, help="Log parser details.")
def main(verbose: bool):
    """Turn coding-assistant session transcripts into navigable documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("input_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("output_file", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.option("--format", "fmt", type=click.Choice(FORMATS), default=None,
              help="Output format (default: from OUTPUT_FILE's suffix, else html "
                   "or $TRANSCRIPT_VIEWER_FORMAT).")
def convert(input_file: Path, output_file: Path | None, fmt: str | None):
    """Render INPUT_FILE to OUTPUT_FILE."""
    if not fmt and output_file:
        fmt = get_format_for_path(output_file)
    fmt = fmt or get_default_format()
    output_file = output_file or get_output_path(input_file, fmt)

    if output_file.resolve() == input_file.resolve():
        raise click.ClickException(f"Refusing to overwrite the input file {input_file}")

    click.echo(f"Input: {input_file}")
    click.echo(f"Output: {output_file}")

    content = _read_transcript(input_file)
    click.echo(f"Read {len(content)} characters")

    doc = parse_transcript(content)
    stats = doc.statistics
    click.echo("Parsed conversation:")
    click.echo(f"  - Sections: {len(doc.sections)}")
    click.echo(f"  - Total messages: {stats.total_messages}")
    click.echo(f"  - User messages: {stats.user_messages}")
    click.echo(f"  - Assistant messages: {stats.assistant_messages}")
    click.echo(f"  - Files touched: {stats.files_modified}")
    click.echo(f"  - Code blocks: {stats.code_blocks_count}")

    rendered = render(doc, fmt)
    try:
        output_file.write_text(rendered, encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot write {output_file}: {e.strerror or e}")

    logger.info("Wrote %d characters of %s to %s", len(rendered), fmt, output_file)
    click.echo(f"Wrote {output_file}")


@main.command()
@click.argument("input_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the full document as JSON.")
def stats(input_file: Path, as_json: bool):
    """Print metadata and statistics for INPUT_FILE."""
    doc = parse_transcript(_read_transcript(input_file))

    if as_json:
        click.echo(conversation_to_json(doc))
        return

    s = doc.statistics
    click.echo(f"Title: {doc.title}")
    click.echo(f"Date: {doc.date}")
    click.echo(f"Model: {doc.model}")
    click.echo(f"Project: {doc.project_path or '-'}")
    click.echo(f"Sections: {len(doc.sections)}")
    click.echo(f"Messages: {s.total_messages}")
    click.echo(f"  user: {s.user_messages}")
    click.echo(f"  assistant: {s.assistant_messages}")
    click.echo(f"  thinking: {s.thinking_messages}")
    click.echo(f"  tool: {s.tool_messages}")
    click.echo(f"  git: {s.git_messages}")
    click.echo(f"Files touched: {s.files_modified}")
    click.echo(f"Code blocks: {s.code_blocks_count}")
    if s.emoji_counts:
        top = sorted(s.emoji_counts.items(), key=lambda kv: kv[1], reverse=True)[:10]
        click.echo("Emoji: " + " ".join(f"{e}x{n}" for e, n in top))


@main.command()
@click.option("--port", type=int, default=None, help="Port to serve on (default: 8080).")
@click.option("--host", default=None, help="Host to bind to (default: 127.0.0.1).")
def serve(port: int | None, host: str | None):
    """Start the web interface."""
    host = host or get_server_host()
    port = port or get_server_port()
    click.echo(f"Starting transcript-viewer on http://{host}:{port}")
    uvicorn.run("transcript_viewer.server:app", host=host, port=port, reload=False)

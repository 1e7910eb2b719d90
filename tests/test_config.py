"""Tests for environment-driven configuration."""

from pathlib import Path

from transcript_viewer.config import (
    get_default_format,
    get_format_for_path,
    get_output_path,
    get_server_host,
    get_server_port,
)


def test_default_format(monkeypatch):
    monkeypatch.delenv("TRANSCRIPT_VIEWER_FORMAT", raising=False)
    assert get_default_format() == "html"


def test_format_from_env(monkeypatch):
    monkeypatch.setenv("TRANSCRIPT_VIEWER_FORMAT", " MD ")
    assert get_default_format() == "md"


def test_unknown_format_falls_back(monkeypatch, caplog):
    monkeypatch.setenv("TRANSCRIPT_VIEWER_FORMAT", "pdf")
    assert get_default_format() == "html"
    assert "TRANSCRIPT_VIEWER_FORMAT" in caplog.text


def test_server_defaults(monkeypatch):
    monkeypatch.delenv("TRANSCRIPT_VIEWER_HOST", raising=False)
    monkeypatch.delenv("TRANSCRIPT_VIEWER_PORT", raising=False)
    assert get_server_host() == "127.0.0.1"
    assert get_server_port() == 8080


def test_server_from_env(monkeypatch):
    monkeypatch.setenv("TRANSCRIPT_VIEWER_HOST", "0.0.0.0")
    monkeypatch.setenv("TRANSCRIPT_VIEWER_PORT", "9000")
    assert get_server_host() == "0.0.0.0"
    assert get_server_port() == 9000


def test_bad_port_falls_back(monkeypatch):
    monkeypatch.setenv("TRANSCRIPT_VIEWER_PORT", "eighty")
    assert get_server_port() == 8080


def test_output_path():
    assert get_output_path(Path("/tmp/chat.txt"), "md") == Path("/tmp/chat.md")
    assert get_output_path(Path("session"), "html") == Path("session.html")


def test_output_path_never_the_input():
    assert get_output_path(Path("/tmp/notes.md"), "md") == Path("/tmp/notes.rendered.md")
    assert get_output_path(Path("page.html"), "html") == Path("page.rendered.html")


def test_format_for_path():
    assert get_format_for_path(Path("out/notes.md")) == "md"
    assert get_format_for_path(Path("notes.MARKDOWN")) == "md"
    assert get_format_for_path(Path("page.htm")) == "html"
    assert get_format_for_path(Path("doc.json")) == "json"
    assert get_format_for_path(Path("session.txt")) is None
    assert get_format_for_path(Path("noext")) is None

"""Tests for the FastAPI server."""

import json

import pytest
from click.testing import CliRunner
from httpx import ASGITransport, AsyncClient

from transcript_viewer.cli import main
from transcript_viewer.server import app


@pytest.fixture
def client():
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
async def test_index_page(client):
    async with client:
        resp = await client.get("/")
        assert resp.status_code == 200
        assert "transcript-viewer" in resp.text


@pytest.mark.asyncio
async def test_get_formats(client):
    async with client:
        resp = await client.get("/api/formats")
        assert resp.status_code == 200
        assert resp.json() == ["html", "md", "json"]


@pytest.mark.asyncio
async def test_parse(client, sample_transcript):
    async with client:
        resp = await client.post("/api/parse", content=sample_transcript.encode("utf-8"))
        assert resp.status_code == 200
        data = resp.json()
        assert data["model"] == "Claude Opus 4.5"
        assert [s["title"] for s in data["sections"]] == [
            "Session Start",
            "Can you also add a regression",
        ]
        assert data["statistics"]["total_messages"] == 9


@pytest.mark.asyncio
async def test_parse_empty_body(client):
    async with client:
        resp = await client.post("/api/parse", content=b"")
        assert resp.status_code == 200
        data = resp.json()
        assert data["sections"] == []
        assert data["statistics"]["total_messages"] == 0


@pytest.mark.asyncio
async def test_parse_rejects_non_utf8(client):
    async with client:
        resp = await client.post("/api/parse", content=b"\xff\xfe> hi")
        assert resp.status_code == 400


@pytest.mark.asyncio
async def test_render_markdown(client, sample_transcript):
    async with client:
        resp = await client.post(
            "/api/render?format=md&filename=my session!",
            content=sample_transcript.encode("utf-8"),
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/markdown")
        assert resp.headers["content-disposition"] == 'attachment; filename="my session.md"'
        assert "## Can you also add a regression" in resp.text


@pytest.mark.asyncio
async def test_render_html_default(client, sample_transcript):
    async with client:
        resp = await client.post("/api/render", content=sample_transcript.encode("utf-8"))
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert 'filename="transcript.html"' in resp.headers["content-disposition"]
        assert "<!DOCTYPE html>" in resp.text


@pytest.mark.asyncio
async def test_render_json(client, sample_transcript):
    async with client:
        resp = await client.post("/api/render?format=json", content=sample_transcript.encode("utf-8"))
        assert resp.status_code == 200
        assert resp.json()["statistics"]["files_modified"] == 2


@pytest.mark.asyncio
async def test_render_unknown_format(client):
    async with client:
        resp = await client.post("/api/render?format=pdf", content=b"> hi")
        assert resp.status_code == 400


@pytest.mark.asyncio
async def test_parse_matches_cli_on_carriage_returns(client, tmp_path):
    raw = "● first\r  more\r\n● Read(a.py\r\n".encode("utf-8")
    path = tmp_path / "crlf.txt"
    path.write_bytes(raw)
    result = CliRunner().invoke(main, ["stats", str(path), "--json"])
    assert result.exit_code == 0, result.output

    async with client:
        resp = await client.post("/api/parse", content=raw)
        assert resp.status_code == 200
        sections = resp.json()["sections"]

    assert sections == json.loads(result.output)["sections"]
    assert sections[0]["messages"][0]["content"] == "first\r  more\r"
    assert sections[0]["file_changes"][0]["file_name"] == "a.py\r"

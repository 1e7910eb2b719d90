"""FastAPI web server for transcript-viewer."""

import logging

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response

from .export import FORMATS, MEDIA_TYPES, conversation_to_dict, render
from .parser import parse_transcript

logger = logging.getLogger(__name__)

app = FastAPI(title="transcript-viewer", version="0.1.0")

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>transcript-viewer</title></head>
<body>
<h1>transcript-viewer</h1>
<p>POST a plain-text session transcript to one of:</p>
<ul>
<li><code>/api/parse</code> - parsed document as JSON</li>
<li><code>/api/render?format=html|md|json</code> - rendered document</li>
</ul>
</body>
</html>
"""


async def _read_body(request: Request) -> str:
    """Return the request body as text, rejecting anything that is not UTF-8."""
    body = await request.body()
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.error("Rejected non-UTF-8 transcript: %s", e)
        raise HTTPException(status_code=400, detail="Transcript must be UTF-8 text")


# ── Routes ───────────────────────────────────────────────────────


@app.get("/")
async def index():
    """Serve the landing page."""
    return HTMLResponse(INDEX_HTML)


@app.get("/api/formats")
async def get_formats():
    """Return the supported render formats."""
    return list(FORMATS)


@app.post("/api/parse")
async def parse(request: Request):
    """Parse a transcript and return the document as JSON."""
    text = await _read_body(request)
    doc = parse_transcript(text)
    logger.info("Parsed transcript: %d sections, %d messages",
                len(doc.sections), doc.statistics.total_messages)
    return conversation_to_dict(doc)


@app.post("/api/render")
async def render_transcript(
    request: Request,
    format: str = Query("html", description="Output format: html, md or json"),
    filename: str = Query("transcript", description="Download file name, without suffix"),
):
    """Parse a transcript and return it rendered as a downloadable document."""
    if format not in FORMATS:
        raise HTTPException(status_code=400, detail=f"Unknown format: {format}")

    text = await _read_body(request)
    doc = parse_transcript(text)
    content = render(doc, format)

    safe_name = "".join(c if c.isalnum() or c in "-_ " else "" for c in filename)[:50] or "transcript"
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{safe_name}.{format}"'},
    )

"""FastAPI service exposing the trade-file pipeline.

POST /process { text, format, source_name } returns the processed bundle
in the same shape as the downloadable export. Nothing is stored.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from trade_digest import __version__
from trade_digest.config import Settings, configure_logging
from trade_digest.errors import TradeDigestError
from trade_digest.export import bundle_to_dict
from trade_digest.pipeline import process_text

configure_logging()
logger = logging.getLogger(__name__)

settings = Settings.from_env()

app = FastAPI(
    title="Trade Digest",
    description="Normalize uploaded trade files and summarize positions per symbol",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


class ProcessRequest(BaseModel):
    text: str
    format: Literal["csv", "json", "auto"] = "auto"
    source_name: str = ""


@app.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "version": __version__}


@app.post("/process")
def process(req: ProcessRequest) -> JSONResponse:
    size = len(req.text.encode("utf-8"))
    if size > settings.max_upload_bytes:
        logger.warning("[API] Rejected %s: %d bytes over limit", req.source_name, size)
        return JSONResponse(
            {"error": f"input too large: {size} bytes (limit {settings.max_upload_bytes})"},
            status_code=413,
        )

    try:
        bundle = process_text(req.text, format_hint=req.format, source_name=req.source_name)
    except TradeDigestError as e:
        logger.info("[API] Processing failed for %s: %s", req.source_name or "<text>", e)
        return JSONResponse({"error": str(e)}, status_code=400)

    payload = bundle_to_dict(bundle)
    payload["recordsSeen"] = bundle.records_seen
    payload["recordsRejected"] = bundle.records_rejected
    return JSONResponse(payload)

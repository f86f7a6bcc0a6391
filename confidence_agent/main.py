from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from .analyzer import run_analysis
from .generators import generate_llms_txt, generate_schemas
from .models import AnalyzeRequest, LlmsTxtRequest, LlmsTxtResponse, SchemaRequest, SchemaResponse, SiteInfo
from .store import AnalysisStore, NullAnalysisStore


# Load environment variables from the repo root .env (so GEMINI_API_KEY works in local dev)
_HERE = Path(__file__).resolve()
load_dotenv(_HERE.parents[1] / ".env", override=False)

logging.basicConfig(
    level=os.getenv("CONFIDENCE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="AI Confidence Agent", version="0.1.0")

# Replaced by deployments that persist analyses.
analysis_store: AnalysisStore = NullAnalysisStore()


def _cors_allow_origins() -> list[str]:
    raw = os.getenv("CONFIDENCE_CORS_ORIGINS", "").strip()
    if not raw:
        return ["http://localhost:3000"]
    return [o.strip() for o in raw.split(",") if o.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _ndjson(req: AnalyzeRequest) -> Iterator[str]:
    for event in run_analysis(req.url, store=analysis_store, identity=req.identity):
        yield event.model_dump_json(by_alias=True) + "\n"


def _require_site(info: SiteInfo) -> None:
    if not info.url or not info.name:
        raise HTTPException(status_code=400, detail="Site URL and name are required")


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.post("/analyze")
def analyze_endpoint(req: AnalyzeRequest):
    return StreamingResponse(_ndjson(req), media_type="application/x-ndjson")


@app.post("/generate-schema", response_model=SchemaResponse, response_model_by_alias=True)
def generate_schema_endpoint(req: SchemaRequest):
    _require_site(req.site_info)
    return generate_schemas(req.schema_type, req.site_info)


@app.post("/generate-llms-txt", response_model=LlmsTxtResponse, response_model_by_alias=True)
def generate_llms_txt_endpoint(req: LlmsTxtRequest):
    _require_site(req.site_info)
    return generate_llms_txt(req.site_info)

"""
FastAPI wrapper for the content fragment broken-links audit.

This module exposes broken path analysis as a REST API so that suggestions
can be requested without running the CLI.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cf_broken_links import __version__
from cf_broken_links.collector import CollectorError, load_broken_paths, load_content_listing
from cf_broken_links.config import AuditConfig, AuditContext, ConfigError
from cf_broken_links.handler import AuditError, run_audit
from cf_broken_links.locale import Locale
from cf_broken_links.models import BrokenPath, ContentPath

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Content Fragment Broken Links API",
    description="Suggests fixes for broken content fragment references in AEM DAM paths",
    version=__version__,
)

# Enable CORS for all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ContentPathInput(BaseModel):
    """Known content path used to seed the path index."""
    path: str
    status: Optional[str] = Field(None, description="Publication status, e.g. PUBLISHED or DRAFT")


class AnalyzeRequest(BaseModel):
    """Request model for broken path analysis."""
    site_id: str = Field("api", description="Site identifier recorded in the result")
    base_url: str = Field("", description="Site base URL recorded in the result")
    broken_paths: list[str] = Field(default_factory=list, description="Broken content fragment paths")
    content_listing: list[ContentPathInput] = Field(
        default_factory=list,
        description="Known content paths. Used instead of AEM Author when no credentials are configured.",
    )
    max_levenshtein_distance: Optional[int] = Field(
        None, description="Maximum edit distance for similar path matches"
    )


class SuggestionOutput(BaseModel):
    """A suggested fix for one broken path."""
    requested_path: str
    suggested_path: Optional[str] = None
    type: str
    reason: str


class AnalyzeResponse(BaseModel):
    """Response model for analysis results."""
    success: bool
    site_id: str
    suggestions: list[SuggestionOutput] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class _ListCollector:
    """Collector over broken paths sent in the request."""

    def __init__(self, broken_paths: list[BrokenPath]):
        self.broken_paths = broken_paths

    def fetch_broken_paths(self) -> list[BrokenPath]:
        return self.broken_paths


async def _run(
    site_id: str,
    base_url: str,
    broken_paths: list[BrokenPath],
    content_listing: list[ContentPath],
    max_levenshtein_distance: Optional[int] = None,
) -> AnalyzeResponse:
    try:
        config = AuditConfig.from_env(max_levenshtein_distance=max_levenshtein_distance)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))

    context = AuditContext(site_id=site_id, base_url=base_url, config=config)

    try:
        result = await run_audit(context, _ListCollector(broken_paths), content_listing)
    except AuditError as e:
        error = (context.audit_result or {}).get("error")
        detail = f"{e}: {error}" if error else str(e)
        raise HTTPException(status_code=500, detail=detail)

    return AnalyzeResponse(
        success=True,
        site_id=site_id,
        suggestions=[SuggestionOutput(**s) for s in result["audit_result"]["suggestions"]],
    )


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
    )


@app.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest):
    """
    Analyze broken paths sent as JSON.

    Returns one suggestion per distinct broken path.
    """
    urls = list(dict.fromkeys(p.strip() for p in request.broken_paths if p and p.strip()))
    if not urls:
        raise HTTPException(status_code=400, detail="No broken paths provided")

    logger.info(f"Analyzing {len(urls)} broken paths for site {request.site_id}")
    listing = [
        ContentPath(item.path, item.status, Locale.from_path(item.path))
        for item in request.content_listing
    ]
    return await _run(
        request.site_id,
        request.base_url,
        [BrokenPath(url=url) for url in urls],
        listing,
        request.max_levenshtein_distance,
    )


async def _save_upload(upload: UploadFile) -> Path:
    suffix = Path(upload.filename or "").suffix.lower()
    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        tmp.write(await upload.read())
        return Path(tmp.name)


@app.post("/api/analyze/file", response_model=AnalyzeResponse)
async def analyze_file(
    broken_paths_file: UploadFile = File(..., description="Broken paths export (CSV, Excel or JSON)"),
    content_listing_file: Optional[UploadFile] = File(None, description="Content listing export"),
    site_id: str = Form("api"),
    base_url: str = Form(""),
):
    """
    Analyze broken paths from an uploaded export.

    An optional content listing seeds the path index.
    """
    saved: list[Path] = []
    try:
        broken_path = await _save_upload(broken_paths_file)
        saved.append(broken_path)
        broken_paths = load_broken_paths(broken_path)

        listing: list[ContentPath] = []
        if content_listing_file is not None:
            listing_path = await _save_upload(content_listing_file)
            saved.append(listing_path)
            listing = load_content_listing(listing_path)
    except CollectorError as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        for path in saved:
            path.unlink(missing_ok=True)

    return await _run(site_id, base_url, broken_paths, listing)


@app.get("/api/info")
async def api_info():
    """Get API information and usage instructions."""
    return {
        "name": "Content Fragment Broken Links API",
        "version": __version__,
        "description": "Suggests fixes for broken content fragment references",
        "endpoints": {
            "GET /api/health": "Health check",
            "POST /api/analyze": "Analyze broken paths sent as JSON",
            "POST /api/analyze/file": "Analyze broken paths from an uploaded export",
            "GET /api/info": "This endpoint",
        },
        "documentation": "/docs",
        "openapi": "/openapi.json",
    }

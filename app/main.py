"""
Site Design Content - FastAPI Application
Serves ad banners, analytics code, custom CSS/JS and static file tags
through a cache-aside layer over the database
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import HTMLResponse, PlainTextResponse
from sqlalchemy.orm import Session

from app.cache import get_cache_backend
from app.db import get_db, init_db
from app.design import DesignContent
from app.render import FileType, RequestContext
from config.settings import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("main")

# Version tracking
APP_VERSION = "v0.1.0"
APP_NAME = "Site Design Content"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    get_cache_backend()
    yield


app = FastAPI(
    title=APP_NAME,
    description="Cached design content (ads, analytics, custom code, static files)",
    version=APP_VERSION,
    lifespan=lifespan,
)


def get_design(db: Session = Depends(get_db)) -> DesignContent:
    """Per-request design content accessor."""
    return DesignContent(db)


@app.get("/health")
def health():
    """Health check endpoint"""
    return {"status": "ok"}


@app.get("/version")
def version():
    """Application version info."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "cache_backend": settings.cache_backend,
    }


@app.get("/cache/stats")
def cache_stats():
    """Get cache statistics."""
    return get_cache_backend().get_stats()


@app.get("/design/ad", response_class=HTMLResponse)
def design_ad(
    width: int = Query(..., gt=0, description="Banner width in pixels"),
    height: int = Query(..., gt=0, description="Banner height in pixels"),
    only_active: bool = Query(default=True),
    module: Optional[str] = Query(default=None, description="Module rendering the page"),
    design: DesignContent = Depends(get_design),
):
    """
    Random banner for a slot size.
    Empty body on the admin module or when no banner matches.
    """
    return design.ad(width, height, only_active, RequestContext(module=module))


@app.get("/design/analytics", response_class=HTMLResponse)
def design_analytics(
    only_active: bool = Query(default=True),
    design: DesignContent = Depends(get_design),
):
    """Analytics snippet (empty body when none is configured)."""
    return design.analytics_api(only_active) or ""


@app.get("/design/custom-code/{code_type}", response_class=PlainTextResponse)
def design_custom_code(
    code_type: FileType,
    design: DesignContent = Depends(get_design),
):
    """Custom CSS or JS code."""
    return design.custom_code(code_type) or ""


@app.get("/design/files/{file_type}", response_class=HTMLResponse)
def design_files(
    file_type: FileType,
    only_active: bool = Query(default=True),
    design: DesignContent = Depends(get_design),
):
    """Include tags for extra CSS/JS files."""
    return design.files(file_type, only_active)

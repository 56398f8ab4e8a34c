"""
Resume Screener Backend API
FastAPI application for PDF resume parsing and AI screening feedback.
"""

import logging
import os
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.routers import resumes

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Resume Screener API",
    description="PDF resume parsing and AI-assisted candidate screening",
    version="0.1.0",
)


def get_cors_origins() -> List[str]:
    """
    Build the list of allowed CORS origins.

    Always includes the local Next.js dev server (http://localhost:3000).
    Additional origins are read from the CORS_ORIGINS environment variable
    as a comma-separated list, e.g.:
        CORS_ORIGINS=https://screener.example.com,https://preview.example.com

    Duplicates are removed while preserving order.
    """
    always_included = ["http://localhost:3000"]

    extra_origins: List[str] = []
    cors_env = os.getenv("CORS_ORIGINS", "").strip()
    if cors_env:
        extra_origins = [o.strip() for o in cors_env.split(",") if o.strip()]

    seen: set = set()
    origins: List[str] = []
    for origin in always_included + extra_origins:
        if origin not in seen:
            seen.add(origin)
            origins.append(origin)

    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])


@app.on_event("startup")
async def log_startup_url() -> None:
    host_port = os.getenv("HOST_PORT", "8000")
    logger.info("Resume Screener API running at http://localhost:%s", host_port)


@app.get("/")
async def root():
    return {"message": "Resume Screener API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}

"""VisionaryAI estimator — FastAPI application entry point.

All routers are mounted here. No dead-code routers allowed — if a router
module exists, it must be mounted in this file.
"""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routers import estimate, pages, system
from backend.services.shared.config import get_config
from backend.services.shared.logging import setup_logging_from_config

_config = get_config()
setup_logging_from_config(_config)

app = FastAPI(
    title="VisionaryAI",
    version=system.APP_VERSION,
    description="AI-assisted video production cost estimator.",
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=_config.get("app.cors_origins", []),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(estimate.router, prefix="/api/estimate", tags=["Estimate"])
app.include_router(system.router,   prefix="/api/system",   tags=["System"])
app.include_router(pages.router)

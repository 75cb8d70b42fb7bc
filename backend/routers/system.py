"""System router — health and runtime settings."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter

from backend.services.shared.config import get_config

logger = logging.getLogger("visionary.routers.system")
router = APIRouter()

APP_VERSION = "1.0.0"


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": APP_VERSION}


@router.get("/config")
async def runtime_config() -> Dict[str, Any]:
    """Non-secret settings in effect. The API key is only reported as present or not."""
    config = get_config()
    key_env = config.get("gemini.api_key_env", "GEMINI_API_KEY")
    return {
        "model":              config.get("gemini.model"),
        "currency":           config.get("estimate.currency"),
        "locale":             config.get("estimate.locale"),
        "api_key_configured": bool(config.get_env(key_env)),
    }

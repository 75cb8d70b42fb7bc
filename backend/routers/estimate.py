"""Estimate router — production parameters, estimate trigger, and view state."""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.services.estimate.constants import (
    COMPLEXITY_MAX,
    COMPLEXITY_MIN,
    LENGTH_MAX_SEC,
    LENGTH_MIN_SEC,
    LENGTH_STEP_SEC,
)
from backend.services.estimate.presenter import form_options, present
from backend.services.estimate.requester import EstimateRequester, EstimateUnavailableError
from backend.services.estimate.state import EstimatorSession, RequestInFlightError
from backend.services.estimate.types import ProductionParams, Resolution, Urgency, VideoStyle
from backend.services.shared.config import get_config

logger = logging.getLogger("visionary.routers.estimate")
router = APIRouter()

# ── Module-level singleton (lazy init) ────────────────────────────────────────
_session: Optional[EstimatorSession] = None


def get_session() -> EstimatorSession:
    global _session
    if _session is None:
        _session = EstimatorSession(EstimateRequester.from_config(get_config()))
    return _session


def reset_session() -> None:
    """Drop the singleton session (mainly for testing)."""
    global _session
    _session = None


# ── Pydantic models ───────────────────────────────────────────────────────────


class ParamsRequest(BaseModel):
    """Full parameter set; the constraints mirror the form widgets."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    style: VideoStyle
    length_seconds: int = Field(ge=LENGTH_MIN_SEC, le=LENGTH_MAX_SEC, multiple_of=LENGTH_STEP_SEC)
    resolution: Resolution
    urgency: Urgency
    use_ai_tools: bool
    has_script: bool
    has_voiceover: bool
    complexity: int = Field(ge=COMPLEXITY_MIN, le=COMPLEXITY_MAX)

    def to_params(self) -> ProductionParams:
        return ProductionParams(**self.model_dump())


class ParamsPatch(BaseModel):
    """Any subset of fields; unset fields keep their current value."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    style: Optional[VideoStyle] = None
    length_seconds: Optional[int] = Field(
        default=None, ge=LENGTH_MIN_SEC, le=LENGTH_MAX_SEC, multiple_of=LENGTH_STEP_SEC,
    )
    resolution: Optional[Resolution] = None
    urgency: Optional[Urgency] = None
    use_ai_tools: Optional[bool] = None
    has_script: Optional[bool] = None
    has_voiceover: Optional[bool] = None
    complexity: Optional[int] = Field(default=None, ge=COMPLEXITY_MIN, le=COMPLEXITY_MAX)


# ── Helpers ───────────────────────────────────────────────────────────────────


def params_to_dict(params: ProductionParams) -> Dict[str, Any]:
    return ParamsRequest(**dataclasses.asdict(params)).model_dump(mode="json", by_alias=True)


# ── Endpoints ─────────────────────────────────────────────────────────────────


@router.get("/params")
async def get_params() -> Dict[str, Any]:
    """Return the current production parameters."""
    return params_to_dict(get_session().params)


@router.put("/params")
async def replace_params(request: ParamsRequest) -> Dict[str, Any]:
    """Replace the whole parameter set."""
    state = get_session().update_params(request.to_params())
    return params_to_dict(state.params)


@router.patch("/params")
async def patch_params(request: ParamsPatch) -> Dict[str, Any]:
    """Change individual fields, leaving the others untouched."""
    session = get_session()
    for name, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
        session.update_param(name, value)
    return params_to_dict(session.params)


@router.get("/options")
async def get_options() -> Dict[str, Any]:
    """List the selectable values for each enumerated parameter."""
    return {
        **form_options(),
        "lengthSeconds": {"min": LENGTH_MIN_SEC, "max": LENGTH_MAX_SEC, "step": LENGTH_STEP_SEC},
        "complexity": {"min": COMPLEXITY_MIN, "max": COMPLEXITY_MAX, "step": 1},
    }


@router.post("")
async def calculate_estimate(request: Optional[ParamsRequest] = None) -> Dict[str, Any]:
    """Request a cost estimate for the current (or supplied) parameters.

    Returns 409 while another estimate is in flight and 502 when the
    inference service could not produce a valid estimate.
    """
    session = get_session()
    params = request.to_params() if request is not None else None
    try:
        result = await session.calculate(params)
    except RequestInFlightError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except EstimateUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return {
        "params": params_to_dict(session.params),
        "result": result.model_dump(mode="json", by_alias=True),
    }


@router.get("/state")
async def get_state() -> Dict[str, Any]:
    """Return the presenter view of the current session state."""
    config = get_config()
    session = get_session()
    view = present(
        session.state,
        currency=config.get("estimate.currency", "KRW"),
        locale=config.get("estimate.locale", "ko_KR"),
    )
    return {
        "params": params_to_dict(session.params),
        "view": dataclasses.asdict(view),
    }

"""Page routes — the server-rendered estimator form and result panel."""
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from backend.routers.estimate import ParamsRequest, get_session
from backend.services.estimate import presenter
from backend.services.estimate.constants import (
    COMPLEXITY_MAX,
    COMPLEXITY_MIN,
    LENGTH_MAX_SEC,
    LENGTH_MIN_SEC,
    LENGTH_STEP_SEC,
)
from backend.services.estimate.requester import EstimateUnavailableError
from backend.services.estimate.state import RequestInFlightError
from backend.services.shared.config import get_config

logger = logging.getLogger("visionary.routers.pages")
router = APIRouter(tags=["Pages"])

_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


def _render(request: Request, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    config = get_config()
    session = get_session()
    view = presenter.present(
        session.state,
        currency=config.get("estimate.currency", "KRW"),
        locale=config.get("estimate.locale", "ko_KR"),
    )
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": config.get("app.title", "VisionaryAI"),
            "subtitle": config.get("app.subtitle", ""),
            "params": session.params,
            "options": presenter.form_options(),
            "view": view,
            "length_range": (LENGTH_MIN_SEC, LENGTH_MAX_SEC, LENGTH_STEP_SEC),
            "complexity_range": (COMPLEXITY_MIN, COMPLEXITY_MAX),
            "loading_title": presenter.LOADING_TITLE,
            "loading_subtitle": presenter.LOADING_SUBTITLE,
            "placeholder_title": presenter.PLACEHOLDER_TITLE,
            "placeholder_body": presenter.PLACEHOLDER_BODY,
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Estimator page with the current parameters and last result."""
    return _render(request)


@router.post("/", response_class=HTMLResponse)
async def submit(
    request: Request,
    style: str = Form(...),
    length_seconds: int = Form(...),
    resolution: str = Form(...),
    urgency: str = Form(...),
    complexity: int = Form(...),
    use_ai_tools: bool = Form(False),
    has_script: bool = Form(False),
    has_voiceover: bool = Form(False),
) -> HTMLResponse:
    """Form submit: store the parameters, request an estimate, re-render.

    An unavailable estimate is shown inline on the page rather than as an
    HTTP error.
    """
    try:
        params = ParamsRequest(
            style=style,
            length_seconds=length_seconds,
            resolution=resolution,
            urgency=urgency,
            use_ai_tools=use_ai_tools,
            has_script=has_script,
            has_voiceover=has_voiceover,
            complexity=complexity,
        ).to_params()
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        )

    try:
        await get_session().calculate(params)
    except RequestInFlightError:
        return _render(request, status_code=status.HTTP_409_CONFLICT)
    except EstimateUnavailableError:
        logger.debug("Rendering page with estimate error")
    return _render(request)

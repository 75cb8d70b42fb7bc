"""Fixed values shared by the estimator services and views."""
from __future__ import annotations

from backend.services.estimate.types import ProductionParams, Resolution, Urgency, VideoStyle

INITIAL_PARAMS = ProductionParams(
    style=VideoStyle.STOCK_FOOTAGE,
    length_seconds=60,
    resolution=Resolution.FHD,
    urgency=Urgency.STANDARD,
    use_ai_tools=True,
    has_script=False,
    has_voiceover=False,
    complexity=3,
)

# Input domains enforced by the form / request layer
LENGTH_MIN_SEC = 5
LENGTH_MAX_SEC = 300
LENGTH_STEP_SEC = 5
COMPLEXITY_MIN = 1
COMPLEXITY_MAX = 5

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_CURRENCY = "KRW"
DEFAULT_LOCALE = "ko_KR"

ERROR_MESSAGE = "견적을 불러오는 도중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."

CHART_COLORS = ("#2563eb", "#3b82f6", "#60a5fa", "#93c5fd", "#bfdbfe", "#dbeafe")

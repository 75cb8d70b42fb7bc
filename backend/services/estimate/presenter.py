"""Result presenter — turns an EstimatorState into a render-ready view.

``present`` is a pure function: the same state always yields the same view.
The HTML template and the JSON API both render from ResultView.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Type

from backend.services.estimate.constants import CHART_COLORS, DEFAULT_CURRENCY, DEFAULT_LOCALE
from backend.services.estimate.state import EstimatorState
from backend.services.estimate.types import EstimationResult, Resolution, Urgency, VideoStyle
from backend.services.shared.currency import format_currency

LOADING_TITLE = "AI가 견적을 분석 중입니다..."
LOADING_SUBTITLE = "시장 데이터와 제작 파라미터를 대조하고 있습니다."
PLACEHOLDER_TITLE = "시작하려면 파라미터를 입력하세요"
PLACEHOLDER_BODY = "영상 스타일, 길이, 제작 요구사항을 설정하고 '견적 산출하기' 버튼을 눌러주세요."

# Pie geometry in SVG user units (viewBox 0 0 200 200)
_CX = 100.0
_CY = 100.0
_RADIUS = 90.0


@dataclass
class SummaryCard:
    total_text: str            # "₩3,200,000"
    timeline_text: str         # "약 7일 소요"
    savings_text: str          # "₩400,000"


@dataclass
class ChartSlice:
    label: str
    value: float
    share: float               # 0.0-1.0 of the breakdown sum
    color: str
    path: str                  # SVG path data for the wedge


@dataclass
class LineItemView:
    category: str
    description: str
    amount_text: str


@dataclass
class ResultView:
    loading: bool
    error: Optional[str]
    placeholder: bool
    summary: Optional[SummaryCard] = None
    chart: List[ChartSlice] = field(default_factory=list)
    line_items: List[LineItemView] = field(default_factory=list)
    analysis: str = ""


# ── helpers ───────────────────────────────────────────────────────────────────


def format_days(days: float) -> str:
    """7.0 → "7", 7.5 → "7.5", 1234567 → "1234567"."""
    if float(days).is_integer():
        return str(int(days))
    return f"{days:.6f}".rstrip("0").rstrip(".")


def _point(angle: float) -> str:
    # 0 rad points at 12 o'clock, angles grow clockwise
    x = _CX + _RADIUS * math.sin(angle)
    y = _CY - _RADIUS * math.cos(angle)
    return f"{x:.2f} {y:.2f}"


def wedge_path(start: float, end: float) -> str:
    """SVG path for a pie wedge between two angles (radians, clockwise)."""
    if end - start >= 2 * math.pi - 1e-9:
        # A single arc cannot close on itself; draw two halves.
        return (
            f"M {_point(0.0)} "
            f"A {_RADIUS} {_RADIUS} 0 1 1 {_point(math.pi)} "
            f"A {_RADIUS} {_RADIUS} 0 1 1 {_point(0.0)} Z"
        )
    large_arc = 1 if end - start > math.pi else 0
    return (
        f"M {_CX} {_CY} L {_point(start)} "
        f"A {_RADIUS} {_RADIUS} 0 {large_arc} 1 {_point(end)} Z"
    )


def build_chart(result: EstimationResult) -> List[ChartSlice]:
    """One slice per breakdown item, in breakdown order."""
    total = sum(item.amount for item in result.breakdown)
    slices: List[ChartSlice] = []
    angle = 0.0
    for idx, item in enumerate(result.breakdown):
        share = item.amount / total if total > 0 else 0.0
        end = angle + share * 2 * math.pi
        slices.append(ChartSlice(
            label=item.category,
            value=item.amount,
            share=share,
            color=CHART_COLORS[idx % len(CHART_COLORS)],
            path=wedge_path(angle, end) if share > 0 else "",
        ))
        angle = end
    return slices


# ── public ────────────────────────────────────────────────────────────────────


def present(
    state: EstimatorState,
    currency: str = DEFAULT_CURRENCY,
    locale: str = DEFAULT_LOCALE,
) -> ResultView:
    """Build the view for the current state.

    Loading and error are overlays: a stale result stays visible beneath
    both.  The placeholder shows whenever there is no result, next to
    any error message.
    """
    result = state.result
    view = ResultView(
        loading=state.loading,
        error=state.error,
        placeholder=result is None,
    )
    if result is None:
        return view

    view.summary = SummaryCard(
        total_text=format_currency(result.total_cost, currency, locale),
        timeline_text=f"약 {format_days(result.timeline_days)}일 소요",
        savings_text=format_currency(result.ai_savings, currency, locale),
    )
    view.chart = build_chart(result)
    view.line_items = [
        LineItemView(
            category=item.category,
            description=item.description,
            amount_text=format_currency(item.amount, currency, locale),
        )
        for item in result.breakdown
    ]
    view.analysis = result.analysis
    return view


_SELECT_FIELDS: Dict[str, Type[Enum]] = {
    "style": VideoStyle,
    "resolution": Resolution,
    "urgency": Urgency,
}


def form_options() -> Dict[str, List[str]]:
    """Every declared member of each select field, in declaration order."""
    return {name: [member.value for member in enum_cls] for name, enum_cls in _SELECT_FIELDS.items()}

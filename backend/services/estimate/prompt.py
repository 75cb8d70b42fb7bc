"""Instruction text and response schema for the cost-estimate inference call."""
from __future__ import annotations

from typing import Any, Dict

from backend.services.estimate.types import ProductionParams

# OpenAPI-subset schema understood by Gemini's ``response_schema``.
ESTIMATE_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "totalCost": {"type": "NUMBER"},
        "currency": {"type": "STRING"},
        "breakdown": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "category": {"type": "STRING"},
                    "amount": {"type": "NUMBER"},
                    "description": {"type": "STRING"},
                },
                "required": ["category", "amount", "description"],
            },
        },
        "timelineDays": {"type": "NUMBER"},
        "aiSavings": {"type": "NUMBER"},
        "analysis": {"type": "STRING"},
    },
    "required": ["totalCost", "currency", "breakdown", "timelineDays", "aiSavings", "analysis"],
}


def _yes_no(flag: bool) -> str:
    return "예" if flag else "아니오"


def _present_absent(flag: bool) -> str:
    return "있음" if flag else "없음"


def build_instruction(params: ProductionParams, currency: str = "KRW") -> str:
    """Render every parameter into the Korean instruction sent to the model."""
    return f"""영상 제작 전문가로서 다음의 파라미터를 바탕으로 상세한 영상 제작 원가 및 예상 견적을 계산해줘.

파라미터:
- 스타일: {params.style.value}
- 영상 길이: {params.length_seconds}초
- 해상도: {params.resolution.value}
- 긴급도: {params.urgency.value}
- AI 도구 활용 여부: {_yes_no(params.use_ai_tools)}
- 시나리오 유무: {_present_absent(params.has_script)}
- 나레이션(Voiceover) 유무: {_present_absent(params.has_voiceover)}
- 복잡도: {params.complexity}/5

요구사항:
1. 통화 코드 {currency} 기준으로 계산할 것.
2. AI 도구 활용 시 인건비 절감 효과를 반영할 것.
3. 기획, 촬영/소스 확보, 편집, CG/효과, 사운드 믹싱 등으로 세부 항목을 나눌 것.
4. 분석 내용(analysis)에는 비용 산출 근거를 구체적으로 설명할 것.
"""

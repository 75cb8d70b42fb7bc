"""Data types for the production cost estimator."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, List, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VideoStyle(str, Enum):
    LIVE_ACTION = "Live Action (촬영)"
    ANIMATION_2D = "2D Animation"
    ANIMATION_3D = "3D Animation"
    STOCK_FOOTAGE = "Stock + Motion Graphics"
    AI_AVATAR = "AI Avatar (가상인간)"


class Resolution(str, Enum):
    FHD = "FHD (1080p)"
    UHD = "4K (UHD)"
    MOBILE = "Vertical (Shorts/Reels)"


class Urgency(str, Enum):
    STANDARD = "Standard (보통)"
    EXPRESS = "Express (빠름)"
    RUSH = "Rush (매우 빠름)"


@dataclass(frozen=True)
class ProductionParams:
    """User-editable production parameters. Replaced wholesale on every edit."""
    style: VideoStyle
    length_seconds: int        # 5-300, step 5
    resolution: Resolution
    urgency: Urgency
    use_ai_tools: bool
    has_script: bool
    has_voiceover: bool
    complexity: int            # 1-5


# Non-negative JSON number; integral values stay int.
Amount = Union[Annotated[int, Field(ge=0)], Annotated[float, Field(ge=0)]]


class _WireModel(BaseModel):
    """Immutable model whose JSON field names are camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class CostBreakdown(_WireModel):
    """One named cost category with its amount and justification."""
    category: str
    amount: Amount
    description: str


class EstimationResult(_WireModel):
    """Parsed output of one successful inference call."""
    total_cost: Amount
    currency: str
    breakdown: List[CostBreakdown]
    timeline_days: Amount
    ai_savings: Amount
    analysis: str

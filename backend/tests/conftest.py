"""Shared test fixtures for the VisionaryAI estimator."""
import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from backend.services.estimate.types import ProductionParams, Resolution, Urgency, VideoStyle


@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).parent.parent.parent


@pytest.fixture
def tmp_dir() -> Generator[Path, None, None]:
    d = Path(tempfile.mkdtemp())
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def sample_settings(tmp_dir: Path) -> Path:
    """Write a minimal settings.yaml to a temp dir and return its path."""
    settings = {
        "app": {"title": "VisionaryAI", "subtitle": "test", "cors_origins": ["http://localhost:5173"]},
        "gemini": {"model": "gemini-test-model", "api_key_env": "VISIONARY_TEST_KEY"},
        "estimate": {"currency": "KRW", "locale": "ko_KR"},
        "logging": {"level": "DEBUG", "file": str(tmp_dir / "test.log")},
    }
    cfg_path = tmp_dir / "settings.yaml"
    cfg_path.write_text(yaml.dump(settings, allow_unicode=True), encoding="utf-8")
    return cfg_path


# ─────────────────────────────────────────────────────────────────────────────
# Estimate fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_params() -> ProductionParams:
    """The stock + motion-graphics, 60-second reference scenario."""
    return ProductionParams(
        style=VideoStyle.STOCK_FOOTAGE,
        length_seconds=60,
        resolution=Resolution.FHD,
        urgency=Urgency.STANDARD,
        use_ai_tools=True,
        has_script=False,
        has_voiceover=False,
        complexity=3,
    )


@pytest.fixture
def sample_payload() -> dict:
    """A schema-conforming model response for the reference scenario."""
    return {
        "totalCost": 3200000,
        "currency": "KRW",
        "breakdown": [
            {"category": "기획", "amount": 500000, "description": "콘셉트 및 스토리보드"},
        ],
        "timelineDays": 7,
        "aiSavings": 400000,
        "analysis": "스톡 영상과 모션그래픽 위주로 구성되어 촬영 비용이 없습니다.",
    }


@pytest.fixture
def mock_genai_client(sample_payload: dict) -> MagicMock:
    """google-genai client double whose async generate_content returns ``sample_payload``."""
    client = MagicMock()
    response = MagicMock()
    response.text = json.dumps(sample_payload, ensure_ascii=False)
    client.aio.models.generate_content = AsyncMock(return_value=response)
    return client

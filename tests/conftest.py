"""Global pytest fixtures for deterministic test environment."""

from __future__ import annotations

import io
import json
from typing import Any, Dict

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def _isolate_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear local runtime env that can leak into tests on developer machines."""
    for key in ("GEMINI_API_KEY", "RESUME_CRITIC_TEST_KEY"):
        monkeypatch.delenv(key, raising=False)


def make_image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    color = (30, 120, 200, 128) if mode == "RGBA" else (30, 120, 200)
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    return {
        "score": 72,
        "overview": "Backend engineer with 5 years of Python experience.",
        "strengths": ["Led migration to Kubernetes", "Strong API design"],
        "skills": {
            "languages": ["Python", "Go"],
            "frameworks": ["FastAPI", "Django"],
            "databases": ["PostgreSQL"],
            "other": ["Docker"],
        },
        "missing": [{"name": "Projects", "importance": "Shows initiative outside work"}],
        "improvements": [
            {
                "recommendation": "Quantify achievements",
                "reason": "Recruiters scan for impact",
                "action": "Add metrics such as latency or revenue numbers",
            }
        ],
        "roleAlignment": {
            "matchLevel": "Medium",
            "gaps": ["No frontend experience"],
            "suggestions": ["Highlight React side projects"],
        },
        "actionPlan": ["Add metrics", "Add a projects section", "Tighten summary"],
    }


@pytest.fixture
def analysis_json(analysis_payload: Dict[str, Any]) -> str:
    return json.dumps(analysis_payload)


@pytest.fixture
def make_image():
    return make_image_bytes

"""Analysis Result schema and response parsing."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ResponseFormatError

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```\s*$")


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SkillBuckets(_Schema):
    languages: List[str]
    frameworks: List[str]
    databases: List[str]
    other: List[str]


class MissingSection(_Schema):
    name: str
    importance: str


class Improvement(_Schema):
    recommendation: str
    reason: str
    action: str


class RoleAlignment(_Schema):
    match_level: str = Field(alias="matchLevel")
    gaps: List[str]
    suggestions: List[str]


class AnalysisResult(_Schema):
    """Structured critique of one resume against one role."""

    score: int = Field(ge=0, le=100)
    overview: str
    strengths: List[str]
    skills: SkillBuckets
    missing: List[MissingSection]
    improvements: List[Improvement]
    role_alignment: RoleAlignment = Field(alias="roleAlignment")
    action_plan: List[str] = Field(alias="actionPlan")

    def to_dict(self) -> Dict[str, Any]:
        """Dump using the service's camelCase field names."""
        return self.model_dump(by_alias=True)


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapped around a JSON body."""
    text = text.strip()
    text = _FENCE_OPEN.sub("", text)
    text = _FENCE_CLOSE.sub("", text)
    return text.strip()


def parse_analysis_result(text: str) -> AnalysisResult:
    """Parse the service's raw text into an AnalysisResult.

    Raises:
        ResponseFormatError: If the text is not JSON or does not match the schema.
    """
    body = strip_code_fences(text or "")
    if not body:
        raise ResponseFormatError("Empty analysis response")

    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ResponseFormatError(f"Analysis response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ResponseFormatError(f"Analysis response must be a JSON object, got {type(data).__name__}")

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in exc.errors()
        )
        raise ResponseFormatError(f"Analysis response does not match schema: {problems}") from exc

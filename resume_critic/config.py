"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

import yaml

API_KEY_ENV = "GEMINI_API_KEY"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_DIMENSION = 1500
DEFAULT_JPEG_QUALITY = 80

DEFAULT_ROLES: List[str] = [
    "Software Engineer",
    "Frontend Developer",
    "Backend Developer",
    "Full Stack Developer",
    "Data Scientist",
    "Machine Learning Engineer",
    "DevOps Engineer",
    "Product Manager",
]


@dataclass
class CritiqueConfig:
    """Runtime settings for the analysis pipeline."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    request_timeout: float = DEFAULT_TIMEOUT
    max_image_dimension: int = DEFAULT_MAX_DIMENSION
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    roles: List[str] = field(default_factory=lambda: list(DEFAULT_ROLES))
    verbose: bool = False


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ConfigIssue:
    """A single configuration issue."""

    field: str
    message: str
    severity: Severity


def load_config(config_path: str = "config/config.yaml") -> CritiqueConfig:
    """Load configuration from YAML, falling back to defaults when the file is absent."""
    data = read_raw_config(config_path)
    return CritiqueConfig(
        api_key=resolve_api_key(data.get("api_key", "")),
        model=data.get("model", DEFAULT_MODEL),
        request_timeout=data.get("request_timeout", DEFAULT_TIMEOUT),
        max_image_dimension=data.get("max_image_dimension", DEFAULT_MAX_DIMENSION),
        jpeg_quality=data.get("jpeg_quality", DEFAULT_JPEG_QUALITY),
        roles=list(data.get("roles") or DEFAULT_ROLES),
        verbose=bool(data.get("verbose", False)),
    )


def read_raw_config(config_path: str) -> Dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        return {}

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def resolve_api_key(config_api_key: Any) -> str:
    """Resolve the API key from the environment or the config value.

    The env var takes priority. ``${VAR}`` placeholders are expanded; an
    unresolvable placeholder yields an empty string.
    """
    env_value = os.environ.get(API_KEY_ENV, "")
    if env_value:
        return env_value

    if not config_api_key or not isinstance(config_api_key, str):
        return ""

    if not config_api_key.startswith("${"):
        return config_api_key

    if config_api_key.endswith("}"):
        return os.environ.get(config_api_key[2:-1], "")

    return ""


def validate_config(raw_config: Dict[str, Any]) -> List[ConfigIssue]:
    """Validate raw configuration and return a list of issues (empty = valid)."""
    issues: List[ConfigIssue] = []

    # --- API Key ---
    if not resolve_api_key(raw_config.get("api_key", "")):
        issues.append(
            ConfigIssue(
                field="api_key",
                message=f"{API_KEY_ENV} not set. Set the env var or add api_key to the config file",
                severity=Severity.ERROR,
            )
        )

    # --- Model ---
    model = raw_config.get("model", DEFAULT_MODEL)
    if not model or not isinstance(model, str):
        issues.append(
            ConfigIssue(
                field="model",
                message="model must be a non-empty string",
                severity=Severity.ERROR,
            )
        )

    # --- Timeout ---
    timeout = raw_config.get("request_timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        issues.append(
            ConfigIssue(
                field="request_timeout",
                message=f"request_timeout must be a positive number of seconds, got {timeout!r}",
                severity=Severity.ERROR,
            )
        )

    # --- Image limits ---
    max_dim = raw_config.get("max_image_dimension", DEFAULT_MAX_DIMENSION)
    if isinstance(max_dim, bool) or not isinstance(max_dim, int) or max_dim <= 0:
        issues.append(
            ConfigIssue(
                field="max_image_dimension",
                message=f"max_image_dimension must be a positive integer, got {max_dim!r}",
                severity=Severity.ERROR,
            )
        )

    quality = raw_config.get("jpeg_quality", DEFAULT_JPEG_QUALITY)
    if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 95:
        issues.append(
            ConfigIssue(
                field="jpeg_quality",
                message=f"jpeg_quality must be an integer between 1 and 95, got {quality!r}",
                severity=Severity.ERROR,
            )
        )

    # --- Roles ---
    roles = raw_config.get("roles", DEFAULT_ROLES)
    if not isinstance(roles, list) or not all(isinstance(r, str) and r.strip() for r in roles):
        issues.append(
            ConfigIssue(
                field="roles",
                message="roles must be a list of non-empty strings",
                severity=Severity.ERROR,
            )
        )
    elif not roles:
        issues.append(
            ConfigIssue(
                field="roles",
                message="roles is empty; the built-in role list will be used",
                severity=Severity.WARNING,
            )
        )

    return issues


def has_errors(issues: List[ConfigIssue]) -> bool:
    """Check if any issues are errors (not just warnings)."""
    return any(issue.severity == Severity.ERROR for issue in issues)

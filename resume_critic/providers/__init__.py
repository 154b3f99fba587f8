"""Provider factory and defaults."""

from __future__ import annotations

from typing import Optional

from ..errors import ConfigurationError
from .base import ChatProvider
from .gemini import GeminiProvider


def create_provider(
    api_key: str,
    model: str,
    timeout: Optional[float] = None,
) -> ChatProvider:
    if not api_key:
        raise ConfigurationError("API key missing. Set GEMINI_API_KEY or add api_key to the config file")
    return GeminiProvider(api_key=api_key, model=model, timeout=timeout)


__all__ = [
    "ChatProvider",
    "GeminiProvider",
    "create_provider",
]

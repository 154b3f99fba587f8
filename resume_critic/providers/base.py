"""Provider protocol definition."""

from __future__ import annotations

from typing import List, Protocol

from .types import GenerationConfig, LLMResponse, Message


class ChatProvider(Protocol):
    """Protocol for provider implementations."""

    async def generate(
        self,
        messages: List[Message],
        config: GenerationConfig,
    ) -> LLMResponse: ...

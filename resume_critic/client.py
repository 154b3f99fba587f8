"""Analysis client: one structured critique request per submission."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from .config import DEFAULT_MODEL, DEFAULT_TIMEOUT
from .errors import ConfigurationError, CritiqueError, ServiceError
from .models import AnalysisResult, parse_analysis_result
from .observability import AnalysisObserver
from .preparer import is_image_mime
from .prompts import build_analysis_prompt
from .providers import ChatProvider, create_provider
from .providers.types import GenerationConfig, Message, MessagePart

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., ChatProvider]


class AnalysisClient:
    """Sends a prepared document and a role to the AI service and parses the critique.

    No session or connection state is kept between calls: a provider is built
    for each request and dropped once it settles.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        provider_factory: ProviderFactory = create_provider,
        observer: Optional[AnalysisObserver] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._provider_factory = provider_factory
        self.observer = observer

    async def analyze(self, payload: str, mime_type: str, role: str) -> AnalysisResult:
        """Request a critique of ``payload`` for ``role``.

        Raises:
            ConfigurationError: No API key configured; raised before any network activity.
            ServiceError: Transport failure, non-success status or timeout.
            ResponseFormatError: The response is not a conforming Analysis Result.
        """
        if not self.api_key:
            raise ConfigurationError("API Key Missing")

        is_image = is_image_mime(mime_type)
        message = Message(
            role="user",
            parts=[
                MessagePart.from_inline_data(mime_type=mime_type, data=payload),
                MessagePart.from_text(build_analysis_prompt(role, is_image=is_image)),
            ],
        )
        config = GenerationConfig(response_mime_type="application/json")

        provider = self._provider_factory(api_key=self.api_key, model=self.model, timeout=self.timeout)

        start = time.time()
        try:
            response = await asyncio.wait_for(provider.generate([message], config), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            self._log_request(role, start, success=False)
            raise ServiceError(f"AI service did not respond within {self.timeout:g}s", cause=exc) from exc
        except CritiqueError:
            self._log_request(role, start, success=False)
            raise

        tokens = response.usage.get("total_tokens") if response.usage else None
        self._log_request(role, start, success=True, tokens=tokens)
        return parse_analysis_result(response.text)

    def _log_request(self, role: str, start: float, success: bool, tokens: Optional[int] = None) -> None:
        duration_ms = (time.time() - start) * 1000
        if self.observer:
            self.observer.log_llm_request(self.model, role, duration_ms, tokens=tokens, success=success)
        else:
            logger.debug(f"LLM request to {self.model} finished in {duration_ms:.2f}ms (success={success})")

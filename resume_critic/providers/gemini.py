"""Gemini provider implementation."""

from __future__ import annotations

import asyncio
import base64
import binascii
from typing import Dict, List, Optional

import httpx
from google import genai
from google.genai import errors, types

from ..errors import DocumentReadError, ResponseFormatError, ServiceError
from .types import GenerationConfig, LLMResponse, Message


class GeminiProvider:
    """Google Gemini provider using google-genai SDK."""

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: Optional[float] = None,
    ) -> None:
        self.model = model
        http_options = types.HttpOptions(timeout=int(timeout * 1000)) if timeout else None
        self.client = genai.Client(api_key=api_key, http_options=http_options)

    async def generate(
        self,
        messages: List[Message],
        config: GenerationConfig,
    ) -> LLMResponse:
        contents = self._to_gemini_contents(messages)

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=config.system_prompt if config.system_prompt else None,
                    max_output_tokens=config.max_tokens,
                    temperature=config.temperature,
                    response_mime_type=config.response_mime_type,
                ),
            )
        except errors.UnknownApiResponseError as exc:
            raise ServiceError(f"Gemini returned an unreadable response: {exc}", cause=exc) from exc
        except errors.APIError as exc:
            raise ServiceError(f"Gemini API error {exc.code}: {exc.message or exc}", cause=exc) from exc
        except httpx.HTTPError as exc:
            raise ServiceError(f"Gemini request failed: {exc}", cause=exc) from exc

        return self._from_gemini_response(response)

    def _from_gemini_response(self, response) -> LLMResponse:
        if not response.candidates:
            raise ResponseFormatError("Empty LLM response: no candidates")

        candidate = response.candidates[0]
        parts = candidate.content.parts if candidate.content else []
        text_parts = [part.text for part in parts or [] if part.text]

        return LLMResponse(
            text="".join(text_parts).strip(),
            usage=self._usage(response),
            raw=response,
        )

    def _usage(self, response) -> Optional[Dict[str, int]]:
        meta = getattr(response, "usage_metadata", None)
        if meta is None:
            return None
        return {
            "prompt_tokens": meta.prompt_token_count or 0,
            "completion_tokens": meta.candidates_token_count or 0,
            "total_tokens": meta.total_token_count or 0,
        }

    def _to_gemini_contents(self, messages: List[Message]) -> List[types.Content]:
        contents: List[types.Content] = []
        for msg in messages:
            role = "model" if msg.role == "assistant" else "user"

            parts: List[types.Part] = []
            for part in msg.parts:
                if part.inline_data:
                    try:
                        raw = base64.b64decode(part.inline_data.data, validate=True)
                    except (binascii.Error, ValueError) as exc:
                        raise DocumentReadError(f"Payload is not valid base64: {exc}") from exc
                    parts.append(types.Part.from_bytes(data=raw, mime_type=part.inline_data.mime_type))
                elif part.text:
                    parts.append(types.Part.from_text(text=part.text))

            contents.append(types.Content(role=role, parts=parts))
        return contents

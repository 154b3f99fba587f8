"""Provider-agnostic message types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class InlineData:
    """A document carried inline in a request, as base64 text."""

    mime_type: str
    data: str


@dataclass
class MessagePart:
    """A part of a message: text or an inline document."""

    text: Optional[str] = None
    inline_data: Optional[InlineData] = None

    @classmethod
    def from_text(cls, text: str) -> "MessagePart":
        return cls(text=text)

    @classmethod
    def from_inline_data(cls, mime_type: str, data: str) -> "MessagePart":
        return cls(inline_data=InlineData(mime_type=mime_type, data=data))


@dataclass
class Message:
    """Provider-agnostic chat message."""

    role: str  # "user" | "assistant"
    parts: List[MessagePart] = field(default_factory=list)

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role="user", parts=[MessagePart.from_text(text)])


@dataclass
class GenerationConfig:
    """Common generation settings passed to providers."""

    system_prompt: str = ""
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    response_mime_type: Optional[str] = None


@dataclass
class LLMResponse:
    """Normalized response from a provider."""

    text: str = ""
    usage: Optional[Dict[str, int]] = None
    raw: Any = None

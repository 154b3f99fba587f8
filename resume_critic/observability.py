"""Observability for analysis runs - logging and lightweight metrics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class AnalysisEvent:
    """A single event in an analysis run."""

    timestamp: datetime
    event_type: str  # "prepare", "llm_request", "transition", "error"
    data: Dict[str, Any]
    duration_ms: Optional[float] = None


class AnalysisObserver:
    """
    Observability layer for the submit pipeline.

    Collects events and mirrors them to the ``resume_critic`` logger.
    """

    def __init__(self, verbose: bool = False):
        self.events: List[AnalysisEvent] = []
        self.logger = logging.getLogger("resume_critic")
        self.verbose = verbose
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging format and handlers."""
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.logger.setLevel(logging.INFO if self.verbose else logging.WARNING)

    def log_prepare(self, mime_type: str, payload_chars: int, duration_ms: float):
        """
        Log a finished document preparation.

        Args:
            mime_type: MIME type sent to the service
            payload_chars: Length of the base64 payload
            duration_ms: Decode/encode time in milliseconds
        """
        self.events.append(
            AnalysisEvent(
                timestamp=datetime.now(),
                event_type="prepare",
                data={"mime_type": mime_type, "payload_chars": payload_chars},
                duration_ms=duration_ms,
            )
        )
        self.logger.info(f"Prepared {mime_type} payload ({payload_chars} chars, {duration_ms:.2f}ms)")

    def log_llm_request(
        self,
        model: str,
        role: str,
        duration_ms: float,
        tokens: Optional[int] = None,
        success: bool = True,
    ):
        """Log one request to the AI service."""
        self.events.append(
            AnalysisEvent(
                timestamp=datetime.now(),
                event_type="llm_request",
                data={"model": model, "role": role, "tokens": tokens, "success": success},
                duration_ms=duration_ms,
            )
        )
        status = "ok" if success else "failed"
        token_info = f" | {tokens} tokens" if tokens is not None else ""
        self.logger.info(f"LLM: {model} | role={role!r} | {status}{token_info} | {duration_ms:.2f}ms")

    def log_transition(self, dimension: str, source: str, target: str):
        """Log a view or lifecycle state change."""
        self.events.append(
            AnalysisEvent(
                timestamp=datetime.now(),
                event_type="transition",
                data={"dimension": dimension, "from": source, "to": target},
            )
        )
        self.logger.debug(f"{dimension}: {source} -> {target}")

    def log_error(self, error_type: str, message: str, context: Optional[Dict[str, Any]] = None):
        """
        Log an error event.

        Malformed service output is logged apart from transport failures, since
        it usually points at a prompt/schema mismatch rather than the network.

        Args:
            error_type: ``error_type`` of the raised error (e.g. "service")
            message: Error message
            context: Additional context about the error
        """
        self.events.append(
            AnalysisEvent(
                timestamp=datetime.now(),
                event_type="error",
                data={"error_type": error_type, "message": message, "context": context or {}},
            )
        )
        if error_type == "response_format":
            self.logger.error(f"Malformed analysis response (schema mismatch?): {message}")
        else:
            self.logger.error(f"Error ({error_type}): {message}")

    def get_session_stats(self) -> Dict[str, Any]:
        """
        Get aggregated statistics for the current session.

        Returns:
            Dictionary with session statistics
        """
        llm_requests = [e for e in self.events if e.event_type == "llm_request"]
        errors = [e for e in self.events if e.event_type == "error"]

        errors_by_type: Dict[str, int] = {}
        for event in errors:
            key = event.data.get("error_type", "unknown")
            errors_by_type[key] = errors_by_type.get(key, 0) + 1

        return {
            "event_count": len(self.events),
            "llm_requests": len(llm_requests),
            "total_llm_ms": sum(e.duration_ms or 0 for e in llm_requests),
            "errors": len(errors),
            "errors_by_type": errors_by_type,
        }

    def clear(self):
        """Clear all recorded events."""
        self.events.clear()

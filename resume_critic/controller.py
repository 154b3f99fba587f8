"""View routing and the submission lifecycle."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from .client import AnalysisClient
from .errors import CritiqueError, user_message
from .models import AnalysisResult
from .observability import AnalysisObserver
from .preparer import DocumentFile, DocumentPreparer

logger = logging.getLogger(__name__)

STATUS_PREPARING = "Preparing document..."
STATUS_ANALYZING = "Consulting Gemini AI..."


class View(str, Enum):
    HOME = "home"
    UPLOAD = "upload"
    RESULTS = "results"


class Lifecycle(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass
class AppState:
    """Application state, owned by a single ViewController."""

    current_view: View = View.HOME
    is_busy: bool = False
    selected_role: str = ""
    last_result: Optional[AnalysisResult] = None
    last_error: Optional[str] = None
    last_error_retryable: bool = False

    @property
    def lifecycle(self) -> Lifecycle:
        return Lifecycle.SUBMITTING if self.is_busy else Lifecycle.IDLE


Renderer = Callable[[AppState], None]
StatusCallback = Callable[[str], None]


class ViewController:
    """Drives which view is visible and gates analysis submissions.

    At most one submission is in flight: ``submit`` while submitting is
    ignored. Failures of any kind are stored in ``state.last_error``; the
    previous result is kept and the view is left where it was.
    """

    def __init__(
        self,
        preparer: DocumentPreparer,
        client: AnalysisClient,
        renderer: Optional[Renderer] = None,
        state: Optional[AppState] = None,
        observer: Optional[AnalysisObserver] = None,
        on_status: Optional[StatusCallback] = None,
    ):
        self.preparer = preparer
        self.client = client
        self.renderer = renderer
        self.state = state or AppState()
        self.observer = observer
        self.on_status = on_status

    @property
    def can_submit(self) -> bool:
        return self.state.lifecycle == Lifecycle.IDLE

    def navigate(self, target: Union[View, str]) -> bool:
        """Switch to ``target``. Unknown views are ignored and return False."""
        try:
            view = View(target)
        except ValueError:
            logger.warning(f"Ignoring navigation to unknown view {target!r}")
            return False

        previous = self.state.current_view
        self.state.current_view = view
        self._transition("view", previous.value, view.value)

        if view == View.RESULTS and self.renderer is not None:
            self.renderer(self.state)
        return True

    async def submit(self, file: Optional[DocumentFile], role: Optional[str]) -> bool:
        """Prepare ``file``, analyze it for ``role`` and show the results.

        Returns True when a new result was stored. A call while another
        submission is in flight, or without a file or role, does nothing.
        """
        if not self.can_submit:
            logger.debug("Submission already in flight; ignoring submit")
            return False
        if not file or not role:
            return False

        state = self.state
        state.is_busy = True
        state.selected_role = role
        state.last_error = None
        state.last_error_retryable = False
        self._transition("lifecycle", Lifecycle.IDLE.value, Lifecycle.SUBMITTING.value)

        try:
            self._status(STATUS_PREPARING)
            start = time.time()
            prepared = await self.preparer.prepare(file)
            if self.observer:
                self.observer.log_prepare(prepared.mime_type, len(prepared.payload), (time.time() - start) * 1000)

            self._status(STATUS_ANALYZING)
            result = await self.client.analyze(prepared.payload, prepared.mime_type, role)
        except CritiqueError as exc:
            state.last_error = user_message(exc)
            state.last_error_retryable = exc.retryable
            if self.observer:
                self.observer.log_error(exc.error_type, state.last_error, {"file": file.name, "role": role})
            else:
                logger.error(f"Analysis failed ({exc.error_type}): {state.last_error}")
            return False
        finally:
            state.is_busy = False
            self._transition("lifecycle", Lifecycle.SUBMITTING.value, Lifecycle.IDLE.value)
            self._status("")

        state.last_result = result
        state.last_error = None
        self.navigate(View.RESULTS)
        return True

    def _status(self, message: str) -> None:
        if self.on_status is not None:
            self.on_status(message)

    def _transition(self, dimension: str, source: str, target: str) -> None:
        if self.observer:
            self.observer.log_transition(dimension, source, target)

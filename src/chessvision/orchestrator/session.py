"""
Analysis workflow and state management.

This module sits between a shell (CLI, web service, app) and a vision
provider. It holds the captured image, gates duplicate submissions while a
request is in flight, runs the provider off the event loop and turns its
answer into a tagged AnalysisResult.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum, auto

from chessvision.core.config import AppConfig
from chessvision.core.errors import ChessVisionError, ConfigError
from chessvision.core.fen import is_fen_shaped
from chessvision.core.images import ImageSource, encode_image
from chessvision.core.interfaces import AnalysisObserver, VisionProvider
from chessvision.core.models import AnalysisResult


logger = logging.getLogger(__name__)

# Answers starting with this prefix are reported as failures
ERROR_PREFIX = "ERROR:"


class SessionState(Enum):
    """Analysis workflow states."""
    IDLE = auto()            # No image captured
    CAPTURED = auto()        # Image captured, not analyzed
    ANALYZING = auto()       # Request in flight
    RESULT_READY = auto()    # Result (FEN, unrecognized or error) available


@dataclass
class SessionContext:
    """Current session data."""
    image: ImageSource | None = None
    capture_id: int = 0      # Bumped on every capture/retake
    result: AnalysisResult | None = None


def classify_text(text: str) -> AnalysisResult:
    """
    Classify a provider's answer.

    - "ERROR:"-prefixed text is a failure reported by the model
    - FEN-shaped text is a success
    - anything else is kept as an unrecognized answer
    """
    text = text.strip()
    if text.startswith(ERROR_PREFIX):
        return AnalysisResult.error(text)
    if is_fen_shaped(text):
        return AnalysisResult.success(text)
    return AnalysisResult.unrecognized(text)


class AnalysisSession:
    """
    Orchestrates the capture -> analyze -> display workflow.

    Responsibilities:
    - Hold the captured image and the latest result
    - Allow a single analysis in flight at a time
    - Discard results that arrive after the image was retaken
    - Notify observers of progress
    """

    def __init__(self, provider: VisionProvider, config: AppConfig) -> None:
        self._provider = provider
        self._config = config

        self._state = SessionState.IDLE
        self._context = SessionContext()
        self._observers: list[AnalysisObserver] = []
        self._analyzing = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def provider(self) -> VisionProvider:
        return self._provider

    @property
    def is_analyzing(self) -> bool:
        return self._analyzing

    @property
    def result(self) -> AnalysisResult | None:
        return self._context.result

    # Observer pattern

    def add_observer(self, observer: AnalysisObserver) -> None:
        """Add an observer for analysis events."""
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: AnalysisObserver) -> None:
        """Remove an observer."""
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify_started(self) -> None:
        for observer in self._observers:
            try:
                observer.on_analysis_started()
            except Exception as e:
                logger.error(f"Observer error: {e}")

    def _notify_result(self, result: AnalysisResult) -> None:
        for observer in self._observers:
            try:
                observer.on_result(result)
            except Exception as e:
                logger.error(f"Observer error: {e}")

    # State transitions

    def _set_state(self, new_state: SessionState) -> None:
        if new_state != self._state:
            logger.info(f"Session state: {self._state.name} -> {new_state.name}")
            self._state = new_state

    def _finish(self, result: AnalysisResult) -> AnalysisResult:
        self._context.result = result
        self._set_state(SessionState.RESULT_READY)
        self._notify_result(result)
        return result

    # Capture operations

    def capture(self, image: ImageSource) -> None:
        """Store a newly captured image, discarding any previous result."""
        self._context.capture_id += 1
        self._context.image = image
        self._context.result = None
        self._set_state(SessionState.CAPTURED)

    def retake(self) -> None:
        """Drop the current image and result; an in-flight answer will be ignored."""
        self._context.capture_id += 1
        self._context.image = None
        self._context.result = None
        self._set_state(SessionState.IDLE)

    # Analysis

    async def analyze(self) -> AnalysisResult | None:
        """
        Analyze the captured image.

        Returns:
            The result, or None if another analysis was already in flight
            or the image was retaken before the answer arrived.
        """
        if self._analyzing:
            logger.info("Analysis already in progress, ignoring request")
            return None

        image = self._context.image
        if image is None:
            return self._finish(AnalysisResult.error("No image captured"))

        try:
            api_key = self._config.api_key_for()
        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            return self._finish(AnalysisResult.error(str(e)))

        capture_id = self._context.capture_id
        self._analyzing = True
        self._set_state(SessionState.ANALYZING)
        self._notify_started()

        try:
            try:
                payload = encode_image(image, max_size=self._config.max_image_size)
            except OSError as e:
                logger.error(f"Could not read image: {e}")
                result = AnalysisResult.error(f"Could not read image: {e}")
            else:
                result = await self._run_provider(payload.data, api_key)
        finally:
            self._analyzing = False

        if capture_id != self._context.capture_id:
            logger.info("Image changed during analysis, discarding result")
            return None

        return self._finish(result)

    async def _run_provider(self, image_b64: str, api_key: str) -> AnalysisResult:
        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(
                None,
                self._provider.analyze,
                image_b64,
                api_key,
            )
        except ChessVisionError as e:
            logger.error(f"Analysis failed: {e}")
            return AnalysisResult.error(str(e))

        result = classify_text(text)
        logger.info(f"{self._provider.name}: {result.kind.name} {result.text!r}")
        return result

"""
Protocol definitions for pluggable components.

These structural interfaces let any vision backend be swapped in without
changing the orchestrator or the shells.
"""

from typing import Protocol, runtime_checkable

from chessvision.core.models import AnalysisResult


@runtime_checkable
class VisionProvider(Protocol):
    """
    Protocol for vision API backends.

    Calls are synchronous and perform exactly one network round trip;
    the orchestrator runs them off the event loop.
    """

    @property
    def name(self) -> str:
        """Human-readable name of this backend."""
        ...

    def analyze(self, image_b64: str, api_key: str) -> str:
        """
        Ask the backend for the FEN of a chess diagram.

        Args:
            image_b64: Base64-encoded JPEG image
            api_key: Provider API key

        Returns:
            The extracted FEN, or the model's raw text if no FEN was found.

        Raises:
            ConfigError: If api_key is empty
            TransportError: On network failure or non-2xx status
            SchemaError: If the response envelope is not recognized
        """
        ...


class AnalysisObserver(Protocol):
    """
    Observer protocol for analysis progress.

    Shells implement this to update their display.
    """

    def on_analysis_started(self) -> None:
        """Called when a request has been sent to the provider."""
        ...

    def on_result(self, result: AnalysisResult) -> None:
        """Called when an analysis has produced a result (success or error)."""
        ...

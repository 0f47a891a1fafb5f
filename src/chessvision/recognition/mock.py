"""
Mock vision provider for testing and development.

Answers with canned text instead of calling a real API. Useful for:
- Exercising the orchestrator and shells without network access
- Simulating provider failures
- Holding a request "in flight" to test abandonment and gating
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from chessvision.core.errors import ConfigError, SchemaError, TransportError
from chessvision.core.fen import STARTING_FEN, extract_fen


logger = logging.getLogger(__name__)


@dataclass
class MockProviderConfig:
    """Configuration for mock provider behavior."""
    # Text the "model" answers with (run through the FEN extractor)
    response_text: str = STARTING_FEN

    # Simulated failures
    fail_status: int | None = None      # Raise TransportError with this status
    fail_body: str = "mock failure"
    fail_schema: bool = False           # Raise SchemaError

    # When set, analyze() blocks until the event is set
    release: threading.Event | None = None
    release_timeout_s: float = 5.0


@dataclass
class CallLogEntry:
    """Log entry for a call made to the mock provider."""
    timestamp: datetime
    image_b64: str
    api_key: str


class MockVisionProvider:
    """
    Mock implementation of the VisionProvider protocol.

    All calls are logged for verification in tests.
    """

    def __init__(self, config: MockProviderConfig | None = None) -> None:
        self._config = config or MockProviderConfig()
        self._call_log: list[CallLogEntry] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "Mock Vision"

    @property
    def call_log(self) -> list[CallLogEntry]:
        """Access call log for testing."""
        with self._lock:
            return self._call_log.copy()

    def analyze(self, image_b64: str, api_key: str) -> str:
        if not api_key:
            raise ConfigError("MOCK_API_KEY is not set")

        with self._lock:
            self._call_log.append(CallLogEntry(datetime.now(), image_b64, api_key))
        logger.debug(f"MockVision: analyze ({len(image_b64)} chars)")

        if self._config.release is not None:
            self._config.release.wait(self._config.release_timeout_s)

        if self._config.fail_status is not None:
            raise TransportError(
                f"API request failed: {self._config.fail_status} - {self._config.fail_body}",
                status=self._config.fail_status,
                body=self._config.fail_body,
            )
        if self._config.fail_schema:
            raise SchemaError("Invalid API response format: {}")

        return extract_fen(self._config.response_text)

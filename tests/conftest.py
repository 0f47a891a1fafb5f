"""
Pytest configuration and fixtures for chessvision tests.
"""

import io
import json
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np
import pytest
from PIL import Image

from chessvision.core.config import AppConfig
from chessvision.core.models import ProviderKind
from chessvision.recognition.http import HttpResponse


ENV_VARS = (
    "XAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "ZAI_API_KEY",
    "CHESSVISION_PROVIDER",
    "CHESSVISION_MODEL",
    "CHESSVISION_TIMEOUT",
    "CHESSVISION_MAX_IMAGE_SIZE",
)


@dataclass
class RecordedRequest:
    url: str
    headers: dict[str, str]
    payload: dict[str, Any]
    timeout: float | None


class RecordingTransport:
    """Stands in for post_json: records requests and replays one response."""

    def __init__(self, status: int = 200, body: Any = None, text: str | None = None) -> None:
        self.response = HttpResponse(
            status=status,
            text=text if text is not None else json.dumps(body),
        )
        self.requests: list[RecordedRequest] = []

    def __call__(
        self,
        url: str,
        headers: Mapping[str, str],
        payload: dict[str, Any],
        timeout: float | None,
    ) -> HttpResponse:
        self.requests.append(RecordedRequest(url, dict(headers), payload, timeout))
        return self.response

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def transport_factory():
    """Build a RecordingTransport for a given status/body."""
    return RecordingTransport


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every chessvision-related environment variable."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def openai_config() -> AppConfig:
    """Configuration with an OpenAI key set."""
    return AppConfig(
        provider=ProviderKind.OPENAI,
        api_keys={ProviderKind.OPENAI: "sk-test"},
    )


@pytest.fixture
def sample_chessboard_image() -> np.ndarray:
    """Create a simple test chessboard image."""
    size = 160
    square_size = size // 8

    image = np.zeros((size, size, 3), dtype=np.uint8)

    for row in range(8):
        for col in range(8):
            x0 = col * square_size
            y0 = row * square_size

            is_light = (row + col) % 2 == 0
            color = (240, 217, 181) if is_light else (181, 136, 99)

            image[y0:y0+square_size, x0:x0+square_size] = color

    return image


@pytest.fixture
def sample_jpeg_bytes(sample_chessboard_image: np.ndarray) -> bytes:
    """The test chessboard encoded as JPEG."""
    buffer = io.BytesIO()
    Image.fromarray(sample_chessboard_image).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def sample_png_bytes(sample_chessboard_image: np.ndarray) -> bytes:
    """The test chessboard encoded as PNG."""
    buffer = io.BytesIO()
    Image.fromarray(sample_chessboard_image).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def starting_position_fen() -> str:
    """The standard chess starting position FEN."""
    return "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

"""Core abstractions, data models, and utilities."""

from chessvision.core.models import (
    ProviderKind,
    ResultKind,
    ImagePayload,
    AnalysisResult,
)
from chessvision.core.errors import (
    ChessVisionError,
    ConfigError,
    ApiError,
    TransportError,
    SchemaError,
)
from chessvision.core.interfaces import (
    VisionProvider,
    AnalysisObserver,
)
from chessvision.core.config import AppConfig, get_config
from chessvision.core.fen import (
    extract_fen,
    is_fen_shaped,
    normalize_fen,
    STARTING_FEN,
)
from chessvision.core.images import encode_image

__all__ = [
    # Models
    "ProviderKind",
    "ResultKind",
    "ImagePayload",
    "AnalysisResult",
    # Errors
    "ChessVisionError",
    "ConfigError",
    "ApiError",
    "TransportError",
    "SchemaError",
    # Interfaces
    "VisionProvider",
    "AnalysisObserver",
    # Configuration
    "AppConfig",
    "get_config",
    # FEN utilities
    "extract_fen",
    "is_fen_shaped",
    "normalize_fen",
    "STARTING_FEN",
    # Images
    "encode_image",
]

"""
chessvision - FEN from photos of chess diagrams via vision LLMs

This package provides:
- Best-effort FEN extraction from free-form model answers
- Adapters for several multimodal vision APIs (xAI, Anthropic, OpenAI, Z.ai)
- A small analysis workflow with CLI and HTTP shells
"""

__version__ = "0.1.0"
__author__ = "chessvision contributors"

from chessvision.core.models import (
    AnalysisResult,
    ImagePayload,
    ProviderKind,
    ResultKind,
)
from chessvision.core.fen import extract_fen

__all__ = [
    "AnalysisResult",
    "ImagePayload",
    "ProviderKind",
    "ResultKind",
    "extract_fen",
    "__version__",
]

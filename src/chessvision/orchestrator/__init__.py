"""Analysis workflow orchestration."""

from chessvision.orchestrator.session import (
    AnalysisSession,
    SessionState,
    classify_text,
)

__all__ = [
    "AnalysisSession",
    "SessionState",
    "classify_text",
]

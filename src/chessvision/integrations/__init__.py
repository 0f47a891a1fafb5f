"""External service integrations."""

from chessvision.integrations.lichess import (
    LICHESS_ANALYSIS_URL,
    lichess_analysis_url,
    open_in_lichess,
)

__all__ = [
    "LICHESS_ANALYSIS_URL",
    "lichess_analysis_url",
    "open_in_lichess",
]

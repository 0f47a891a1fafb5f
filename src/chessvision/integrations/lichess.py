"""
Lichess analysis board links.

Lichess accepts a FEN in the URL path with spaces replaced by underscores.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable


logger = logging.getLogger(__name__)

LICHESS_ANALYSIS_URL = "https://lichess.org/analysis/"


def lichess_analysis_url(fen: str) -> str:
    """Build the Lichess analysis URL for a FEN."""
    return LICHESS_ANALYSIS_URL + fen.strip().replace(" ", "_")


def open_in_lichess(
    fen: str,
    opener: Callable[[str], bool] = webbrowser.open,
) -> bool:
    """
    Open a position on the Lichess analysis board in the default browser.

    Returns:
        True if a browser was launched
    """
    url = lichess_analysis_url(fen)
    logger.info(f"Opening Lichess URL: {url}")
    opened = opener(url)
    if not opened:
        logger.warning("Could not open a browser for Lichess")
    return bool(opened)

"""
FEN (Forsyth-Edwards Notation) extraction and shape checks.

Vision models answer in free-form text: sometimes a bare FEN, sometimes a
rank-by-rank walkthrough ending in a "FEN:" line, sometimes an apology.
Extraction is therefore pattern-based and best-effort. An ordered list of
independent matchers is tried and the first hit wins; when nothing matches
the trimmed text is returned unchanged and the caller decides what to do
with it.

Nothing here checks that a position is legal.
"""

import re
from typing import Callable, Sequence


STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Character classes for each FEN field
PLACEMENT_CHARS = "rnbqkpRNBQKP1-8"
_RANK = f"[{PLACEMENT_CHARS}]{{1,8}}"
_STATE_FIELDS = r"\s+[wb]\s+[KQkq-]+\s+[a-h1-8-]+\s+\d+\s+\d+"

# "FEN: <six fields>", label matched case-insensitively
LABELED_FEN_PATTERN = re.compile(
    rf"(?i:fen):\s*([{PLACEMENT_CHARS}/]+{_STATE_FIELDS})"
)

# Eight ranks, optionally followed by the four state fields. The lookarounds
# keep a longer run of placement characters from matching partially, so
# feeding an extracted FEN back in yields the same string.
BARE_FEN_PATTERN = re.compile(
    rf"(?<![{PLACEMENT_CHARS}/])(?:{_RANK}/){{7}}{_RANK}(?![{PLACEMENT_CHARS}/])"
    rf"(?:{_STATE_FIELDS})?"
)

_FULL_SHAPE_PATTERN = re.compile(rf"(?:{_RANK}/){{7}}{_RANK}(?:{_STATE_FIELDS})?")

FenMatcher = Callable[[str], str | None]


def match_labeled_fen(text: str) -> str | None:
    """Find a full six-field FEN introduced by a "FEN:" label."""
    match = LABELED_FEN_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return None


def match_bare_fen(text: str) -> str | None:
    """
    Find an unlabeled FEN anywhere in the text.

    The four trailing state fields are optional because some models stop
    after the piece placement; a placement-only match is returned as is.
    """
    match = BARE_FEN_PATTERN.search(text)
    if match:
        return match.group(0).strip()
    return None


FEN_MATCHERS: tuple[FenMatcher, ...] = (
    match_labeled_fen,
    match_bare_fen,
)


def extract_fen(text: str, matchers: Sequence[FenMatcher] = FEN_MATCHERS) -> str:
    """
    Extract the best FEN candidate from a model's answer.

    Args:
        text: Raw text returned by a vision model
        matchers: Matchers to try, in priority order

    Returns:
        The first matcher's hit, or the trimmed input when none match.
        Never raises on a miss.
    """
    for matcher in matchers:
        candidate = matcher(text)
        if candidate:
            return candidate
    return text.strip()


def is_fen_shaped(text: str) -> bool:
    """
    Check that the whole string has the syntactic shape of a FEN.

    Accepts piece placement alone or placement plus the four state fields.
    Rank widths and piece counts are not checked.
    """
    if not text:
        return False
    return _FULL_SHAPE_PATTERN.fullmatch(text.strip()) is not None


def normalize_fen(fen: str) -> str:
    """
    Normalize a FEN string to a canonical form.

    - Collapses runs of whitespace to single spaces
    - Fills in missing trailing fields with defaults
    - Does NOT validate (call is_fen_shaped first)
    """
    defaults = ["w", "-", "-", "0", "1"]
    parts = fen.strip().split()
    if not parts:
        return ""

    missing = 6 - len(parts)
    if missing > 0:
        parts.extend(defaults[len(defaults) - missing:])

    return " ".join(parts)

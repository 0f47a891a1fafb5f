"""
Exception hierarchy for chess diagram analysis.

Provider adapters raise these; the orchestrator turns them into
ERROR results so that shells can display them inline.
"""


class ChessVisionError(Exception):
    """Base class for all chessvision errors."""


class ConfigError(ChessVisionError):
    """Raised when configuration is missing or invalid (e.g. no API key)."""


class ApiError(ChessVisionError):
    """Raised when a vision provider call fails."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body


class TransportError(ApiError):
    """Network failure or non-2xx HTTP status from the provider."""


class SchemaError(ApiError):
    """2xx response whose body matches no known envelope shape."""

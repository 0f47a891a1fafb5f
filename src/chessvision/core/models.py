"""
Data models for chessvision.

Every model is created fresh for a single analysis and discarded once the
result has been displayed; frozen dataclasses keep them immutable.
"""

from dataclasses import dataclass
from enum import Enum, auto


JPEG_MIME_TYPE = "image/jpeg"


class ProviderKind(Enum):
    """Supported vision API backends."""
    GROK = "grok"        # xAI chat completions
    CLAUDE = "claude"    # Anthropic messages
    OPENAI = "openai"    # OpenAI responses
    ZAI = "zai"          # Z.ai (GLM) chat completions

    @property
    def api_key_env(self) -> str:
        """Environment variable holding this provider's API key."""
        return _API_KEY_ENV[self]

    @classmethod
    def from_name(cls, name: str) -> "ProviderKind":
        """
        Resolve a provider from a user-supplied name.

        Accepts the enum value as well as the vendor name
        (e.g. "anthropic" for CLAUDE). Raises ValueError if unknown.
        """
        key = name.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        return cls(key)


_API_KEY_ENV = {
    ProviderKind.GROK: "XAI_API_KEY",
    ProviderKind.CLAUDE: "ANTHROPIC_API_KEY",
    ProviderKind.OPENAI: "OPENAI_API_KEY",
    ProviderKind.ZAI: "ZAI_API_KEY",
}

_ALIASES = {
    "xai": ProviderKind.GROK,
    "anthropic": ProviderKind.CLAUDE,
    "glm": ProviderKind.ZAI,
}


class ResultKind(Enum):
    """Outcome of a single analysis."""
    FEN = auto()            # A FEN-shaped string was extracted
    UNRECOGNIZED = auto()   # The model answered, but not with a FEN
    ERROR = auto()          # Transport, schema, config or model-reported error


@dataclass(frozen=True)
class ImagePayload:
    """A captured still image, base64-encoded for transmission."""
    data: str                          # base64 (no data-URI prefix)
    mime_type: str = JPEG_MIME_TYPE

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class AnalysisResult:
    """
    The result of one analyze action.

    `text` is the FEN for FEN results, the model's raw answer for
    UNRECOGNIZED results and a human-readable message for errors.
    """
    kind: ResultKind
    text: str

    @classmethod
    def success(cls, fen: str) -> "AnalysisResult":
        return cls(ResultKind.FEN, fen)

    @classmethod
    def unrecognized(cls, text: str) -> "AnalysisResult":
        return cls(ResultKind.UNRECOGNIZED, text)

    @classmethod
    def error(cls, message: str) -> "AnalysisResult":
        return cls(ResultKind.ERROR, message)

    @property
    def is_success(self) -> bool:
        return self.kind is ResultKind.FEN

    @property
    def fen(self) -> str | None:
        """The extracted FEN, or None if this is not a FEN result."""
        return self.text if self.is_success else None

"""Anthropic Claude vision backend (messages API)."""

from typing import Any

from chessvision.core.models import ImagePayload, ProviderKind
from chessvision.recognition.base import HTTPVisionProvider, text_part
from chessvision.recognition.envelopes import messages_text


ANTHROPIC_VERSION = "2023-06-01"

PROMPT = """Look at this chess diagram and return ONLY its FEN string, nothing else.

In printed diagrams WHITE pieces are HOLLOW (outline) and BLACK pieces are SOLID (filled).

Example of the expected format: r1b1r1k1/pp3ppp/2n1pn2/3p2N1/8/1B4P1/PP2PPBP/R2QR1K1 w - - 0 1"""


class ClaudeVisionProvider(HTTPVisionProvider):
    """Provider B: Anthropic messages with a base64 image block."""

    kind = ProviderKind.CLAUDE
    display_name = "Claude"
    endpoint = "https://api.anthropic.com/v1/messages"
    default_model = "claude-opus-4-5-20251101"
    envelope_readers = (messages_text,)

    def build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def build_payload(self, image: ImagePayload) -> dict[str, Any]:
        return {
            "model": self._model,
            "max_tokens": 150,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": image.mime_type,
                                "data": image.data,
                            },
                        },
                        text_part(PROMPT),
                    ],
                }
            ],
        }

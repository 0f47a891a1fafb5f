"""
OpenAI vision backend (responses API).

The responses API has changed shape more than once, so the answer is looked
for in `output_text` first, then in the output items, and finally in a
chat-completions style `choices` array.
"""

from typing import Any

from chessvision.core.models import ImagePayload, ProviderKind
from chessvision.recognition.base import HTTPVisionProvider, bearer_headers
from chessvision.recognition.envelopes import (
    chat_completion_text,
    output_items_text,
    output_text,
)


PROMPT = """Analyze this chess diagram and return its FEN notation.

PIECE COLORS (most important):
- WHITE pieces are HOLLOW/OUTLINED (empty inside, light)
- BLACK pieces are SOLID/FILLED (dark, shaded)

PIECE SHAPES:
- King: tall, cross on top
- Queen: crown with a ball or spikes
- Rook: tower with battlements
- Bishop: tall, with a diagonal slit
- Knight: horse head
- Pawn: small, round top

READING ORDER:
1. Go from rank 8 (top row) down to rank 1 (bottom row)
2. Read every rank from left to right (files a to h)
3. The board is drawn from White's side (white pieces at the bottom)

SANITY CHECK:
- No side has more than 1 king, 1 queen, 2 rooks, 2 bishops, 2 knights and 8 pawns
- At most 16 pieces per side

Return ONLY the FEN string, formatted like:
r1b1r1k1/pp3ppp/2n1pn2/3p2N1/8/1B4P1/PP2PPBP/R2QR1K1 w - - 0 1"""


class OpenAIVisionProvider(HTTPVisionProvider):
    """Provider C: OpenAI responses with an input_image data URI."""

    kind = ProviderKind.OPENAI
    display_name = "OpenAI"
    endpoint = "https://api.openai.com/v1/responses"
    default_model = "gpt-5.2"
    envelope_readers = (output_text, output_items_text, chat_completion_text)

    def build_headers(self, api_key: str) -> dict[str, str]:
        return bearer_headers(api_key)

    def build_payload(self, image: ImagePayload) -> dict[str, Any]:
        return {
            "model": self._model,
            "max_output_tokens": 150,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_image",
                            "image_url": image.data_uri,
                            "detail": "high",
                        },
                        {"type": "input_text", "text": PROMPT},
                    ],
                }
            ],
        }

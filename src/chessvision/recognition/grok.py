"""
xAI Grok vision backend (chat completions).

Grok is asked to read the board rank by rank before committing to a FEN,
so its answer is prose ending in a "FEN:" line.
"""

from typing import Any

from chessvision.core.models import ImagePayload, ProviderKind
from chessvision.recognition.base import (
    HTTPVisionProvider,
    bearer_headers,
    image_url_part,
    text_part,
)
from chessvision.recognition.envelopes import chat_completion_text


SYSTEM_PROMPT = """You read chess diagrams from photos of books, screens and physical boards.

First, go through the ranks from top to bottom (rank 8 down to rank 1).
For every rank list the contents of squares a to h:
- K=King, Q=Queen, R=Rook, B=Bishop, N=Knight, P=Pawn
- prefix 'w' for a white piece (hollow/outline) or 'b' for a black piece (solid/filled)
- '-' for an empty square

Then convert that listing to FEN.

Answer in this format:
Rank 8: bR - bB - bR - bK -
Rank 7: bP - - - - bP bP bP
...
Rank 1: wR - - - wR - wK -
FEN: r1b1r1k1/p4ppp/...

Remember that printed diagrams draw WHITE pieces HOLLOW (outlined, you can see
through them) and BLACK pieces SOLID (completely dark). Unless the diagram says
otherwise it is drawn from White's side, with rank 1 at the bottom."""

USER_PROMPT = """Read this chess diagram carefully, rank by rank from 8 to 1, listing every piece. Then give the FEN.

Hollow/outline pieces are WHITE, solid/filled pieces are BLACK."""


class GrokVisionProvider(HTTPVisionProvider):
    """Provider A: xAI chat completions with a data-URI image block."""

    kind = ProviderKind.GROK
    display_name = "Grok Vision"
    endpoint = "https://api.x.ai/v1/chat/completions"
    default_model = "grok-2-vision-1212"
    envelope_readers = (chat_completion_text,)

    def build_headers(self, api_key: str) -> dict[str, str]:
        return bearer_headers(api_key)

    def build_payload(self, image: ImagePayload) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        image_url_part(image, detail="high"),
                        text_part(USER_PROMPT),
                    ],
                },
            ],
            "temperature": 0,
            "max_tokens": 800,
        }

"""Z.ai GLM vision backend (OpenAI-compatible chat completions)."""

from typing import Any

from chessvision.core.models import ImagePayload, ProviderKind
from chessvision.recognition.base import (
    HTTPVisionProvider,
    bearer_headers,
    image_url_part,
    text_part,
)
from chessvision.recognition.envelopes import chat_completion_text


PROMPT = """You read chess diagrams. Work out the chess position shown in this image.

Go square by square from rank 8 (top) to rank 1 (bottom), and from file a to h (left to right).

In printed chess diagrams:
- WHITE pieces are HOLLOW/OUTLINED (unfilled, you can see through them)
- BLACK pieces are SOLID/FILLED (completely dark or shaded)

Return ONLY the FEN string for the position, nothing else.
Example: rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"""


class ZaiVisionProvider(HTTPVisionProvider):
    """Provider D: Z.ai chat completions; the image block has no detail field."""

    kind = ProviderKind.ZAI
    display_name = "Z.ai GLM"
    endpoint = "https://api.z.ai/api/paas/v4/chat/completions"
    default_model = "glm-4.6v"
    envelope_readers = (chat_completion_text,)

    def build_headers(self, api_key: str) -> dict[str, str]:
        return bearer_headers(api_key)

    def build_payload(self, image: ImagePayload) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        image_url_part(image),
                        text_part(PROMPT),
                    ],
                }
            ],
            "temperature": 0.1,
            "max_tokens": 200,
        }

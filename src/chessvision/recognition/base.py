"""
Shared machinery for HTTP vision providers.

A provider subclass only describes what differs between backends: the
endpoint, auth headers, request body and the envelope shapes it accepts.
Sending the request, turning failures into errors and running the FEN
extractor happen here.
"""

import json
import logging
from typing import Any, Sequence

from chessvision.core.errors import ConfigError, SchemaError, TransportError
from chessvision.core.fen import extract_fen
from chessvision.core.models import ImagePayload, ProviderKind
from chessvision.recognition.envelopes import EnvelopeReader
from chessvision.recognition.http import HttpResponse, Transport, post_json


logger = logging.getLogger(__name__)


class HTTPVisionProvider:
    """
    Base class for vision providers reached over JSON/HTTP.

    Implements the VisionProvider protocol. Subclasses set the class
    attributes and implement build_headers() and build_payload().
    """

    kind: ProviderKind
    display_name: str
    endpoint: str
    default_model: str
    envelope_readers: Sequence[EnvelopeReader] = ()

    def __init__(
        self,
        model: str | None = None,
        timeout: float | None = None,
        transport: Transport | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            model: Model name (defaults to the provider's default_model)
            timeout: Request timeout in seconds (None keeps the transport default)
            transport: Callable used to send requests (defaults to post_json)
        """
        self._model = model or self.default_model
        self._timeout = timeout
        self._transport = transport or post_json

    @property
    def name(self) -> str:
        return f"{self.display_name} ({self._model})"

    @property
    def model(self) -> str:
        return self._model

    def build_headers(self, api_key: str) -> dict[str, str]:
        raise NotImplementedError

    def build_payload(self, image: ImagePayload) -> dict[str, Any]:
        raise NotImplementedError

    def extract_text(self, envelope: Any) -> str | None:
        """Try each known envelope shape in order; None if none match."""
        for reader in self.envelope_readers:
            text = reader(envelope)
            if text is not None:
                return text
        return None

    def analyze(self, image_b64: str, api_key: str) -> str:
        """
        Send one image to the provider and extract the FEN from its answer.

        Returns the extracted FEN, or the model's trimmed text if it
        contains no FEN.
        """
        if not api_key or not api_key.strip():
            raise ConfigError(f"{self.kind.api_key_env} is not set")

        image = ImagePayload(image_b64)
        logger.debug(f"POST {self.endpoint} (model={self._model}, image={len(image_b64)} chars)")

        response = self._transport(
            self.endpoint,
            self.build_headers(api_key.strip()),
            self.build_payload(image),
            self._timeout,
        )

        if not response.ok:
            logger.warning(f"{self.display_name} returned HTTP {response.status}")
            raise TransportError(
                f"API request failed: {response.status} - {response.text}",
                status=response.status,
                body=response.text,
            )

        envelope = self._decode(response)
        text = self.extract_text(envelope)
        if text is None:
            logger.error(f"{self.display_name} returned an unrecognized envelope")
            raise SchemaError(
                f"Invalid API response format: {json.dumps(envelope)}",
                status=response.status,
                body=response.text,
            )

        logger.debug(f"{self.display_name} answered: {text!r}")
        return extract_fen(text)

    def _decode(self, response: HttpResponse) -> Any:
        try:
            return json.loads(response.text)
        except json.JSONDecodeError:
            raise SchemaError(
                f"Invalid API response format: {response.text}",
                status=response.status,
                body=response.text,
            ) from None


def bearer_headers(api_key: str) -> dict[str, str]:
    """Authorization header used by OpenAI-compatible APIs."""
    return {"Authorization": f"Bearer {api_key}"}


def image_url_part(image: ImagePayload, detail: str | None = None) -> dict[str, Any]:
    """Chat-completions content block embedding the image as a data URI."""
    image_url: dict[str, Any] = {"url": image.data_uri}
    if detail is not None:
        image_url["detail"] = detail
    return {"type": "image_url", "image_url": image_url}


def text_part(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}

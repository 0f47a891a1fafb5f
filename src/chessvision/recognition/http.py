"""
Minimal JSON-over-HTTP transport.

Uses only stdlib (urllib, json). Non-2xx responses are returned rather than
raised so that adapters can build errors that carry the provider's own
error text; only connection-level failures raise.
"""

from __future__ import annotations

import http.client
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from chessvision import __version__
from chessvision.core.errors import TransportError


logger = logging.getLogger(__name__)

USER_AGENT = f"chessvision/{__version__}"


@dataclass(frozen=True)
class HttpResponse:
    """Status code and decoded body of an HTTP response."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


# (url, headers, payload, timeout) -> HttpResponse
Transport = Callable[[str, Mapping[str, str], dict[str, Any], float | None], HttpResponse]


def post_json(
    url: str,
    headers: Mapping[str, str],
    payload: dict[str, Any],
    timeout: float | None = None,
) -> HttpResponse:
    """
    POST a JSON payload and return the raw response.

    The body of an error response is read eagerly. A timeout of None
    leaves the transport's default in place.

    Raises:
        TransportError: Network or connection error, or timeout
    """
    data = json.dumps(payload).encode("utf-8")
    request = Request(
        url,
        data=data,
        headers={
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            **headers,
        },
        method="POST",
    )
    kwargs = {} if timeout is None else {"timeout": timeout}

    try:
        with urlopen(request, **kwargs) as response:
            return HttpResponse(
                status=response.status,
                text=response.read().decode("utf-8", errors="replace"),
            )

    except HTTPError as e:
        body = e.read().decode("utf-8", errors="replace") if e.fp is not None else ""
        return HttpResponse(status=e.code, text=body)

    except URLError as e:
        logger.warning(f"Connection to {url} failed: {e.reason}")
        raise TransportError(f"Connection error: {e.reason}") from e

    except TimeoutError as e:
        logger.warning(f"Request to {url} timed out")
        raise TransportError("Request timeout") from e

    except (OSError, http.client.HTTPException) as e:
        logger.warning(f"Connection to {url} dropped: {e!r}")
        raise TransportError(f"Connection error: {e}") from e

"""Vision API backends."""

from chessvision.recognition.base import HTTPVisionProvider
from chessvision.recognition.grok import GrokVisionProvider
from chessvision.recognition.claude import ClaudeVisionProvider
from chessvision.recognition.openai_responses import OpenAIVisionProvider
from chessvision.recognition.zai import ZaiVisionProvider
from chessvision.recognition.mock import MockVisionProvider, MockProviderConfig
from chessvision.recognition.factory import (
    PROVIDER_CLASSES,
    create_provider,
    create_provider_from_config,
)
from chessvision.recognition.http import HttpResponse, post_json

__all__ = [
    "HTTPVisionProvider",
    "GrokVisionProvider",
    "ClaudeVisionProvider",
    "OpenAIVisionProvider",
    "ZaiVisionProvider",
    "MockVisionProvider",
    "MockProviderConfig",
    "PROVIDER_CLASSES",
    "create_provider",
    "create_provider_from_config",
    "HttpResponse",
    "post_json",
]

"""Construction of vision providers from a ProviderKind or AppConfig."""

from chessvision.core.config import AppConfig
from chessvision.core.models import ProviderKind
from chessvision.recognition.base import HTTPVisionProvider
from chessvision.recognition.claude import ClaudeVisionProvider
from chessvision.recognition.grok import GrokVisionProvider
from chessvision.recognition.http import Transport
from chessvision.recognition.openai_responses import OpenAIVisionProvider
from chessvision.recognition.zai import ZaiVisionProvider


PROVIDER_CLASSES: dict[ProviderKind, type[HTTPVisionProvider]] = {
    ProviderKind.GROK: GrokVisionProvider,
    ProviderKind.CLAUDE: ClaudeVisionProvider,
    ProviderKind.OPENAI: OpenAIVisionProvider,
    ProviderKind.ZAI: ZaiVisionProvider,
}


def create_provider(
    kind: ProviderKind,
    model: str | None = None,
    timeout: float | None = None,
    transport: Transport | None = None,
) -> HTTPVisionProvider:
    """
    Factory function to create a vision provider.

    Args:
        kind: Which backend to use
        model: Model override (uses the backend's default if None)
        timeout: Request timeout in seconds (None keeps the transport default)
        transport: Alternative HTTP transport, mainly for tests

    Returns:
        Configured provider instance
    """
    return PROVIDER_CLASSES[kind](model=model, timeout=timeout, transport=transport)


def create_provider_from_config(
    config: AppConfig,
    transport: Transport | None = None,
) -> HTTPVisionProvider:
    """Create the provider selected by a configuration."""
    return create_provider(
        config.provider,
        model=config.model,
        timeout=config.timeout,
        transport=transport,
    )

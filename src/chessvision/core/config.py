"""
Application configuration.

Loaded once at startup from environment variables and passed explicitly to
the orchestrator and shells; there is no module-level settings singleton.

Environment variables:
  XAI_API_KEY, ANTHROPIC_API_KEY,
  OPENAI_API_KEY, ZAI_API_KEY      Provider API keys (opaque strings)
  CHESSVISION_PROVIDER             Backend to use (default: openai)
  CHESSVISION_MODEL                Model override for the selected backend
  CHESSVISION_TIMEOUT              Request timeout in seconds (default: transport default)
  CHESSVISION_MAX_IMAGE_SIZE       Downscale images whose longest side exceeds this
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Mapping

from chessvision.core.errors import ConfigError
from chessvision.core.models import ProviderKind


DEFAULT_PROVIDER = ProviderKind.OPENAI


@dataclass(frozen=True)
class AppConfig:
    """Configuration for an analysis session."""

    provider: ProviderKind = DEFAULT_PROVIDER
    api_keys: Mapping[ProviderKind, str] = field(default_factory=dict)
    model: str | None = None
    timeout: float | None = None
    max_image_size: int | None = None

    def api_key_for(self, kind: ProviderKind | None = None) -> str:
        """
        Return the API key for a provider (the selected one by default).

        Raises:
            ConfigError: If the key is missing or blank
        """
        kind = kind or self.provider
        key = self.api_keys.get(kind, "").strip()
        if not key:
            raise ConfigError(
                f"{kind.api_key_env} not found. Set it in the environment or a .env file."
            )
        return key

    def has_api_key(self, kind: ProviderKind) -> bool:
        return bool(self.api_keys.get(kind, "").strip())

    def with_provider(self, kind: ProviderKind, model: str | None = None) -> AppConfig:
        """Copy of this config targeting another provider."""
        return replace(self, provider=kind, model=model)


def _optional_number(env: Mapping[str, str], name: str, cast):
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got '{raw}'")
    return value


def get_config(env: Mapping[str, str] | None = None) -> AppConfig:
    """
    Load configuration from environment variables.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        AppConfig with provider selection and whatever API keys are set

    Raises:
        ConfigError: On an unknown provider name or a malformed number
    """
    env = env if env is not None else os.environ

    provider_name = env.get("CHESSVISION_PROVIDER", "").strip() or DEFAULT_PROVIDER.value
    try:
        provider = ProviderKind.from_name(provider_name)
    except ValueError:
        known = ", ".join(kind.value for kind in ProviderKind)
        raise ConfigError(
            f"Unknown provider '{provider_name}' (expected one of: {known})"
        ) from None

    api_keys = {
        kind: env[kind.api_key_env]
        for kind in ProviderKind
        if env.get(kind.api_key_env, "").strip()
    }

    return AppConfig(
        provider=provider,
        api_keys=api_keys,
        model=env.get("CHESSVISION_MODEL", "").strip() or None,
        timeout=_optional_number(env, "CHESSVISION_TIMEOUT", float),
        max_image_size=_optional_number(env, "CHESSVISION_MAX_IMAGE_SIZE", int),
    )

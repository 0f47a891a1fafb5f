"""Tests for the vision provider adapters."""

import pytest

from chessvision.core.errors import ApiError, ConfigError, SchemaError, TransportError
from chessvision.core.fen import STARTING_FEN
from chessvision.core.interfaces import VisionProvider
from chessvision.core.models import ProviderKind
from chessvision.recognition import (
    ClaudeVisionProvider,
    GrokVisionProvider,
    OpenAIVisionProvider,
    ZaiVisionProvider,
    create_provider,
    create_provider_from_config,
)
from chessvision.core.config import AppConfig


IMAGE_B64 = "aGVsbG8="
BERLIN_FEN = "rnb1kb1r/pp2pppp/1qp2n2/3p2B1/3P4/2N2P2/PPP1P1PP/R2QKBNR w KQkq - 0 5"


def chat_envelope(text):
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}


ALL_PROVIDERS = [
    (GrokVisionProvider, chat_envelope(BERLIN_FEN)),
    (ClaudeVisionProvider, {"content": [{"type": "text", "text": BERLIN_FEN}]}),
    (OpenAIVisionProvider, {"output_text": BERLIN_FEN}),
    (ZaiVisionProvider, chat_envelope(BERLIN_FEN)),
]


class TestCommonContract:
    """Behavior shared by every provider."""

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    def test_success_envelope(self, provider_class, envelope, transport_factory):
        transport = transport_factory(body=envelope)
        provider = provider_class(transport=transport)

        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN
        assert len(transport.requests) == 1
        assert transport.last.url == provider_class.endpoint

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    def test_implements_protocol(self, provider_class, envelope):
        assert isinstance(provider_class(), VisionProvider)

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    @pytest.mark.parametrize("status", [400, 401, 429, 500])
    def test_non_2xx_raises_transport_error(self, provider_class, envelope, status, transport_factory):
        body = '{"error": {"message": "Incorrect API key provided"}}'
        provider = provider_class(transport=transport_factory(status=status, text=body))

        with pytest.raises(TransportError) as excinfo:
            provider.analyze(IMAGE_B64, "key")

        assert str(status) in str(excinfo.value)
        assert "Incorrect API key provided" in str(excinfo.value)
        assert excinfo.value.status == status
        assert excinfo.value.body == body

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    def test_unknown_envelope_raises_schema_error(self, provider_class, envelope, transport_factory):
        provider = provider_class(transport=transport_factory(body={"unexpected": [1, 2]}))

        with pytest.raises(SchemaError) as excinfo:
            provider.analyze(IMAGE_B64, "key")

        assert "Invalid API response format" in str(excinfo.value)
        assert '"unexpected"' in str(excinfo.value)

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    def test_non_json_body_raises_schema_error(self, provider_class, envelope, transport_factory):
        provider = provider_class(transport=transport_factory(text="<html>Bad gateway</html>"))

        with pytest.raises(SchemaError):
            provider.analyze(IMAGE_B64, "key")

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_missing_key_raises_before_request(self, provider_class, envelope, api_key, transport_factory):
        transport = transport_factory(body=envelope)
        provider = provider_class(transport=transport)

        with pytest.raises(ConfigError) as excinfo:
            provider.analyze(IMAGE_B64, api_key)

        assert provider_class.kind.api_key_env in str(excinfo.value)
        assert transport.requests == []

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    def test_model_override(self, provider_class, envelope, transport_factory):
        transport = transport_factory(body=envelope)
        provider = provider_class(model="custom-model", transport=transport)

        provider.analyze(IMAGE_B64, "key")

        assert provider.model == "custom-model"
        assert "custom-model" in provider.name
        assert transport.last.payload["model"] == "custom-model"

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    def test_timeout_passed_to_transport(self, provider_class, envelope, transport_factory):
        transport = transport_factory(body=envelope)
        provider_class(timeout=12.5, transport=transport).analyze(IMAGE_B64, "key")
        assert transport.last.timeout == 12.5

    @pytest.mark.parametrize("provider_class,envelope", ALL_PROVIDERS)
    def test_default_timeout_is_none(self, provider_class, envelope, transport_factory):
        transport = transport_factory(body=envelope)
        provider_class(transport=transport).analyze(IMAGE_B64, "key")
        assert transport.last.timeout is None

    def test_errors_share_base_class(self):
        assert issubclass(TransportError, ApiError)
        assert issubclass(SchemaError, ApiError)


class TestGrokProvider:
    """Provider A: xAI chat completions."""

    def test_request_shape(self, transport_factory):
        transport = transport_factory(body=chat_envelope(STARTING_FEN))
        GrokVisionProvider(transport=transport).analyze(IMAGE_B64, "xai-key")

        request = transport.last
        assert request.url == "https://api.x.ai/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer xai-key"

        system, user = request.payload["messages"]
        assert system["role"] == "system"
        assert "HOLLOW" in system["content"]
        image_block, text_block = user["content"]
        assert image_block["type"] == "image_url"
        assert image_block["image_url"]["url"] == f"data:image/jpeg;base64,{IMAGE_B64}"
        assert image_block["image_url"]["detail"] == "high"
        assert text_block["type"] == "text"
        assert request.payload["temperature"] == 0

    def test_extracts_labeled_fen_from_walkthrough(self, transport_factory):
        answer = (
            "Rank 8: bR - bB - bR - bK -\n"
            "...\n"
            "FEN: r1b1r1k1/pp3ppp/2n1pn2/3p2N1/8/1B4P1/PP2PPBP/R2QR1K1 w - - 0 1"
        )
        provider = GrokVisionProvider(transport=transport_factory(body=chat_envelope(answer)))

        assert provider.analyze(IMAGE_B64, "key") == (
            "r1b1r1k1/pp3ppp/2n1pn2/3p2N1/8/1B4P1/PP2PPBP/R2QR1K1 w - - 0 1"
        )

    def test_prose_without_fen_is_returned_trimmed(self, transport_factory):
        envelope = chat_envelope("  Sorry, I cannot see a chess board.\n")
        provider = GrokVisionProvider(transport=transport_factory(body=envelope))

        assert provider.analyze(IMAGE_B64, "key") == "Sorry, I cannot see a chess board."

    def test_null_content_is_schema_error(self, transport_factory):
        envelope = {"choices": [{"message": {"role": "assistant", "content": None}}]}
        provider = GrokVisionProvider(transport=transport_factory(body=envelope))

        with pytest.raises(SchemaError):
            provider.analyze(IMAGE_B64, "key")

    def test_empty_choices_is_schema_error(self, transport_factory):
        provider = GrokVisionProvider(transport=transport_factory(body={"choices": []}))

        with pytest.raises(SchemaError):
            provider.analyze(IMAGE_B64, "key")


class TestClaudeProvider:
    """Provider B: Anthropic messages."""

    def test_request_shape(self, transport_factory):
        transport = transport_factory(body={"content": [{"type": "text", "text": STARTING_FEN}]})
        ClaudeVisionProvider(transport=transport).analyze(IMAGE_B64, "sk-ant")

        request = transport.last
        assert request.url == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-ant"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert "Authorization" not in request.headers

        (message,) = request.payload["messages"]
        image_block, text_block = message["content"]
        assert image_block == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/jpeg", "data": IMAGE_B64},
        }
        assert text_block["type"] == "text"
        assert request.payload["max_tokens"] == 150

    def test_fen_embedded_in_prose(self, transport_factory):
        text = f"The position is {STARTING_FEN}. Enjoy!"
        provider = ClaudeVisionProvider(transport=transport_factory(body={"content": [{"text": text}]}))

        assert provider.analyze(IMAGE_B64, "key") == STARTING_FEN

    def test_empty_content_is_schema_error(self, transport_factory):
        provider = ClaudeVisionProvider(transport=transport_factory(body={"content": []}))

        with pytest.raises(SchemaError):
            provider.analyze(IMAGE_B64, "key")


class TestOpenAIProvider:
    """Provider C: OpenAI responses, with its envelope fallback chain."""

    def test_request_shape(self, transport_factory):
        transport = transport_factory(body={"output_text": STARTING_FEN})
        OpenAIVisionProvider(transport=transport).analyze(IMAGE_B64, "sk-openai")

        request = transport.last
        assert request.url == "https://api.openai.com/v1/responses"
        assert request.headers["Authorization"] == "Bearer sk-openai"
        assert request.payload["max_output_tokens"] == 150

        (message,) = request.payload["input"]
        image_block, text_block = message["content"]
        assert image_block == {
            "type": "input_image",
            "image_url": f"data:image/jpeg;base64,{IMAGE_B64}",
            "detail": "high",
        }
        assert text_block["type"] == "input_text"

    def test_output_text(self, transport_factory):
        provider = OpenAIVisionProvider(transport=transport_factory(body={"output_text": f" {BERLIN_FEN}\n"}))
        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN

    def test_nested_output_content(self, transport_factory):
        envelope = {
            "output": [
                {
                    "type": "message",
                    "content": [
                        {"type": "refusal_placeholder", "text": "ignored"},
                        {"type": "output_text", "text": BERLIN_FEN},
                    ],
                }
            ]
        }
        provider = OpenAIVisionProvider(transport=transport_factory(body=envelope))
        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN

    def test_nested_output_after_reasoning_item(self, transport_factory):
        envelope = {
            "output": [
                {"type": "reasoning", "summary": []},
                {"type": "message", "content": [{"type": "output_text", "text": BERLIN_FEN}]},
            ]
        }
        provider = OpenAIVisionProvider(transport=transport_factory(body=envelope))
        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN

    def test_nested_output_string_content(self, transport_factory):
        envelope = {"output": [{"content": BERLIN_FEN}]}
        provider = OpenAIVisionProvider(transport=transport_factory(body=envelope))
        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN

    def test_chat_style_fallback(self, transport_factory):
        provider = OpenAIVisionProvider(transport=transport_factory(body=chat_envelope(BERLIN_FEN)))
        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN

    def test_output_text_takes_priority(self, transport_factory):
        envelope = {
            "output_text": BERLIN_FEN,
            "output": [{"content": [{"type": "output_text", "text": STARTING_FEN}]}],
            **chat_envelope(STARTING_FEN),
        }
        provider = OpenAIVisionProvider(transport=transport_factory(body=envelope))
        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN

    def test_empty_output_text_falls_through(self, transport_factory):
        envelope = {
            "output_text": "",
            "output": [{"content": [{"type": "output_text", "text": BERLIN_FEN}]}],
        }
        provider = OpenAIVisionProvider(transport=transport_factory(body=envelope))
        assert provider.analyze(IMAGE_B64, "key") == BERLIN_FEN

    def test_no_known_shape_dumps_body(self, transport_factory):
        envelope = {"output": [{"type": "reasoning"}], "status": "incomplete"}
        provider = OpenAIVisionProvider(transport=transport_factory(body=envelope))

        with pytest.raises(SchemaError) as excinfo:
            provider.analyze(IMAGE_B64, "key")

        assert '"status": "incomplete"' in str(excinfo.value)


class TestZaiProvider:
    """Provider D: Z.ai chat completions."""

    def test_request_shape(self, transport_factory):
        transport = transport_factory(body=chat_envelope(STARTING_FEN))
        ZaiVisionProvider(transport=transport).analyze(IMAGE_B64, "zai-key")

        request = transport.last
        assert request.url == "https://api.z.ai/api/paas/v4/chat/completions"
        assert request.headers["Authorization"] == "Bearer zai-key"

        (message,) = request.payload["messages"]
        image_block, text_block = message["content"]
        assert image_block == {
            "type": "image_url",
            "image_url": {"url": f"data:image/jpeg;base64,{IMAGE_B64}"},
        }
        assert text_block["type"] == "text"
        assert request.payload["temperature"] == 0.1
        assert request.payload["max_tokens"] == 200

    def test_truncated_fen(self, transport_factory):
        envelope = chat_envelope("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR")
        provider = ZaiVisionProvider(transport=transport_factory(body=envelope))

        assert provider.analyze(IMAGE_B64, "key") == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


class TestFactory:
    """Tests for provider construction."""

    @pytest.mark.parametrize("kind,expected", [
        (ProviderKind.GROK, GrokVisionProvider),
        (ProviderKind.CLAUDE, ClaudeVisionProvider),
        (ProviderKind.OPENAI, OpenAIVisionProvider),
        (ProviderKind.ZAI, ZaiVisionProvider),
    ])
    def test_create_provider(self, kind, expected):
        provider = create_provider(kind)
        assert isinstance(provider, expected)
        assert provider.model == expected.default_model

    def test_create_from_config(self, transport_factory):
        config = AppConfig(provider=ProviderKind.CLAUDE, model="claude-test", timeout=3.0)
        transport = transport_factory(body={"content": [{"text": STARTING_FEN}]})

        provider = create_provider_from_config(config, transport=transport)
        provider.analyze(IMAGE_B64, "key")

        assert isinstance(provider, ClaudeVisionProvider)
        assert transport.last.payload["model"] == "claude-test"
        assert transport.last.timeout == 3.0

"""
Flask service for chess diagram analysis.

A thin display shell over AnalysisSession for browser or mobile clients:
- POST /api/analyze     upload an image (multipart "image" or JSON "image_b64")
- GET  /api/providers   list vision backends and key status

Only one analysis runs at a time; concurrent submissions get 409.
"""

import asyncio
import base64
import binascii
import io
import logging
import threading
from typing import Callable

from flask import Flask, jsonify, request
from flask_cors import CORS
from PIL import Image

from chessvision import __version__
from chessvision.core.config import AppConfig, get_config
from chessvision.core.errors import ConfigError
from chessvision.core.interfaces import VisionProvider
from chessvision.core.models import AnalysisResult, ProviderKind, ResultKind
from chessvision.integrations.lichess import lichess_analysis_url
from chessvision.orchestrator.session import AnalysisSession
from chessvision.recognition.factory import PROVIDER_CLASSES, create_provider_from_config


logger = logging.getLogger(__name__)

ProviderFactory = Callable[[AppConfig], VisionProvider]


def result_to_json(result: AnalysisResult) -> dict:
    fen = result.fen
    return {
        "kind": result.kind.name.lower(),
        "text": result.text,
        "fen": fen,
        "lichess_url": lichess_analysis_url(fen) if fen else None,
    }


def _read_image() -> bytes | None:
    """Get the uploaded image bytes from a multipart upload or a JSON body."""
    upload = request.files.get("image")
    if upload is not None:
        return upload.read() or None

    payload = request.get_json(silent=True) or {}
    image_b64 = payload.get("image_b64")
    if not image_b64:
        return None
    if "," in image_b64 and image_b64.startswith("data:"):
        image_b64 = image_b64.split(",", 1)[1]
    try:
        return base64.b64decode(image_b64, validate=True)
    except (binascii.Error, ValueError):
        return None


def _is_image(data: bytes) -> bool:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (OSError, SyntaxError, ValueError):
        return False
    return True


def _requested_provider(config: AppConfig) -> AppConfig:
    name = request.form.get("provider") or (request.get_json(silent=True) or {}).get("provider")
    if not name:
        return config
    try:
        kind = ProviderKind.from_name(name)
    except ValueError:
        raise ConfigError(f"Unknown provider '{name}'") from None
    return config.with_provider(kind, config.model if kind is config.provider else None)


def create_app(
    config: AppConfig | None = None,
    provider_factory: ProviderFactory = create_provider_from_config,
) -> Flask:
    """
    Create the Flask application.

    Args:
        config: Application configuration (loaded from the environment if None)
        provider_factory: Builds the provider for a request's configuration
    """
    app = Flask(__name__)
    CORS(app)

    app_config = config if config is not None else get_config()
    analysis_lock = threading.Lock()

    @app.route("/api/version")
    def version():
        return jsonify({"version": __version__})

    @app.route("/api/providers")
    def providers():
        return jsonify([
            {
                "name": kind.value,
                "display_name": provider_class.display_name,
                "model": provider_class.default_model,
                "selected": kind is app_config.provider,
                "configured": app_config.has_api_key(kind),
            }
            for kind, provider_class in PROVIDER_CLASSES.items()
        ])

    @app.route("/api/analyze", methods=["POST"])
    def analyze():
        image = _read_image()
        if image is None:
            return jsonify({"error": "No image provided"}), 400
        if not _is_image(image):
            return jsonify({"error": "Uploaded file is not a readable image"}), 400

        try:
            request_config = _requested_provider(app_config)
        except ConfigError as e:
            return jsonify({"error": str(e)}), 400

        try:
            request_config.api_key_for()
        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            return jsonify({"error": str(e)}), 503

        if not analysis_lock.acquire(blocking=False):
            return jsonify({"error": "Analysis already in progress"}), 409

        try:
            session = AnalysisSession(provider_factory(request_config), request_config)
            session.capture(image)
            result = asyncio.run(session.analyze())
        finally:
            analysis_lock.release()

        if result is None:
            return jsonify({"error": "Analysis did not complete"}), 500

        body = result_to_json(result)
        if result.kind is ResultKind.ERROR:
            return jsonify({"error": result.text, **body}), 502
        return jsonify(body)

    return app


if __name__ == "__main__":
    from dotenv import load_dotenv

    logging.basicConfig(level=logging.INFO)
    load_dotenv()
    create_app().run(debug=True, port=5000)

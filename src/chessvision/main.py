"""
chessvision - command-line entry point.

Reads a photographed chess diagram from disk, sends it to the configured
vision provider and prints the FEN.

Usage:
    chessvision analyze board.jpg
    chessvision analyze board.png --provider claude --board --lichess
    chessvision providers
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import Sequence

import chess
from dotenv import find_dotenv, load_dotenv

from chessvision import __version__
from chessvision.core.config import AppConfig, get_config
from chessvision.core.errors import ConfigError
from chessvision.core.fen import normalize_fen
from chessvision.core.models import ProviderKind, ResultKind
from chessvision.integrations.lichess import lichess_analysis_url, open_in_lichess
from chessvision.orchestrator.session import AnalysisSession
from chessvision.recognition.factory import PROVIDER_CLASSES, create_provider_from_config


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNRECOGNIZED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessvision",
        description="Extract FEN from a photo of a chess diagram using a vision LLM",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a chess diagram image")
    analyze.add_argument("image", help="Path to the image file")
    analyze.add_argument(
        "--provider",
        help="Vision backend: grok, claude, openai or zai (default: CHESSVISION_PROVIDER or openai)",
    )
    analyze.add_argument("--model", help="Override the backend's default model")
    analyze.add_argument(
        "--max-size",
        type=int,
        help="Downscale the image so its longest side is at most this many pixels",
    )
    analyze.add_argument("--board", action="store_true", help="Print the recognized board")
    analyze.add_argument("--lichess", action="store_true", help="Open the position on Lichess")

    subparsers.add_parser("providers", help="List vision backends and API key status")

    return parser


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.provider:
        try:
            kind = ProviderKind.from_name(args.provider)
        except ValueError:
            raise ConfigError(f"Unknown provider '{args.provider}'") from None
        config = config.with_provider(kind, args.model)
    elif args.model:
        config = config.with_provider(config.provider, args.model)

    if args.max_size:
        config = replace(config, max_image_size=args.max_size)
    return config


def render_board(fen: str) -> str | None:
    """Render a FEN as a text diagram, or None if python-chess rejects it."""
    try:
        board = chess.Board(normalize_fen(fen))
    except ValueError as e:
        logger.warning(f"Cannot render position: {e}")
        return None
    return board.unicode(empty_square=".")


def cmd_analyze(args: argparse.Namespace, config: AppConfig) -> int:
    config = _apply_overrides(config, args)
    provider = create_provider_from_config(config)
    session = AnalysisSession(provider, config)

    print(f"Analyzing {args.image} with {provider.name}...", file=sys.stderr)
    session.capture(args.image)
    result = asyncio.run(session.analyze())

    if result is None or result.kind is ResultKind.ERROR:
        message = result.text if result is not None else "Analysis did not complete"
        print(f"Error: {message}", file=sys.stderr)
        return EXIT_ERROR

    if result.kind is ResultKind.UNRECOGNIZED:
        print("No FEN found in the model's answer:", file=sys.stderr)
        print(result.text)
        return EXIT_UNRECOGNIZED

    print(result.fen)
    print(f"Lichess: {lichess_analysis_url(result.fen)}", file=sys.stderr)

    if args.board:
        diagram = render_board(result.fen)
        if diagram is not None:
            print(diagram)

    if args.lichess:
        open_in_lichess(result.fen)

    return EXIT_OK


def cmd_providers(args: argparse.Namespace, config: AppConfig) -> int:
    for kind, provider_class in PROVIDER_CLASSES.items():
        marker = "*" if kind is config.provider else " "
        key_status = "key set" if config.has_api_key(kind) else f"missing {kind.api_key_env}"
        print(
            f"{marker} {kind.value:<7} {provider_class.display_name:<12} "
            f"{provider_class.default_model:<26} {key_status}"
        )
    return EXIT_OK


COMMANDS = {
    "analyze": cmd_analyze,
    "providers": cmd_providers,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = get_config()
        return COMMANDS[args.command](args, config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

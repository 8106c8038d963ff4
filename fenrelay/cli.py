"""
fenrelay CLI - Command-line interface for the relay.

Usage:
    fenrelay serve [--host HOST] [--port PORT]   Run the relay server
    fenrelay detect <image> [--model MODEL]      Read a position from a local photo
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from .config import RelayConfig
from .errors import ConfigurationError

log = logging.getLogger("fenrelay")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="fenrelay - chess position relay",
        prog="fenrelay",
    )
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the relay server")
    serve_parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT or 3000)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Detect command
    detect_parser = subparsers.add_parser("detect", help="Detect the position in a local image")
    detect_parser.add_argument("image", help="Path to the diagram photo")
    detect_parser.add_argument("--model", help="Vision model name")

    args = parser.parse_args(argv)

    load_dotenv()
    try:
        config = RelayConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args, config)
    elif args.command == "detect":
        cmd_detect(args, config)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args, config: RelayConfig):
    """Run the relay server with uvicorn."""
    import uvicorn

    host = args.host or config.host
    port = args.port or config.port

    log.info("Chess relay running on port %d", port)
    log.info("Upload: http://localhost:%d/upload", port)
    log.info("Realtime: ws://localhost:%d/ws", port)
    if not config.gemini_api_key:
        log.warning("GEMINI_API_KEY is not set; uploads will fail until it is")

    if args.reload:
        uvicorn.run("fenrelay.api.app:app", host=host, port=port, reload=True)
    else:
        from .api import create_app
        uvicorn.run(create_app(config=config), host=host, port=port)


def cmd_detect(args, config: RelayConfig):
    """Run the vision collaborator on one image and print the FEN."""
    from .errors import RelayError
    from .vision import GeminiCollaborator, normalize_detection

    try:
        with open(args.image, "rb") as f:
            image = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.image}")
        sys.exit(1)

    collaborator = GeminiCollaborator(
        api_key=config.gemini_api_key,
        model=args.model or config.model,
        temperature=config.temperature,
    )

    try:
        output = asyncio.run(collaborator.detect(image))
    except RelayError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    result = normalize_detection(output)
    if not result.success:
        print(f"Error: {result.reason}")
        sys.exit(1)

    print(result.fen)


if __name__ == "__main__":
    main()

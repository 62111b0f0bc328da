# ABOUTME: CLI entry point for feed-shelf.
# ABOUTME: Supports 'serve' and 'parse' commands.

import argparse
import json
import logging
import sys
from pathlib import Path

import structlog
import uvicorn

from feed_shelf.config import get_settings

log = structlog.get_logger()


def configure_logging(level: str) -> None:
    """Filter structlog output below the configured level."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server."""
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    log.info("starting_server", host=host, port=port)
    uvicorn.run(
        "feed_shelf.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def cmd_parse(args: argparse.Namespace) -> int:
    """Print the feeds found in an OPML file as JSON rows."""
    from feed_shelf.errors import OpmlError
    from feed_shelf.services.opml import parse_opml

    content = Path(args.file).read_text(encoding="utf-8", errors="replace")
    try:
        feeds = parse_opml(content)
    except OpmlError as e:
        log.error("parse_failed", file=args.file, error=str(e))
        return 1

    json.dump([feed.model_dump(by_alias=True) for feed in feeds], sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(prog="feed-shelf", description="OPML feed storage service")
    subparsers = parser.add_subparsers(dest="command")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    # parse
    parse_parser = subparsers.add_parser("parse", help="Print the feeds in an OPML file")
    parse_parser.add_argument("file", type=str)

    args = parser.parse_args()
    configure_logging(get_settings().log_level)
    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "parse":
        sys.exit(cmd_parse(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Command-line entry point: run the bridge or inspect stored correlations."""

from __future__ import annotations

import argparse
import sys

import uvicorn
from loguru import logger

from issuebridge.infrastructure import Settings, SQLiteCorrelationStore, configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issuebridge",
        description=(
            "Use GitHub issues as an issue tracker: send emails from issue comments "
            "and make issue comments from received mails."
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the webhook server")
    serve.add_argument("--listen", help="Server address, host:port (env LISTEN_ADDR)")
    serve.add_argument(
        "--dryrun",
        action="store_true",
        default=None,
        help="Do not send any mails or submit any GitHub comments (env DRY_RUN)",
    )
    serve.add_argument("--kv", help="Correlation database path (env CORRELATION_DB_PATH)")
    serve.add_argument("--github", help="GitHub OAuth token (env GITHUB_TOKEN)")
    serve.add_argument("--mg-domain", help="Mailgun domain (env MAILGUN_DOMAIN)")
    serve.add_argument("--mg-key", help="Mailgun API key (env MAILGUN_API_KEY)")

    listing = sub.add_parser("correlations", help="Print stored message id -> issue mappings")
    listing.add_argument("--kv", help="Correlation database path (env CORRELATION_DB_PATH)")

    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Environment settings with any command-line flags layered on top."""
    overrides = {
        "listen_addr": getattr(args, "listen", None),
        "dry_run": getattr(args, "dryrun", None),
        "correlation_db_path": getattr(args, "kv", None),
        "github_token": getattr(args, "github", None),
        "mailgun_domain": getattr(args, "mg_domain", None),
        "mailgun_api_key": getattr(args, "mg_key", None),
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def serve(settings: Settings) -> int:
    from issuebridge.api.main import create_app

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.listen_host,
        port=settings.listen_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def list_correlations(settings: Settings) -> int:
    store = SQLiteCorrelationStore(settings.correlation_db_path)
    for entry in store.list_all():
        print(entry.message_id, entry.issue_number)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``issuebridge`` command."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    configure_logging(settings.log_level)

    if args.command == "serve":
        return serve(settings)
    if args.command == "correlations":
        return list_correlations(settings)

    logger.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())

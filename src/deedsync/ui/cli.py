from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from deedsync.app import build_services, initialise_database, reconcile_jurisdiction
from deedsync.config import configure_logging, get_api_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tax-deed listing ingestion and reconciliation")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_db = subparsers.add_parser("init-db", help="Create or upgrade the database schema")
    init_db.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy URI to migrate (defaults to config)",
    )

    serve = subparsers.add_parser("serve", help="Run the ingest API")
    serve.add_argument("--host", type=str, help="Bind address (defaults to config)")
    serve.add_argument("--port", type=int, help="Bind port (defaults to config)")

    state = subparsers.add_parser("state", help="Show the checkpoint of a scraper")
    state.add_argument("scraper_name", type=str, help="Name the scraper reports under")

    reconcile = subparsers.add_parser(
        "reconcile",
        help="Mark listings missing from a complete crawl pass as removed",
    )
    reconcile.add_argument("--county", type=str, help="County (defaults to config)")
    reconcile.add_argument("--state", type=str, help="State code (defaults to config)")
    reconcile.add_argument(
        "--nodes-file",
        type=Path,
        required=True,
        help="File with one observed node token per line",
    )

    return parser.parse_args(list(argv))


def _read_nodes(path: Path) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read nodes file {path}: {exc}") from exc
    return [line.strip() for line in text.splitlines() if line.strip()]


def _serve(host: str | None, port: int | None) -> None:
    import uvicorn  # noqa: PLC0415

    from deedsync.ui.api import create_app  # noqa: PLC0415

    api_config = get_api_config()
    app = create_app(services=build_services(), api_token=api_config.ingest_token)
    uvicorn.run(app, host=host or api_config.host, port=port or api_config.port)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    observed: list[str] = []
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "reconcile":
            observed = _read_nodes(parsed_args.nodes_file)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "init-db":
            initialise_database(database_uri=parsed_args.database_uri)
        elif parsed_args.command == "serve":
            _serve(parsed_args.host, parsed_args.port)
        elif parsed_args.command == "state":
            state = build_services().run_state.get_state(parsed_args.scraper_name)
            log.info(
                "Scraper %s: offset=%s, last_node=%s, last_run_id=%s, done_for_today=%s",
                state.scraper_name,
                state.offset,
                state.last_node,
                state.last_run_id,
                state.done_for_today,
            )
        elif parsed_args.command == "reconcile":
            result = reconcile_jurisdiction(parsed_args.county, parsed_args.state, observed)
            log.info(
                "Reconciliation finished for %s/%s: removed=%s, skipped=%s",
                result.county,
                result.state,
                result.removed_marked,
                result.skipped,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

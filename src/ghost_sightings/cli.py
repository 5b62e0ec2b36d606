"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import http.server
import logging
import sys
from functools import partial
from pathlib import Path

import uvicorn

from ghost_sightings import __version__
from ghost_sightings.config import get_settings
from ghost_sightings.datasources.sightings import (
    BatchResult,
    SightingRepository,
    import_sightings,
    parse_csv,
)
from ghost_sightings.datasources.sightings.csv_import import (
    IMPORT_BATCH_DELAY_SECONDS,
    IMPORT_BATCH_SIZE,
)
from ghost_sightings.errors import ConfigurationError, ParseError, StoreError
from ghost_sightings.flows.build import build_all
from ghost_sightings.flows.fetch import fetch_all

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="ghost-sightings",
        description="Crowdsourced ghost sighting map, table and submission API",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # 'import' command - bulk load a CSV file into the store
    import_parser = subparsers.add_parser("import", help="Bulk import sightings from a CSV file")
    import_parser.add_argument("csv_path", type=Path, help="CSV file to import")
    import_parser.add_argument(
        "--batch-size",
        type=int,
        default=IMPORT_BATCH_SIZE,
        help=f"Rows per insert request (default: {IMPORT_BATCH_SIZE})",
    )
    import_parser.add_argument(
        "--delay",
        type=float,
        default=IMPORT_BATCH_DELAY_SECONDS,
        help=f"Seconds between batches (default: {IMPORT_BATCH_DELAY_SECONDS})",
    )

    # 'refresh' command - fetch data and build site
    refresh_parser = subparsers.add_parser("refresh", help="Fetch sightings and build site")
    refresh_parser.add_argument(
        "--force",
        action="store_true",
        help="Fetch even if the cached snapshot is still fresh",
    )

    # 'serve' command - serve built site locally
    serve_parser = subparsers.add_parser("serve", help="Serve the static site locally")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: site_port from settings)",
    )

    # 'api' command - run the live server
    api_parser = subparsers.add_parser("api", help="Run the web app and sightings API")
    api_parser.add_argument("--host", default=None, help="Bind address (default: api_host)")
    api_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: api_port from settings)",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Store: {settings.store_url or '(not configured)'}")
    print(f"Table: {settings.store_table}")
    print(f"Coordinate policy: {settings.coordinate_policy}")
    print(f"Data directory: {settings.data_dir}")
    return 0


def _print_batch(result: BatchResult, total_batches: int) -> None:
    if result.ok:
        print(f"  Batch {result.number}/{total_batches}: inserted {result.inserted}")
    else:
        print(f"  Batch {result.number}/{total_batches}: FAILED ({result.error})")


def cmd_import(args: argparse.Namespace) -> int:
    """Handle the 'import' command: parse the whole file, then insert in batches."""
    if not args.csv_path.exists():
        print(f"File not found: {args.csv_path}", file=sys.stderr)
        return 1

    try:
        records = parse_csv(args.csv_path)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Parsed {len(records)} sightings from {args.csv_path}")

    try:
        repository = SightingRepository.from_settings(get_settings(), service=True)
        report = import_sightings(
            repository,
            records,
            batch_size=args.batch_size,
            delay=args.delay,
            on_batch=_print_batch,
        )
    except (ConfigurationError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Records before import: {report.count_before}")
    print(f"Inserted: {report.succeeded}")
    print(f"Failed: {report.failed}")
    if report.count_after is not None:
        print(f"Records after import: {report.count_after}")
    return 0 if report.failed == 0 else 1


def cmd_refresh(args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: fetch data then build site."""
    print("Fetching sightings...")
    try:
        fetch_all(force=args.force)
    except (ConfigurationError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Building site...")
    build_all()

    print("Done.")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: serve the built site locally."""
    settings = get_settings()
    port = args.port if args.port is not None else settings.site_port
    site_dir = settings.data_dir / "derived" / "site"

    if not site_dir.exists():
        print("No site directory found. Run 'ghost-sightings refresh' first.", file=sys.stderr)
        return 1

    handler = partial(http.server.SimpleHTTPRequestHandler, directory=str(site_dir))

    with http.server.HTTPServer(("", port), handler) as server:
        print(f"Serving site on http://localhost:{port}/ (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")

    return 0


def cmd_api(args: argparse.Namespace) -> int:
    """Handle the 'api' command: run the FastAPI app under uvicorn."""
    settings = get_settings()
    try:
        settings.require_store()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    uvicorn.run(
        "ghost_sightings.api.app:app",
        host=args.host or settings.api_host,
        port=args.port if args.port is not None else settings.api_port,
        log_level="debug" if args.debug else settings.log_level.lower(),
    )
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.debug or settings.debug else settings.log_level.upper(),
        format=LOG_FORMAT,
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "import": cmd_import,
        "refresh": cmd_refresh,
        "serve": cmd_serve,
        "api": cmd_api,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

# compose_bom/run_extraction.py
"""
Command-line runner for the Compose BOM matrix.

Usage:
    # Print the compatibility table as JSON
    python -m compose_bom fetch
    python -m compose_bom fetch --output bom.json

    # Compare the two newest BOMs, or an explicit pair
    python -m compose_bom compare
    python -m compose_bom compare --from 2024.01.00 --to 2024.02.00 --only-changed

    # Serve the JSON API (PORT env var overrides the configured port)
    python -m compose_bom serve --host 0.0.0.0 --port 8080

Global options:
    --config PATH   config.yaml to load (default: $COMPOSE_BOM_CONFIG or the bundled file)
    --verbose       debug logging, including every failed source attempt
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

from compose_bom.A_core.A00_logging import DEBUG, configure_logging, get_logger
from compose_bom.A_core.A12_exceptions import BomPipelineError, ExtractionError
from compose_bom.G_config.G02_pipeline_config import PipelineConfig, load_config
from compose_bom.H_pipeline.H01_extraction_orchestrator import ExtractionOrchestrator, ExtractionRun
from compose_bom.J_export.J02_bom_diff import compare_boms
from compose_bom.Z_utils.Z01_http_fetcher import HttpSourceFetcher

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="compose_bom",
        description="Extract the Jetpack Compose BOM compatibility matrix.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Path to config.yaml",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    fetch = commands.add_parser("fetch", help="Print the compatibility table as JSON")
    fetch.add_argument(
        "--output", "-o",
        type=Path,
        help="Write JSON to this file instead of stdout",
    )

    compare = commands.add_parser("compare", help="Compare two BOM releases")
    compare.add_argument("--from", dest="from_bom", help="Older BOM (default: second newest)")
    compare.add_argument("--to", dest="to_bom", help="Newer BOM (default: newest)")
    compare.add_argument(
        "--only-changed",
        action="store_true",
        help="Show only libraries whose version differs",
    )
    compare.add_argument(
        "--json",
        action="store_true",
        help="Print the comparison as JSON",
    )

    serve = commands.add_parser("serve", help="Serve the JSON API")
    serve.add_argument("--host", help="Bind address (default: api.host)")
    serve.add_argument("--port", type=int, help="Port (default: $PORT or api.port)")

    return parser


def run_pipeline(config: PipelineConfig) -> ExtractionRun:
    """One extraction with a fresh fetcher."""
    with HttpSourceFetcher(timeout=config.timeout_seconds, user_agent=config.user_agent) as fetcher:
        return ExtractionOrchestrator.from_config(config, fetcher).run()


def cmd_fetch(args: argparse.Namespace, config: PipelineConfig) -> int:
    run = run_pipeline(config)
    for attempt in run.failed_attempts:
        logger.debug(f"  {attempt.describe()}")

    text = json.dumps(run.table.to_payload(), indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(run.table.bom_versions)} BOMs to {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0


def cmd_compare(args: argparse.Namespace, config: PipelineConfig) -> int:
    table = run_pipeline(config).table
    try:
        comparison = compare_boms(table, args.from_bom, args.to_bom, args.only_changed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(comparison.to_payload(), indent=2, ensure_ascii=False))
        return 0

    width = max((len(row.artifact) for row in comparison.rows), default=10)
    for row in comparison.rows:
        marker = "*" if row.changed else " "
        print(f"{marker} {row.artifact:<{width}}  {row.from_version:>16}  {row.to_version:>16}")
    print(comparison.summary())
    return 0


def cmd_serve(args: argparse.Namespace, config: PipelineConfig) -> int:
    import uvicorn

    from compose_bom.J_export.J01_api_server import create_app

    host = args.host or config.host
    port = args.port or int(os.environ.get("PORT") or config.port)
    logger.info(f"Serving on http://{host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port)
    return 0


COMMANDS = {
    "fetch": cmd_fetch,
    "compare": cmd_compare,
    "serve": cmd_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except BomPipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(
        log_dir=config.log_dir,
        log_level=DEBUG if args.verbose else config.log_level_value,
        enable_file_logging=bool(config.log_dir),
    )

    try:
        return COMMANDS[args.command](args, config)
    except ExtractionError as e:
        logger.error(f"Extraction failed: {e.message}")
        for attempt in e.attempts:
            logger.error(f"  {attempt.describe()}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line interface for tirehub.

Usage:
    python -m tirehub parse "185/60 R15 JK TYRE VECTRA 88 H" [--json]
    python -m tirehub search --width 155 [--aspect-ratio 70] [--rim-diameter 13] [--exact] [--limit 10] [--catalog PATH] [--json]
    python -m tirehub search-external --width 205 [--aspect-ratio 55] [--rim-diameter 16] [--limit 10] [--json]
    python -m tirehub serve [--port 8000]
"""

import argparse
import sys
from typing import Optional

from pydantic import ValidationError

from tirehub import __version__
from tirehub.config import Settings
from tirehub.logging_setup import configure_logging
from tirehub.models.inputs import DEFAULT_RESULT_LIMIT, MatchQuery
from tirehub.models.outputs import ParseResult
from tirehub.remote.search_client import CatalogSearchClient, ExternalSearchError
from tirehub.tire_catalog.extractor import extract_with_rule
from tirehub.tire_catalog.loader import PriceCatalog
from tirehub.tire_catalog.matcher import search_catalog, search_external
from tirehub.cli.readable_output import print_parse_result, print_search_result


def _add_size_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--width", "-w",
        required=True,
        help="Tire width in mm (required)",
    )
    parser.add_argument(
        "--aspect-ratio", "-a",
        default=None,
        help="Aspect ratio; omit for truck sizes",
    )
    parser.add_argument(
        "--rim-diameter", "-r",
        default=None,
        help="Rim diameter in inches, '15' or 'R15'",
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=DEFAULT_RESULT_LIMIT,
        help=f"Maximum results, 1-100 (default: {DEFAULT_RESULT_LIMIT})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tirehub",
        description="Tire Price List Hub - parse tire sizes from product names "
                    "and search a price list or an external catalog by size.",
    )
    parser.add_argument("--version", action="version", version=f"tirehub {__version__}")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $TIREHUB_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse the tire size out of a product name",
    )
    parse_parser.add_argument("product_name", help="Free-text product name")
    parse_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Search the price list for tires of a given size",
    )
    _add_size_arguments(search_parser)
    search_parser.add_argument(
        "--exact",
        action="store_true",
        help="Require exact aspect ratio and rim diameter",
    )
    search_parser.add_argument(
        "--catalog", "-c",
        default=None,
        help="Path to price list JSON (default: $TIREHUB_PRICE_LIST or data/price_list.json)",
    )

    # search-external command
    external_parser = subparsers.add_parser(
        "search-external",
        help="Search the external catalog for tires of a given size",
    )
    _add_size_arguments(external_parser)
    external_parser.add_argument(
        "--url",
        default=None,
        help="External search URL (default: $TIREHUB_SEARCH_URL)",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the FastAPI web server",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to listen on (default: 8000)",
    )
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    return parser


def _query_from_args(args: argparse.Namespace, exact: bool = False) -> MatchQuery:
    return MatchQuery(
        width=args.width,
        aspect_ratio=args.aspect_ratio,
        rim_diameter=args.rim_diameter,
        exact_mode=exact,
        result_limit=args.limit,
    )


def cmd_parse(args: argparse.Namespace, settings: Settings) -> int:
    """Parse a product name."""
    spec, rule = extract_with_rule(args.product_name)
    result = ParseResult(
        input=args.product_name,
        parsed_specs=spec,
        is_parseable=spec.is_parseable,
        rule=rule,
    )

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print_parse_result(result)

    return 0 if result.is_parseable else 1


def cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    """Search the price list by tire size."""
    try:
        query = _query_from_args(args, exact=args.exact)
    except ValidationError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1

    catalog = PriceCatalog(args.catalog or settings.price_list_path)
    try:
        count = catalog.load()
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: Invalid price list: {e}", file=sys.stderr)
        return 1

    print(f"Loaded {count} price list rows", file=sys.stderr)
    result = search_catalog(query, catalog.get(), settings.matcher)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print_search_result(result)

    return 0


def cmd_search_external(args: argparse.Namespace, settings: Settings) -> int:
    """Search the external catalog by tire size."""
    try:
        query = _query_from_args(args)
    except ValidationError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1

    url = args.url or settings.external_search_url
    if not url:
        print("Error: No external search URL. Pass --url or set TIREHUB_SEARCH_URL.", file=sys.stderr)
        return 1

    client = CatalogSearchClient(
        url=url,
        company_id=settings.external_company_id,
        timeout=settings.external_timeout_s,
    )
    try:
        listings = client.search(query.search_text)
    except ExternalSearchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = search_external(query, listings)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print_search_result(result)

    return 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    """Start the FastAPI web server."""
    try:
        import uvicorn
    except ImportError as e:
        print(f"Error: Missing dependency: {e}", file=sys.stderr)
        print("Install with: pip install uvicorn fastapi", file=sys.stderr)
        return 1

    print("\nStarting Tire Price List API", file=sys.stderr)
    print(f"API: http://{args.host}:{args.port}/", file=sys.stderr)
    print(f"Docs: http://{args.host}:{args.port}/docs", file=sys.stderr)
    print("\nPress Ctrl+C to stop\n", file=sys.stderr)

    uvicorn.run(
        "tirehub.api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def cli(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)

    commands = {
        "parse": cmd_parse,
        "search": cmd_search,
        "search-external": cmd_search_external,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args, settings)
    else:
        parser.print_help()
        return 1


def main():
    """Console script entrypoint wrapper."""
    return cli()


if __name__ == "__main__":
    sys.exit(cli())

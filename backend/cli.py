"""
Command-line entry point.

    wipo-search search -q NIKE -l 5
    wipo-search config
    wipo-search test
    wipo-search serve
"""
import argparse
import asyncio
import logging
import platform
import sys

from pydantic import ValidationError

from config import Settings, settings
from logging_setup import setup_logging
from models import SearchOutcome, SearchParameters, TrademarkStatus

logger = logging.getLogger(__name__)


def _bool_arg(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wipo-search",
        description="Trademark search agent for the WIPO Global Brand Database",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Search for trademarks on the WIPO database")
    search.add_argument("-q", "--query", required=True, help="Search query (trademark name)")
    search.add_argument("-t", "--type", dest="search_type", default="brand",
                        choices=["brand", "owner", "number"], help="Search type")
    search.add_argument("-c", "--country", help="Country filter")
    search.add_argument("-n", "--nice", help="Nice classification filter, e.g. 25 or 25,35")
    search.add_argument("-s", "--status", choices=[s.value for s in TrademarkStatus],
                        help="Status filter")
    search.add_argument("-l", "--limit", type=int, default=10, help="Maximum number of results")
    search.add_argument("--headless", type=_bool_arg, default=None,
                        help="Run browser in headless mode (true/false)")
    search.add_argument("--details", action="store_true", help="Also read each result's details page")
    search.add_argument("--json", action="store_true", help="Print the outcome as JSON")

    sub.add_parser("config", help="Show effective configuration")
    sub.add_parser("test", help="Run a sample search for 'Nike'")

    serve = sub.add_parser("serve", help="Run the HTTP search API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    return parser


def _use_proactor_loop() -> None:
    # Playwright spawns the browser as a subprocess; Windows needs the Proactor loop
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())


def print_outcome(outcome: SearchOutcome) -> None:
    print(f"\nFound {outcome.total_results} results:\n")
    for index, record in enumerate(outcome.results, start=1):
        print(f"{index}. {record.mark or 'Unknown Mark'}")
        print(f"   Application: {record.application_number or 'N/A'}")
        print(f"   Owner: {record.owner or 'N/A'}")
        print(f"   Country: {record.country or 'N/A'}")
        print(f"   Status: {record.status.value}")
        print(f"   Filing Date: {record.filing_date or 'N/A'}")
        if record.nice_classes:
            print(f"   Nice classes: {', '.join(str(n) for n in record.nice_classes)}")
        if record.image_url:
            print(f"   Image: {record.image_url}")
        if record.details_url:
            print(f"   Details: {record.details_url}")
        print("")
    print(f"Search completed in {outcome.search_time:.0f}ms")
    print(f"Timestamp: {outcome.timestamp.isoformat()}")


def run_search(
    params: SearchParameters,
    fetch_details: bool | None = None,
    run_settings: Settings | None = None,
) -> SearchOutcome | None:
    from agents.orchestrator import SearchWorkflow

    _use_proactor_loop()
    workflow = SearchWorkflow(run_settings or settings, fetch_details=fetch_details)
    return asyncio.run(workflow.run(params))


def cmd_search(args) -> int:
    run_settings = settings
    if args.headless is not None:
        run_settings = settings.model_copy(update={"headless": args.headless})

    try:
        params = SearchParameters(
            query=args.query,
            search_type=args.search_type,
            country=args.country,
            nice=args.nice,
            status=args.status,
            limit=args.limit,
        )
    except ValidationError as exc:
        print(f"Invalid search parameters:\n{exc}", file=sys.stderr)
        return 1

    if not args.json:
        print("WIPO Trademark Search")
        print(f"  Query: {params.query}")
        print(f"  Type: {params.search_type}")
        if params.country:
            print(f"  Country: {params.country}")
        if params.nice:
            print(f"  Nice Classification: {params.nice}")
        print(f"  Limit: {params.limit}")

    outcome = run_search(
        params,
        fetch_details=True if args.details else None,
        run_settings=run_settings,
    )

    if outcome is None or not outcome.results:
        print("\nSearch failed or returned no results. Please try again.", file=sys.stderr)
        return 1

    if args.json:
        print(outcome.model_dump_json(indent=2))
    else:
        print_outcome(outcome)
    return 0


def cmd_config(args) -> int:
    print("Configuration:")
    for key, value in settings.summary().items():
        print(f"  {key}: {value}")
    print(f"  python: {platform.python_version()}")
    print(f"  platform: {sys.platform}")
    return 0


def cmd_test(args) -> int:
    print("Running test search with query: Nike")
    outcome = run_search(SearchParameters(query="Nike", search_type="brand", limit=5))
    if outcome is None or not outcome.results:
        print("Test completed but no results found.", file=sys.stderr)
        return 1
    print(f"Test passed. Found {len(outcome.results)} results for test query.")
    return 0


def cmd_serve(args) -> int:
    import uvicorn

    _use_proactor_loop()
    uvicorn.run("main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


COMMANDS = {
    "search": cmd_search,
    "config": cmd_config,
    "test": cmd_test,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)
    try:
        return COMMANDS[args.command](args)
    except Exception as exc:
        logger.exception("Unhandled error")
        print(f"Error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Console entry point: ask for a delivery job and print its shortest route."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Callable, Sequence

from .data.catalog_repository import load_catalog
from .errors import JobRequestError
from .logging_config import configure_logging
from .models.domain import Job
from .services.jobs.builder import JobRequestBuilder
from .services.outputs.routing_formatter import build_route_plan, format_route, route_plan_to_json
from .services.routing.solver import optimize_route, total_distance

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]
Writer = Callable[[str], None]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shortest delivery route from the depot and back")
    parser.add_argument(
        "--codes",
        nargs="+",
        metavar="CODE",
        help="Postal codes to deliver to. Without this option the job is asked for interactively.",
    )
    parser.add_argument("--json", action="store_true", help="Print the route as JSON (with --codes)")
    parser.add_argument("--catalog", type=Path, default=None, help="Postal register CSV/XLSX file")
    parser.add_argument(
        "--unlimited",
        action="store_true",
        help="Allow jobs as large as the postal register instead of the configured limit",
    )
    parser.add_argument("--verbose", action="store_true", help="Log solver progress to stderr")
    return parser


def request_job(builder: JobRequestBuilder, read: Reader, write: Writer) -> Job:
    """Prompt for a job size and that many postal codes. Raises ``JobRequestError`` on bad input."""
    size = builder.parse_size(read(f"Enter job size (number from 1-{builder.max_job_size}): "))
    write(f"\nEnter job order (number from 1-{builder.max_postal_code}):")
    codes = [builder.parse_postal_code(read(f"Enter postal code {i}: ")) for i in range(1, size + 1)]
    return builder.build(codes)


def report_route(job: Job, write: Writer) -> None:
    write(f"\nThe shortest possible route to travel is {total_distance(job):f}:")
    write(format_route(job))


def run_interactive(builder: JobRequestBuilder, read: Reader = input, write: Writer = print) -> int:
    """Serve jobs until the input ends. Bad requests are reported and the prompt starts over."""
    while True:
        write("\nWelcome to the delivery service!\nPlease enter your job request:\n")
        try:
            job = request_job(builder, read, write)
        except JobRequestError as exc:
            write(f"\n{exc.message}")
            write("exiting...\n")
            continue
        except (EOFError, KeyboardInterrupt):
            write("")
            return 0

        optimize_route(job)
        report_route(job, write)

        try:
            read("\nPress Enter to continue...")
        except (EOFError, KeyboardInterrupt):
            write("")
            return 0


def run_once(builder: JobRequestBuilder, codes: Sequence[str], as_json: bool = False, write: Writer = print) -> int:
    try:
        job = builder.build(codes)
    except JobRequestError as exc:
        write(f"{exc.message}: {exc.detail}")
        return 1

    stats = optimize_route(job)
    if as_json:
        write(json.dumps(route_plan_to_json(build_route_plan(job, stats)), indent=2))
    else:
        report_route(job, write)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(None if args.verbose else "WARNING")

    try:
        catalog = load_catalog(args.catalog.expanduser().resolve() if args.catalog else None)
        builder = JobRequestBuilder(catalog, max_job_size=catalog.max_postal_code if args.unlimited else None)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Unable to load postal register: {exc}")
        return 1
    logger.debug("Job size limit %d, postal codes 1-%d", builder.max_job_size, builder.max_postal_code)

    if args.codes:
        return run_once(builder, args.codes, as_json=args.json)
    if args.json:
        parser.error("--json requires --codes")
    return run_interactive(builder)


if __name__ == "__main__":
    raise SystemExit(main())

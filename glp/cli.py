"""CLI entry point for glp."""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from rich.console import Console

from glp.client import GitLabClient
from glp.config import MARKER_FILE, TOKEN_ENV_VAR, load_config
from glp.errors import GlpError
from glp.fetcher import DEFAULT_CONCURRENCY, fetch_details, fetch_jobs
from glp.models.gitlab import Job, PipelineDetail, PipelineSummary
from glp.models.row import DisplayRow
from glp.presenter import render_rows
from glp.stages import group_jobs

log = logging.getLogger("glp")

DEFAULT_COUNT = 3
MAX_COUNT = 100


def build_rows(
    summaries: Sequence[PipelineSummary],
    details: Sequence[PipelineDetail | Exception],
    jobs: Sequence[Sequence[Job] | Exception] | None = None,
) -> Sequence[DisplayRow]:
    """Merge summaries with their fetched details and jobs.

    Failed fetches (exception entries) become missing data on the row.
    """
    rows: list[DisplayRow] = []
    for index, summary in enumerate(summaries):
        detail = details[index]
        pipeline_jobs = jobs[index] if jobs is not None else None
        rows.append(
            DisplayRow(
                summary=summary,
                detail=None if isinstance(detail, Exception) else detail,
                stages=(
                    None
                    if pipeline_jobs is None or isinstance(pipeline_jobs, Exception)
                    else group_jobs(pipeline_jobs)
                ),
            )
        )
    return rows


async def run(
    project: str | None,
    *,
    count: int = DEFAULT_COUNT,
    show_finished: bool = False,
    show_jobs: bool = False,
    concurrency: int = DEFAULT_CONCURRENCY,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    console: Console | None = None,
) -> int:
    """Show recent pipelines and return exit code."""
    try:
        config = load_config(
            project,
            env=os.environ if env is None else env,
            cwd=Path.cwd() if cwd is None else cwd,
        )

        async with GitLabClient.from_config(config) as client:
            log.info("Listing %d pipeline(s) for %s", count, config.project_id)
            summaries = await client.list_pipelines(count)
            details = await fetch_details(client, summaries, concurrency)
            jobs = (
                await fetch_jobs(client, summaries, concurrency) if show_jobs else None
            )
    except GlpError as exc:
        log.error("%s", exc)
        return exc.exit_code

    if not summaries:
        log.warning("No pipelines found for project %s", config.project_id)
        return 0

    render_rows(
        build_rows(summaries, details, jobs),
        show_finished=show_finished,
        console=console,
    )
    return 0


def bounded_int(minimum: int, maximum: int | None = None) -> Callable[[str], int]:
    """Build an argparse type accepting integers within a range."""

    def _parse(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
        if number < minimum or (maximum is not None and number > maximum):
            upper = "" if maximum is None else f" and at most {maximum}"
            raise argparse.ArgumentTypeError(
                f"must be at least {minimum}{upper}, got {number}"
            )
        return number

    return _parse


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="glp",
        description="GitLab pipeline status for the command line.",
        epilog=f"The API token is read from {TOKEN_ENV_VAR}.",
    )
    parser.add_argument(
        "project",
        nargs="?",
        help=f"Project ID or path (defaults to the content of {MARKER_FILE})",
    )
    parser.add_argument(
        "-n",
        "--count",
        "-l",
        "--limit",
        dest="count",
        type=bounded_int(1, MAX_COUNT),
        default=DEFAULT_COUNT,
        help=f"Number of recent pipelines to show (default: {DEFAULT_COUNT})",
    )
    parser.add_argument(
        "-f",
        "--finished-at",
        "--finished",
        dest="finished_at",
        action="store_true",
        help="Show when each pipeline finished",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        action="store_true",
        help="Show stages and jobs of each pipeline",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=bounded_int(1),
        default=DEFAULT_CONCURRENCY,
        help=(
            "Maximum number of concurrent per-pipeline requests "
            f"(default: {DEFAULT_CONCURRENCY})"
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress to stderr",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            args.project,
            count=args.count,
            show_finished=args.finished_at,
            show_jobs=args.jobs,
            concurrency=args.concurrency,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

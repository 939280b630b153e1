"""Bounded-concurrency fetching of per-pipeline data."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from glp.client import GitLabClient
from glp.models.gitlab import Job, PipelineDetail, PipelineSummary

log = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4

T = TypeVar("T")
R = TypeVar("R")


async def gather_bounded(
    items: Sequence[T],
    fetch: Callable[[T], Awaitable[R]],
    limit: int,
) -> Sequence[R | Exception]:
    """Run fetch for every item with at most limit calls in flight.

    Args:
        items: Inputs, one fetch per item
        fetch: Coroutine function performing a single fetch
        limit: Maximum number of concurrent fetch calls

    Returns:
        One entry per item, in input order: the fetched value, or the
        exception that fetch raised for that item. A failing item never
        affects its siblings.

    Raises:
        ValueError: If limit is lower than 1

    """
    if limit < 1:
        raise ValueError(f"Concurrency limit must be at least 1, got {limit}")
    if not items:
        return []

    semaphore = asyncio.Semaphore(limit)

    async def _fetch_one(item: T) -> R:
        async with semaphore:
            return await fetch(item)

    results = await asyncio.gather(
        *(_fetch_one(item) for item in items), return_exceptions=True
    )

    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
    return results  # type: ignore[return-value]


async def fetch_details(
    client: GitLabClient,
    summaries: Sequence[PipelineSummary],
    limit: int = DEFAULT_CONCURRENCY,
) -> Sequence[PipelineDetail | Exception]:
    """Fetch the detail record of every listed pipeline."""
    log.info(
        "Fetching details for %d pipeline(s) (concurrency=%d)", len(summaries), limit
    )
    results = await gather_bounded(
        [summary.id for summary in summaries], client.get_pipeline_detail, limit
    )
    _log_failures("details", summaries, results)
    return results


async def fetch_jobs(
    client: GitLabClient,
    summaries: Sequence[PipelineSummary],
    limit: int = DEFAULT_CONCURRENCY,
) -> Sequence[Sequence[Job] | Exception]:
    """Fetch the jobs of every listed pipeline."""
    log.info(
        "Fetching jobs for %d pipeline(s) (concurrency=%d)", len(summaries), limit
    )
    results = await gather_bounded(
        [summary.id for summary in summaries], client.list_pipeline_jobs, limit
    )
    _log_failures("jobs", summaries, results)
    return results


def _log_failures(
    what: str,
    summaries: Sequence[PipelineSummary],
    results: Sequence[object],
) -> None:
    for summary, result in zip(summaries, results, strict=True):
        if isinstance(result, Exception):
            log.warning(
                "Failed to fetch %s of pipeline %s: %s", what, summary.id, result
            )

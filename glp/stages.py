"""Grouping of pipeline jobs into stages."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from glp.models.gitlab import Job

# Highest priority first.
STAGE_STATUS_PRIORITY = ("running", "failed", "success")


@dataclass(frozen=True, kw_only=True)
class Stage:
    """A named group of jobs belonging to one pipeline."""

    name: str
    jobs: Sequence[Job]

    @property
    def status(self) -> str:
        """Aggregate status: running, failed, success or unknown."""
        statuses = {job.status for job in self.jobs}
        for status in STAGE_STATUS_PRIORITY:
            if status in statuses:
                return status
        return "unknown"

    @property
    def started_at(self) -> datetime | None:
        """Earliest start time among the stage's jobs."""
        started = [job.started_at for job in self.jobs if job.started_at is not None]
        return min(started) if started else None


def group_jobs(jobs: Iterable[Job]) -> Sequence[Stage]:
    """Group jobs by stage name and order stages by first job start.

    Stages where no job has started yet are placed last, keeping the order in
    which GitLab listed them.
    """
    by_stage: dict[str, list[Job]] = {}
    for job in jobs:
        by_stage.setdefault(job.stage, []).append(job)

    stages = [
        Stage(name=name, jobs=stage_jobs) for name, stage_jobs in by_stage.items()
    ]
    started = sorted(
        (stage for stage in stages if stage.started_at is not None),
        key=lambda stage: stage.started_at,  # type: ignore[arg-type,return-value]
    )
    pending = [stage for stage in stages if stage.started_at is None]
    return [*started, *pending]

"""Pydantic models for GitLab API responses."""

from datetime import datetime
from typing import Literal

from glp.models.base import ApiModel

# Known statuses; status fields also accept other strings for newer GitLab ones.
PipelineStatus = Literal[
    "created",
    "waiting_for_resource",
    "preparing",
    "pending",
    "running",
    "success",
    "failed",
    "canceled",
    "skipped",
    "manual",
    "scheduled",
]


class PipelineSummary(ApiModel):
    """A pipeline as listed by GET /projects/:id/pipelines."""

    id: int
    status: PipelineStatus | str
    ref: str
    sha: str = ""
    web_url: str = ""
    created_at: datetime


class PipelineDetail(ApiModel):
    """A pipeline as returned by GET /projects/:id/pipelines/:pipeline_id."""

    id: int
    status: PipelineStatus | str
    finished_at: datetime | None = None
    duration: float | None = None


class Job(ApiModel):
    """A job as listed by GET /projects/:id/pipelines/:pipeline_id/jobs."""

    id: int
    name: str
    stage: str
    status: PipelineStatus | str
    web_url: str = ""
    started_at: datetime | None = None
    duration: float | None = None

"""Models for rendered output."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from glp.models.gitlab import PipelineDetail, PipelineSummary
from glp.stages import Stage


@dataclass(frozen=True, kw_only=True)
class DisplayRow:
    """One pipeline ready to be rendered.

    Detail and stages are optional: they are None when the corresponding
    fetch failed or was not requested.
    """

    summary: PipelineSummary
    detail: PipelineDetail | None = None
    stages: Sequence[Stage] | None = None

    @property
    def finished_at(self) -> datetime | None:
        """Finish time, None while running or when the detail is missing."""
        return self.detail.finished_at if self.detail is not None else None

"""GitLab REST API client."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import TypeAdapter, ValidationError

from glp.config import GlpConfig
from glp.errors import ApiError, AuthError, NetworkError
from glp.models.gitlab import Job, PipelineDetail, PipelineSummary

log = logging.getLogger(__name__)

AUTH_ERROR_STATUSES = frozenset([401, 403])
JOBS_PAGE_SIZE = 100

_summaries_adapter = TypeAdapter(list[PipelineSummary])
_jobs_adapter = TypeAdapter(list[Job])


@dataclass(frozen=True, kw_only=True)
class GitLabClient:
    """Read-only client for the pipeline endpoints of one project.

    All requests are authenticated with the configured token as a Bearer
    header. Nothing is cached or retried: every failure is raised.
    """

    config: GlpConfig
    session: aiohttp.ClientSession = field(repr=False)
    encoded_project_id: str = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GlpConfig
    ) -> AsyncGenerator["GitLabClient", None]:
        """Create client with managed session lifecycle."""
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
        ) as session:
            yield cls(
                config=config,
                session=session,
                encoded_project_id=quote(config.project_id, safe=""),
            )

    async def list_pipelines(self, limit: int) -> Sequence[PipelineSummary]:
        """List the most recent pipelines, newest first as GitLab orders them."""
        url = f"projects/{self.encoded_project_id}/pipelines"
        status, data = await self._get_json(url, params={"per_page": limit})

        try:
            pipelines = _summaries_adapter.validate_python(data)
        except ValidationError as exc:
            raise ApiError(status, f"Unexpected pipelines payload: {exc}") from exc

        log.info(
            "Listed %d pipeline(s) for project %s",
            len(pipelines),
            self.config.project_id,
        )
        return pipelines

    async def get_pipeline_detail(self, pipeline_id: int) -> PipelineDetail:
        """Get a single pipeline including its finish time and duration."""
        url = f"projects/{self.encoded_project_id}/pipelines/{pipeline_id}"
        status, data = await self._get_json(url)

        try:
            return PipelineDetail.model_validate(data)
        except ValidationError as exc:
            raise ApiError(status, f"Unexpected pipeline payload: {exc}") from exc

    async def list_pipeline_jobs(self, pipeline_id: int) -> Sequence[Job]:
        """List the jobs of a pipeline (first page only)."""
        url = f"projects/{self.encoded_project_id}/pipelines/{pipeline_id}/jobs"
        status, data = await self._get_json(url, params={"per_page": JOBS_PAGE_SIZE})

        try:
            return _jobs_adapter.validate_python(data)
        except ValidationError as exc:
            raise ApiError(status, f"Unexpected jobs payload: {exc}") from exc

    async def _get_json(
        self, url: str, params: Mapping[str, Any] | None = None
    ) -> tuple[int, Any]:
        """GET a JSON document and return it with the response status."""
        headers = {"Authorization": f"Bearer {self.config.token.get_secret_value()}"}

        try:
            async with self.session.get(
                url, headers=headers, params=params
            ) as response:
                if not 200 <= response.status < 300:
                    text = await response.text()
                    if response.status in AUTH_ERROR_STATUSES:
                        raise AuthError(response.status, text)
                    raise ApiError(response.status, text)
                try:
                    data = await response.json()
                except (aiohttp.ContentTypeError, ValueError) as exc:
                    raise ApiError(response.status, f"Invalid JSON: {exc}") from exc
                return response.status, data
        except (aiohttp.ClientError, TimeoutError) as exc:
            reason = str(exc) or type(exc).__name__
            raise NetworkError(f"Request to {url} failed: {reason}") from exc

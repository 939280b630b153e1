"""Resolution of the API token and target project."""

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, SecretStr, field_validator

from glp.errors import InvalidProjectError, MissingProjectError, MissingTokenError

log = logging.getLogger(__name__)

TOKEN_ENV_VAR = "GLP_PRIVATE_TOKEN"
API_URL_ENV_VAR = "GLP_API_URL"
MARKER_FILE = ".glp"
DEFAULT_API_BASE_URL = "https://gitlab.com/api/v4/"

# Numeric id or namespaced path such as "group/subgroup/project".
PROJECT_PATTERN = re.compile(r"[\w.\-]+(?:/[\w.\-]+)*")


class GlpConfig(BaseModel):
    """Resolved configuration for one invocation.

    The token is a Personal or Project Access Token; read_api scope is enough.
    """

    token: SecretStr
    project_id: str
    api_base_url: str = DEFAULT_API_BASE_URL

    @field_validator("api_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else f"{value}/"


def resolve_token(env: Mapping[str, str]) -> SecretStr:
    """Read the API token from the environment.

    Raises:
        MissingTokenError: If the variable is absent or blank

    """
    token = env.get(TOKEN_ENV_VAR, "").strip()
    if not token:
        raise MissingTokenError(f"{TOKEN_ENV_VAR} is not set")
    return SecretStr(token)


def is_valid_project(value: str) -> bool:
    """Check that a value looks like a GitLab project id or path."""
    return PROJECT_PATTERN.fullmatch(value) is not None


def resolve_project(argument: str | None, cwd: Path) -> str:
    """Resolve the project from the CLI argument or the marker file.

    A given argument always wins; a malformed argument is an error and never
    falls back to the marker file.

    Args:
        argument: Positional project argument, None when omitted
        cwd: Directory searched for the marker file

    Returns:
        The project identifier

    Raises:
        InvalidProjectError: If the argument or marker content is malformed
        MissingProjectError: If there is no argument and no marker file

    """
    if argument is not None:
        project = argument.strip()
        if not is_valid_project(project):
            raise InvalidProjectError(f"Invalid project identifier: {argument!r}")
        log.info("Using project %s from command line", project)
        return project

    marker = cwd / MARKER_FILE
    try:
        content = marker.read_text()
    except FileNotFoundError:
        raise MissingProjectError(
            f"No project given and no {MARKER_FILE} file in {cwd}"
        ) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidProjectError(f"Cannot read {marker}: {exc}") from exc

    project = content.strip()
    if not project:
        raise InvalidProjectError(f"{marker} is empty")
    if not is_valid_project(project):
        raise InvalidProjectError(f"{marker} does not contain a single project id")

    log.info("Using project %s from %s", project, marker)
    return project


def load_config(argument: str | None, env: Mapping[str, str], cwd: Path) -> GlpConfig:
    """Resolve token, project and API URL.

    The token is checked first so a missing token fails before anything else.
    """
    token = resolve_token(env)
    project_id = resolve_project(argument, cwd)
    api_base_url = env.get(API_URL_ENV_VAR, "").strip() or DEFAULT_API_BASE_URL
    return GlpConfig(token=token, project_id=project_id, api_base_url=api_base_url)

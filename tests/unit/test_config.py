"""Tests for config module."""

from pathlib import Path

import pytest
from pydantic import SecretStr

from glp.config import (
    API_URL_ENV_VAR,
    DEFAULT_API_BASE_URL,
    TOKEN_ENV_VAR,
    GlpConfig,
    is_valid_project,
    load_config,
    resolve_project,
    resolve_token,
)
from glp.errors import InvalidProjectError, MissingProjectError, MissingTokenError


class TestResolveToken:
    """Tests for resolve_token."""

    def test_returns_token_from_env(self) -> None:
        """Reads the token from the environment variable."""
        token = resolve_token({TOKEN_ENV_VAR: "glpat-secret"})

        assert token.get_secret_value() == "glpat-secret"

    @pytest.mark.parametrize("env", [{}, {TOKEN_ENV_VAR: ""}, {TOKEN_ENV_VAR: "  "}])
    def test_raises_when_missing_or_empty(self, env: dict[str, str]) -> None:
        """Raises MissingTokenError when the variable is absent or blank."""
        with pytest.raises(MissingTokenError, match=TOKEN_ENV_VAR):
            resolve_token(env)


class TestResolveProject:
    """Tests for resolve_project."""

    def test_argument_takes_precedence_over_marker(self, tmp_path: Path) -> None:
        """Uses the CLI argument even if a marker file exists."""
        (tmp_path / ".glp").write_text("789\n")

        assert resolve_project("456", tmp_path) == "456"

    def test_reads_trimmed_marker_file(self, tmp_path: Path) -> None:
        """Falls back to the trimmed content of the marker file."""
        (tmp_path / ".glp").write_text("789\n")

        assert resolve_project(None, tmp_path) == "789"

    def test_accepts_namespaced_path(self, tmp_path: Path) -> None:
        """Accepts a group/project path in the marker file."""
        (tmp_path / ".glp").write_text("  my-group/sub.group/my_project  \n")

        assert resolve_project(None, tmp_path) == "my-group/sub.group/my_project"

    def test_raises_when_no_source(self, tmp_path: Path) -> None:
        """Raises MissingProjectError without argument or marker file."""
        with pytest.raises(MissingProjectError, match=".glp"):
            resolve_project(None, tmp_path)

    @pytest.mark.parametrize("content", ["", "\n", "   \n\t"])
    def test_raises_on_empty_marker(self, tmp_path: Path, content: str) -> None:
        """Raises InvalidProjectError when the marker file is empty."""
        (tmp_path / ".glp").write_text(content)

        with pytest.raises(InvalidProjectError, match="empty"):
            resolve_project(None, tmp_path)

    def test_raises_on_malformed_marker(self, tmp_path: Path) -> None:
        """Raises InvalidProjectError when the marker holds several ids."""
        (tmp_path / ".glp").write_text("123\n456\n")

        with pytest.raises(InvalidProjectError):
            resolve_project(None, tmp_path)

    def test_malformed_argument_does_not_fall_back(self, tmp_path: Path) -> None:
        """A malformed argument is an error even with a valid marker file."""
        (tmp_path / ".glp").write_text("789\n")

        with pytest.raises(InvalidProjectError, match="not a project"):
            resolve_project("not a project", tmp_path)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("12345", True),
        ("group/project", True),
        ("group/sub-group/my.project_1", True),
        ("", False),
        ("has space", False),
        ("/leading", False),
        ("trailing/", False),
        ("double//slash", False),
    ],
)
def test_is_valid_project(value: str, expected: bool) -> None:
    """Validates project ids and namespaced paths."""
    assert is_valid_project(value) is expected


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_config(self, tmp_path: Path) -> None:
        """Builds config with default API URL."""
        config = load_config("123", env={TOKEN_ENV_VAR: "glpat-x"}, cwd=tmp_path)

        assert config.project_id == "123"
        assert config.token.get_secret_value() == "glpat-x"
        assert config.api_base_url == DEFAULT_API_BASE_URL

    def test_api_url_from_env_gets_trailing_slash(self, tmp_path: Path) -> None:
        """Reads API URL override and normalizes the trailing slash."""
        config = load_config(
            "123",
            env={
                TOKEN_ENV_VAR: "glpat-x",
                API_URL_ENV_VAR: "https://gitlab.example.com/api/v4",
            },
            cwd=tmp_path,
        )

        assert config.api_base_url == "https://gitlab.example.com/api/v4/"

    def test_missing_token_checked_before_project(self, tmp_path: Path) -> None:
        """Fails on the token before looking for a project."""
        with pytest.raises(MissingTokenError):
            load_config(None, env={TOKEN_ENV_VAR: ""}, cwd=tmp_path)

    def test_token_hidden_in_repr(self) -> None:
        """Does not leak the token through repr."""
        config = GlpConfig(token=SecretStr("glpat-secret"), project_id="1")

        assert "glpat-secret" not in repr(config)

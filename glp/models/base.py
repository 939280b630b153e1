"""Base model configuration for GitLab API payloads."""

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Immutable view of a GitLab API object.

    GitLab responses carry many more fields than glp displays; unknown fields
    are dropped on validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

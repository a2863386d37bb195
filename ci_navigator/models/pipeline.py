"""Models for pipelines and jobs reported by the CI tool."""

from collections.abc import Sequence
from datetime import datetime

from pydantic import Field

from ci_navigator.models.base import Model


class Pipeline(Model):
    """A pipeline as listed by the CI tool.

    Status stays a plain string: the tool reports more states than the ones
    we style, and an unexpected one must not break the listing.
    """

    id: int = Field(..., description="Project-wide pipeline ID")
    iid: int = Field(..., description="Internal (per-project) pipeline ID")
    status: str = Field(..., description="Pipeline status")
    ref: str = Field(..., description="Branch or tag the pipeline ran for")
    sha: str = Field(..., description="Commit SHA of the pipeline")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update")
    web_url: str | None = Field(default=None, description="Pipeline page URL")

    @property
    def internal_id(self) -> int:
        return self.iid

    @property
    def revision(self) -> str:
        """Commit identifier used as the navigation key."""
        return self.sha


class Job(Model):
    """A job belonging to a pipeline."""

    id: int = Field(..., description="Job ID")
    name: str = Field(..., description="Job name")
    status: str = Field(..., description="Job status")
    stage: str | None = Field(default=None, description="Stage the job runs in")


class PipelineDetail(Model):
    """Detail of a single pipeline, fetched on demand."""

    jobs: Sequence[Job] = Field(default_factory=list, description="Pipeline jobs")

"""Abstract base class for CI pipeline providers."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from ci_navigator.models.pipeline import Pipeline, PipelineDetail

log = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised when the CI tool fails, cannot be started or returns bad output."""

    def __init__(self, command: Sequence[str], message: str) -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.message = message


@dataclass(frozen=True, kw_only=True)
class PipelineProvider(ABC):
    """Abstract base for CI pipeline providers.

    Providers delegate to an external tool. Queries return fresh snapshots on
    every call; nothing is cached between calls.
    """

    @abstractmethod
    async def list_pipelines(self) -> Sequence[Pipeline]:
        """List the most recent pipelines.

        Raises:
            ProviderError: If the tool fails or its output cannot be parsed

        """

    @abstractmethod
    async def get_pipeline_detail(self, revision: str) -> PipelineDetail:
        """Get the jobs of the pipeline for a revision.

        Args:
            revision: Commit SHA identifying the pipeline

        Raises:
            ProviderError: If the tool fails or its output cannot be parsed

        """

    @abstractmethod
    async def start_job(self, job_id: int) -> str:
        """Trigger a job without attaching to it and return the tool's output."""

    @abstractmethod
    async def trace_job(self, job_id: int) -> int:
        """Stream a job's trace on the terminal until it ends.

        Returns:
            Exit code of the trace subprocess

        """

    @abstractmethod
    async def view_pipeline(self, revision: str) -> int:
        """Open the interactive pipeline viewer until the operator leaves it.

        Returns:
            Exit code of the viewer subprocess

        """

    async def trigger_job(self, job_id: int) -> str:
        """Trigger a job and follow its trace.

        Resolves only after the trace subprocess has terminated.

        Args:
            job_id: ID of the job to trigger

        Returns:
            Textual output of the trigger command

        """
        output = await self.start_job(job_id)
        log.debug("Job %s triggered, attaching trace", job_id)

        exit_code = await self.trace_job(job_id)
        log.debug("Trace for job %s ended (exit=%s)", job_id, exit_code)

        return output

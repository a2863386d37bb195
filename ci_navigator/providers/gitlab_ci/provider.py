"""GitLab CI provider implementation on top of the glab CLI."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass, field

from pydantic import TypeAdapter, ValidationError

from ci_navigator.models.pipeline import Pipeline, PipelineDetail
from ci_navigator.process import AttachedProcessRunner
from ci_navigator.providers.base import PipelineProvider, ProviderError
from ci_navigator.providers.gitlab_ci.config import GitLabCIConfig

log = logging.getLogger(__name__)

PIPELINE_LIST = TypeAdapter(list[Pipeline] | None)


@dataclass(frozen=True, kw_only=True)
class GitLabCIProvider(PipelineProvider):
    """GitLab CI pipeline provider.

    Listing, detail and trigger run glab with captured output. The viewer and
    the job trace are attached to the terminal through the runner, so the
    operator interacts with glab directly until it exits.
    """

    config: GitLabCIConfig
    runner: AttachedProcessRunner = field(
        default_factory=AttachedProcessRunner, repr=False
    )

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitLabCIConfig
    ) -> AsyncGenerator["GitLabCIProvider", None]:
        """Create provider with a dedicated attached-process runner."""
        runner = AttachedProcessRunner()
        yield cls(config=config, runner=runner)
        if runner.busy:  # pragma: no cover
            log.warning("Provider closed while a subprocess was attached")

    async def list_pipelines(self) -> Sequence[Pipeline]:
        """List recent pipelines with `glab ci list`."""
        command = self._command("ci", "list", "-F", "json")
        output = await self._run(command)

        if not output.strip():
            return []

        try:
            pipelines = PIPELINE_LIST.validate_json(output)
        except (ValidationError, UnicodeDecodeError) as e:
            raise ProviderError(command, _parse_error_message(command, e)) from e

        return pipelines or []

    async def get_pipeline_detail(self, revision: str) -> PipelineDetail:
        """Get pipeline jobs with `glab ci get`."""
        command = self._command("ci", "get", "-b", revision, "-F", "json")
        output = await self._run(command)

        try:
            return PipelineDetail.model_validate_json(output)
        except (ValidationError, UnicodeDecodeError) as e:
            raise ProviderError(command, _parse_error_message(command, e)) from e

    async def start_job(self, job_id: int) -> str:
        """Trigger a job with `glab ci trigger`."""
        output = await self._run(self._command("ci", "trigger", str(job_id)))
        log.info("Triggered job %s", job_id)
        return output.decode(errors="replace")

    async def trace_job(self, job_id: int) -> int:
        """Follow a job's trace with `glab ci trace`."""
        return await self.runner.run(*self._command("ci", "trace", str(job_id)))

    async def view_pipeline(self, revision: str) -> int:
        """Open `glab ci view` for a revision."""
        return await self.runner.run(*self._command("ci", "view", "-b", revision))

    def _command(self, *args: str) -> list[str]:
        command = [self.config.executable, *args]
        if self.config.repo:
            command.extend(["-R", self.config.repo])
        return command

    async def _run(self, command: Sequence[str]) -> bytes:
        """Run a glab command with captured output and return its raw stdout.

        Raises:
            ProviderError: If glab cannot be started or exits non-zero
            TimeoutError: If command_timeout is configured and exceeded

        """
        log.debug("Running: %s", " ".join(command))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ProviderError(
                command, f"cannot start {self.config.executable}: {e}"
            ) from e

        try:
            async with asyncio.timeout(self.config.command_timeout):
                stdout, stderr = await process.communicate()
        except TimeoutError:
            await _kill(process)
            raise TimeoutError(
                f"{' '.join(command)} did not complete within "
                f"{self.config.command_timeout} seconds"
            ) from None
        except BaseException:
            await _kill(process)
            raise

        if process.returncode != 0:
            detail = _text(stderr) or _text(stdout)
            raise ProviderError(
                command,
                f"{' '.join(command)} failed (exit {process.returncode}): {detail}",
            )

        return stdout


def _text(output: bytes) -> str:
    return output.decode(errors="replace").strip()


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.kill()
        await process.wait()


def _parse_error_message(command: Sequence[str], error: ValueError) -> str:
    return f"unexpected output from {' '.join(command)}: {error}"

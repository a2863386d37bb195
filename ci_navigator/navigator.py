"""Interactive navigation over pipelines, pipeline actions and jobs."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum

from ci_navigator.presentation import (
    back_title,
    format_job,
    format_pipeline,
    quit_title,
    ref_column_width,
)
from ci_navigator.prompts import Choice, Prompter, SelectionCancelled
from ci_navigator.providers.base import PipelineProvider
from ci_navigator.terminal import TerminalContext

log = logging.getLogger(__name__)


class State(StrEnum):
    LIST_PIPELINES = "list-pipelines"
    PIPELINE_ACTIONS = "pipeline-actions"
    VIEW_PIPELINE = "view-pipeline"
    SELECT_JOB = "select-job"
    TRIGGER_JOB = "trigger-job"
    QUIT = "quit"


class Action(StrEnum):
    VIEW = "view"
    TRIGGER = "trigger"
    BACK = "back"
    QUIT = "quit"


@dataclass(frozen=True, kw_only=True)
class NavigationContext:
    """Where the operator is: the current state and what has been selected."""

    state: State
    revision: str | None = None
    job_id: int | None = None

    def to(self, state: State, **changes: str | int | None) -> "NavigationContext":
        return replace(self, state=state, **changes)


ACTION_CHOICES: tuple[Choice[Action], ...] = (
    Choice(title="View pipeline", value=Action.VIEW),
    Choice(title="Trigger job", value=Action.TRIGGER),
    Choice(title=back_title(), value=Action.BACK),
    Choice(title=quit_title(), value=Action.QUIT),
)

ACTION_TRANSITIONS: Mapping[Action, State] = {
    Action.VIEW: State.VIEW_PIPELINE,
    Action.TRIGGER: State.SELECT_JOB,
    Action.BACK: State.LIST_PIPELINES,
    Action.QUIT: State.QUIT,
}

type Handler = Callable[[NavigationContext], Awaitable[NavigationContext]]


@dataclass(frozen=True, kw_only=True)
class Navigator:
    """Finite-state loop driving the interactive session.

    Each state handler performs its prompt or provider call and returns the
    next context. Only one prompt or attached subprocess is active at a time
    because every handler awaits its work before returning.
    """

    provider: PipelineProvider
    prompter: Prompter
    terminal: TerminalContext

    async def run(self) -> int:
        """Run the session until the operator quits.

        Returns:
            Exit code for the process (0 on quit)

        Raises:
            ProviderError: If the CI tool fails in any state

        """
        handlers: Mapping[State, Handler] = {
            State.LIST_PIPELINES: self._list_pipelines,
            State.PIPELINE_ACTIONS: self._pipeline_actions,
            State.VIEW_PIPELINE: self._view_pipeline,
            State.SELECT_JOB: self._select_job,
            State.TRIGGER_JOB: self._trigger_job,
        }

        context = NavigationContext(state=State.LIST_PIPELINES)
        while context.state is not State.QUIT:
            log.debug("Entering %s (revision=%s)", context.state, context.revision)
            context = await handlers[context.state](context)

        return 0

    async def _list_pipelines(self, context: NavigationContext) -> NavigationContext:
        pipelines = await self.provider.list_pipelines()
        if not pipelines:
            self.terminal.echo("No pipelines found")
            return context.to(State.QUIT)

        ref_width = ref_column_width(pipelines)
        now = self.terminal.now()
        choices = [
            Choice(
                title=format_pipeline(pipeline, ref_width, now=now),
                value=pipeline.revision,
            )
            for pipeline in pipelines
        ]

        try:
            revision = await self.prompter.select("Select a pipeline", choices)
        except SelectionCancelled:
            return context.to(State.QUIT)

        return context.to(State.PIPELINE_ACTIONS, revision=revision, job_id=None)

    async def _pipeline_actions(self, context: NavigationContext) -> NavigationContext:
        try:
            action = await self.prompter.select("Select an action", ACTION_CHOICES)
        except SelectionCancelled:
            action = Action.BACK

        if action is Action.BACK:
            return context.to(State.LIST_PIPELINES, revision=None, job_id=None)
        return context.to(ACTION_TRANSITIONS[action])

    async def _view_pipeline(self, context: NavigationContext) -> NavigationContext:
        exit_code = await self.provider.view_pipeline(self._revision(context))
        log.debug("Pipeline viewer exited with %s", exit_code)
        return context.to(State.PIPELINE_ACTIONS)

    async def _select_job(self, context: NavigationContext) -> NavigationContext:
        detail = await self.provider.get_pipeline_detail(self._revision(context))
        if not detail.jobs:
            self.terminal.echo("No jobs in this pipeline")
            return context.to(State.PIPELINE_ACTIONS)

        choices: list[Choice[int | None]] = [
            Choice(title=format_job(job), value=job.id) for job in detail.jobs
        ]
        choices.append(Choice(title=back_title(), value=None))

        try:
            job_id = await self.prompter.select("Select a job", choices)
        except SelectionCancelled:
            job_id = None

        if job_id is None:
            return context.to(State.PIPELINE_ACTIONS)
        return context.to(State.TRIGGER_JOB, job_id=job_id)

    async def _trigger_job(self, context: NavigationContext) -> NavigationContext:
        if context.job_id is None:
            raise RuntimeError("No job selected")

        output = await self.provider.trigger_job(context.job_id)
        if output.strip():
            self.terminal.echo(output.rstrip())
        return context.to(State.PIPELINE_ACTIONS, job_id=None)

    @staticmethod
    def _revision(context: NavigationContext) -> str:
        if context.revision is None:
            raise RuntimeError(f"No pipeline selected in state {context.state}")
        return context.revision

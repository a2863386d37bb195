"""Tests for the navigation state machine."""

import io
from datetime import UTC, datetime
from unittest.mock import Mock, call

import pytest
from prompt_toolkit.formatted_text import fragment_list_to_text

from ci_navigator.models.pipeline import Job, PipelineDetail
from ci_navigator.navigator import Action, Navigator
from ci_navigator.providers.base import PipelineProvider, ProviderError
from ci_navigator.terminal import TerminalContext
from ci_navigator.testing.factories import PipelineFactory
from ci_navigator.testing.prompts import CANCEL, ScriptedPrompter

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def pipelines() -> list:
    """Two pipelines with refs of different lengths."""
    return [
        PipelineFactory.build(
            id=101, iid=11, sha="sha-main", ref="main", created_at=NOW
        ),
        PipelineFactory.build(
            id=102,
            iid=12,
            sha="sha-feature",
            ref="feature/very-long-name",
            created_at=NOW,
        ),
    ]


@pytest.fixture
def provider_mock(pipelines: list) -> Mock:
    """Create mock provider."""
    provider = Mock(spec=PipelineProvider)
    provider.list_pipelines.return_value = pipelines
    provider.get_pipeline_detail.return_value = PipelineDetail(
        jobs=[
            Job(id=7, name="build", status="success"),
            Job(id=8, name="deploy", status="manual"),
        ]
    )
    provider.trigger_job.return_value = "Triggered job 7\n"
    provider.view_pipeline.return_value = 0
    return provider


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


def navigator_for(
    provider: Mock, prompter: ScriptedPrompter, output: io.StringIO
) -> Navigator:
    terminal = TerminalContext(rows=20, stdout=output, clock=lambda: NOW)
    return Navigator(provider=provider, prompter=prompter, terminal=terminal)


async def test_back_then_quit_relists_pipelines(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Back returns to a fresh listing; Quit exits with 0."""
    prompter = ScriptedPrompter(
        answers=["sha-main", Action.BACK, "sha-main", Action.QUIT]
    )

    exit_code = await navigator_for(provider_mock, prompter, output).run()

    assert exit_code == 0
    assert provider_mock.list_pipelines.await_count == 2
    provider_mock.get_pipeline_detail.assert_not_awaited()
    provider_mock.trigger_job.assert_not_awaited()
    assert prompter.messages == [
        "Select a pipeline",
        "Select an action",
        "Select a pipeline",
        "Select an action",
    ]


async def test_trigger_job_returns_to_same_pipeline_actions(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Triggers the selected job and comes back to the action menu."""
    prompter = ScriptedPrompter(answers=["sha-main", Action.TRIGGER, 7, Action.QUIT])

    exit_code = await navigator_for(provider_mock, prompter, output).run()

    assert exit_code == 0
    provider_mock.list_pipelines.assert_awaited_once()
    provider_mock.get_pipeline_detail.assert_awaited_once_with("sha-main")
    provider_mock.trigger_job.assert_awaited_once_with(7)
    assert prompter.messages == [
        "Select a pipeline",
        "Select an action",
        "Select a job",
        "Select an action",
    ]
    assert "Triggered job 7" in output.getvalue()


async def test_view_keeps_pipeline_context(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Viewing a pipeline returns to the action menu of that pipeline."""
    prompter = ScriptedPrompter(
        answers=["sha-feature", Action.VIEW, Action.TRIGGER, 8, Action.QUIT]
    )

    await navigator_for(provider_mock, prompter, output).run()

    provider_mock.view_pipeline.assert_awaited_once_with("sha-feature")
    provider_mock.get_pipeline_detail.assert_awaited_once_with("sha-feature")
    provider_mock.list_pipelines.assert_awaited_once()


async def test_view_ignores_viewer_exit_code(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """A viewer exiting non-zero does not end the session."""
    provider_mock.view_pipeline.return_value = 130
    prompter = ScriptedPrompter(
        answers=["sha-main", Action.VIEW, Action.VIEW, Action.QUIT]
    )

    exit_code = await navigator_for(provider_mock, prompter, output).run()

    assert exit_code == 0
    assert provider_mock.view_pipeline.await_args_list == [
        call("sha-main"),
        call("sha-main"),
    ]


async def test_pipeline_choices_keyed_by_revision(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Offers one aligned entry per pipeline with its revision as value."""
    prompter = ScriptedPrompter(answers=[CANCEL])

    await navigator_for(provider_mock, prompter, output).run()

    _, choices = prompter.asked[0]
    assert [choice.value for choice in choices] == ["sha-main", "sha-feature"]
    titles = [fragment_list_to_text(choice.title) for choice in choices]
    assert len({title.rindex("(") for title in titles}) == 1


async def test_job_choices_include_back(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Lists the jobs followed by a back entry."""
    prompter = ScriptedPrompter(
        answers=["sha-main", Action.TRIGGER, None, Action.QUIT]
    )

    await navigator_for(provider_mock, prompter, output).run()

    _, choices = prompter.asked[2]
    assert [choice.value for choice in choices] == [7, 8, None]
    provider_mock.trigger_job.assert_not_awaited()
    assert prompter.messages[-1] == "Select an action"


async def test_cancel_pipeline_listing_quits(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Aborting the pipeline prompt ends the session gracefully."""
    prompter = ScriptedPrompter(answers=[CANCEL])

    exit_code = await navigator_for(provider_mock, prompter, output).run()

    assert exit_code == 0
    provider_mock.list_pipelines.assert_awaited_once()


async def test_cancel_action_menu_goes_back(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Aborting the action prompt behaves like Back."""
    prompter = ScriptedPrompter(answers=["sha-main", CANCEL, CANCEL])

    exit_code = await navigator_for(provider_mock, prompter, output).run()

    assert exit_code == 0
    assert provider_mock.list_pipelines.await_count == 2


async def test_cancel_job_selection_goes_back(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Aborting the job prompt returns to the action menu."""
    prompter = ScriptedPrompter(
        answers=["sha-main", Action.TRIGGER, CANCEL, Action.QUIT]
    )

    await navigator_for(provider_mock, prompter, output).run()

    provider_mock.trigger_job.assert_not_awaited()
    provider_mock.list_pipelines.assert_awaited_once()


async def test_no_pipelines(provider_mock: Mock, output: io.StringIO) -> None:
    """Reports an empty listing and exits."""
    provider_mock.list_pipelines.return_value = []
    prompter = ScriptedPrompter(answers=[])

    exit_code = await navigator_for(provider_mock, prompter, output).run()

    assert exit_code == 0
    assert "No pipelines found" in output.getvalue()
    assert prompter.asked == []


async def test_no_jobs(provider_mock: Mock, output: io.StringIO) -> None:
    """Reports a pipeline without jobs and returns to the action menu."""
    provider_mock.get_pipeline_detail.return_value = PipelineDetail(jobs=[])
    prompter = ScriptedPrompter(answers=["sha-main", Action.TRIGGER, Action.QUIT])

    await navigator_for(provider_mock, prompter, output).run()

    assert "No jobs in this pipeline" in output.getvalue()
    provider_mock.trigger_job.assert_not_awaited()


async def test_detail_refetched_on_each_trigger(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Fetches the pipeline detail again every time a job is picked."""
    prompter = ScriptedPrompter(
        answers=["sha-main", Action.TRIGGER, 7, Action.TRIGGER, 8, Action.QUIT]
    )

    await navigator_for(provider_mock, prompter, output).run()

    assert provider_mock.get_pipeline_detail.await_count == 2
    assert provider_mock.trigger_job.await_args_list == [call(7), call(8)]


async def test_provider_error_propagates(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Ends the session when the CI tool fails."""
    provider_mock.get_pipeline_detail.side_effect = ProviderError(
        ["glab", "ci", "get"], "glab ci get failed"
    )
    prompter = ScriptedPrompter(answers=["sha-main", Action.TRIGGER])

    with pytest.raises(ProviderError, match="glab ci get failed"):
        await navigator_for(provider_mock, prompter, output).run()


async def test_long_session_does_not_grow(
    provider_mock: Mock, output: io.StringIO
) -> None:
    """Loops through many back-and-forth cycles without recursion."""
    cycles = 500
    answers: list = []
    for _ in range(cycles):
        answers.extend(["sha-main", Action.BACK])
    answers.extend(["sha-main", Action.QUIT])
    prompter = ScriptedPrompter(answers=answers)

    exit_code = await navigator_for(provider_mock, prompter, output).run()

    assert exit_code == 0
    assert provider_mock.list_pipelines.await_count == cycles + 1

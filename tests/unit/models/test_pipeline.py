"""Tests for pipeline models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from ci_navigator.models.pipeline import Job, Pipeline, PipelineDetail
from ci_navigator.testing.gitlab import payloads


def test_pipeline_from_glab_payload() -> None:
    """Parses a glab pipeline entry and exposes the navigation vocabulary."""
    pipeline = Pipeline.model_validate(
        payloads.pipeline(pipeline_id=1201, iid=87, ref="main", sha="deadbeef")
    )

    assert pipeline.id == 1201
    assert pipeline.internal_id == 87
    assert pipeline.revision == "deadbeef"
    assert pipeline.ref == "main"
    assert pipeline.created_at == datetime(2099, 1, 1, 12, 0, tzinfo=UTC)


def test_pipeline_accepts_unknown_status() -> None:
    """Statuses outside the styled set still parse."""
    pipeline = Pipeline.model_validate(payloads.pipeline(status="waiting_for_resource"))

    assert pipeline.status == "waiting_for_resource"


def test_pipeline_is_frozen() -> None:
    """Fetched pipelines are immutable snapshots."""
    pipeline = Pipeline.model_validate(payloads.pipeline())

    with pytest.raises(ValidationError):
        pipeline.status = "failed"  # type: ignore[misc]


def test_pipeline_requires_revision() -> None:
    """A pipeline without a SHA cannot be navigated to."""
    payload = payloads.pipeline()
    del payload["sha"]

    with pytest.raises(ValidationError):
        Pipeline.model_validate(payload)


def test_pipeline_detail_jobs_in_order() -> None:
    """Keeps the jobs in the order glab reports them."""
    detail = PipelineDetail.model_validate(
        payloads.pipeline_detail(
            jobs=[
                payloads.job(job_id=1, name="build"),
                payloads.job(job_id=2, name="test", status="failed"),
            ]
        )
    )

    assert detail.jobs == [
        Job(id=1, name="build", status="success", stage="build"),
        Job(id=2, name="test", status="failed", stage="build"),
    ]


def test_pipeline_detail_without_jobs() -> None:
    """Defaults to no jobs when glab omits the key."""
    detail = PipelineDetail.model_validate(payloads.pipeline())

    assert detail.jobs == []

"""Single-line display rendering of pipelines and jobs."""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from prompt_toolkit.formatted_text import FormattedText

from ci_navigator.models.pipeline import Job, Pipeline

STATUS_WIDTH = 9
JOB_NAME_WIDTH = 20

UNKNOWN_STATUS_STYLE = "ansiwhite"
AGE_STYLE = "ansimagenta"
DIM_STYLE = "ansibrightblack"

PIPELINE_STATUS_STYLES: Mapping[str, str] = {
    "running": "ansiblue",
    "success": "ansigreen",
    "failed": "ansired",
    "canceled": "ansibrightblack",
    "pending": "ansiyellow",
    "manual": "ansicyan",
}

JOB_STATUS_STYLES: Mapping[str, str] = {
    "running": "ansiyellow",
    "success": "ansigreen",
    "failed": "ansired",
    "canceled": "ansibrightblack",
    "manual": "ansiblue",
}

MINUTES_IN_HOUR = 60
MINUTES_IN_DAY = 1440
MINUTES_IN_MONTH = 43200


def pipeline_status_style(status: str) -> str:
    """Style for a pipeline status; unknown statuses get the neutral style."""
    return PIPELINE_STATUS_STYLES.get(status, UNKNOWN_STATUS_STYLE)


def job_status_style(status: str) -> str:
    """Style for a job status; unknown statuses get the neutral style."""
    return JOB_STATUS_STYLES.get(status, UNKNOWN_STATUS_STYLE)


def ref_column_width(pipelines: Sequence[Pipeline]) -> int:
    """Width of the ref column: the longest ref of the listing."""
    return max((len(pipeline.ref) for pipeline in pipelines), default=0)


def format_pipeline(
    pipeline: Pipeline, ref_width: int, *, now: datetime
) -> FormattedText:
    """Render a pipeline as one aligned line.

    Example (plain text):
        success   • #1201 (#87) main                    (3 days ago)

    Args:
        pipeline: Pipeline to render
        ref_width: Ref column width of the whole listing (see ref_column_width)
        now: Reference time for the relative age

    """
    return FormattedText(
        [
            (
                pipeline_status_style(pipeline.status),
                f"{pipeline.status.ljust(STATUS_WIDTH)} • #{pipeline.id}",
            ),
            ("", f" (#{pipeline.internal_id}) {pipeline.ref.ljust(ref_width)}  ("),
            (AGE_STYLE, format_age(pipeline.created_at, now)),
            ("", ")"),
        ]
    )


def format_job(job: Job) -> FormattedText:
    """Render a job as its padded name followed by its status in parentheses."""
    return FormattedText(
        [
            ("bold", job.name.ljust(JOB_NAME_WIDTH)),
            ("", "("),
            (job_status_style(job.status), job.status),
            ("", ")"),
        ]
    )


def back_title() -> FormattedText:
    return FormattedText([(DIM_STYLE, "← Back")])


def quit_title() -> FormattedText:
    return FormattedText([(DIM_STYLE, "✕ Quit")])


def format_age(timestamp: datetime, now: datetime) -> str:
    """Distance between timestamp and now in words, e.g. "about 2 hours ago"."""
    seconds = (_as_utc(now) - _as_utc(timestamp)).total_seconds()
    words = distance_in_words(abs(seconds))
    return f"{words} ago" if seconds >= 0 else f"in {words}"


def distance_in_words(seconds: float) -> str:
    """Approximate a duration in words.

    Buckets: under 30s is "less than a minute", up to 44m30s counts minutes,
    then hours ("about"), days, months and years ("about", "over", "almost").
    """
    minutes = _round(seconds / 60)

    if minutes < 2:
        return "less than a minute" if minutes == 0 else "1 minute"
    if minutes < 45:
        return f"{minutes} minutes"
    if minutes < 90:
        return "about 1 hour"
    if minutes < MINUTES_IN_DAY:
        return f"about {_round(minutes / MINUTES_IN_HOUR)} hours"
    if minutes < 2520:
        return "1 day"
    if minutes < MINUTES_IN_MONTH:
        return f"{_round(minutes / MINUTES_IN_DAY)} days"
    if minutes < 2 * MINUTES_IN_MONTH:
        return f"about {_plural(_round(minutes / MINUTES_IN_MONTH), 'month')}"

    months = minutes // MINUTES_IN_MONTH
    if months < 12:
        return f"{_round(minutes / MINUTES_IN_MONTH)} months"

    years, remainder = divmod(months, 12)
    if remainder < 3:
        return f"about {_plural(years, 'year')}"
    if remainder < 9:
        return f"over {_plural(years, 'year')}"
    return f"almost {_plural(years + 1, 'year')}"


def _round(value: float) -> int:
    # half up, 0.5 minutes is a minute
    return int(value + 0.5)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)

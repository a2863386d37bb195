"""Base model for data parsed from CI tool output."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable snapshot of CI tool output.

    Keys the tool emits beyond the declared fields are dropped.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

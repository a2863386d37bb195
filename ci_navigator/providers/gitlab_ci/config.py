"""Configuration for GitLab CI provider."""

from pydantic import BaseModel, PositiveFloat


class GitLabCIConfig(BaseModel):
    """Configuration for GitLab CI provider.

    - executable: glab binary to run (name on PATH or absolute path)
    - repo: OWNER/REPO passed as -R; the current directory's remote otherwise
    - command_timeout: upper bound in seconds for non-interactive commands
    """

    executable: str = "glab"
    repo: str | None = None
    command_timeout: PositiveFloat | None = None

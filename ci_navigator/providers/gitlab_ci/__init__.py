"""GitLab CI provider module (backed by the glab CLI)."""

from ci_navigator.providers.gitlab_ci.config import GitLabCIConfig
from ci_navigator.providers.gitlab_ci.manifest import gitlab_ci_manifest
from ci_navigator.providers.gitlab_ci.provider import GitLabCIProvider

__all__ = ["GitLabCIConfig", "GitLabCIProvider", "gitlab_ci_manifest"]

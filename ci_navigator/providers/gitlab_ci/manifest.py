"""GitLab CI provider manifest."""

from ci_navigator.providers.gitlab_ci.config import GitLabCIConfig
from ci_navigator.providers.gitlab_ci.provider import GitLabCIProvider
from ci_navigator.providers.manifest import ProviderManifest

gitlab_ci_manifest = ProviderManifest(
    config_cls=GitLabCIConfig,
    provider_factory=GitLabCIProvider.from_config,
)

"""Provider plugins registered as entry points."""

import logging
from importlib.metadata import entry_points
from typing import Any

from ci_navigator.providers.manifest import ProviderManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "ci_navigator.providers"
DEFAULT_PROVIDER = "gitlab-ci"


class ProviderNotFoundError(Exception):
    """Raised when no provider is registered under the requested key."""


def available_providers() -> list[str]:
    """Keys of every installed provider, sorted."""
    return sorted(entry.name for entry in entry_points(group=ENTRY_POINT_GROUP))


def load_provider_manifest(key: str) -> ProviderManifest[Any]:
    """Load the manifest registered under a provider key.

    Args:
        key: Entry point name in the ci_navigator.providers group (e.g. "gitlab-ci")

    Raises:
        ProviderNotFoundError: If no provider with the given key is installed

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise ProviderNotFoundError(
            f"Provider '{key}' not found. Available providers: {available_providers()}"
        )

    entry = matches[key]
    log.debug("Loading provider %s from %s", key, entry.value)
    manifest: ProviderManifest[Any] = entry.load()
    return manifest

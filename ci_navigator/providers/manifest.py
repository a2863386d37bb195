"""Provider manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from ci_navigator.providers.base import PipelineProvider


@dataclass(frozen=True, kw_only=True)
class ProviderManifest[ConfigT: BaseModel]:
    """Manifest describing a provider plugin.

    The manifest holds the configuration class and the provider factory so
    providers can be loaded lazily by key.
    """

    config_cls: type[ConfigT]
    provider_factory: Callable[[ConfigT], AbstractAsyncContextManager[PipelineProvider]]

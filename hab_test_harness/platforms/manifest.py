"""Platform manifest definition for the plugin system."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from hab_test_harness.platforms.base import Platform

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class PlatformManifest(Generic[ConfigT]):
    """Manifest describing a platform plugin.

    Besides the configuration class and the factory, a manifest names the
    operating systems it serves, as prefixes of ``sys.platform``. The loader
    uses them to pick a default platform for the running interpreter.
    """

    config_cls: type[ConfigT]
    platform_factory: Callable[[ConfigT], Platform]
    os_prefixes: Sequence[str] = ()

    def supports(self, sys_platform: str) -> bool:
        """Whether this platform serves the given ``sys.platform`` value."""
        return any(sys_platform.startswith(prefix) for prefix in self.os_prefixes)

    def build(self, raw_config: dict[str, object]) -> Platform:
        """Validate raw configuration and create the platform from it.

        Raises:
            pydantic.ValidationError: If the configuration is invalid
            OSError: If the platform cannot create its directories

        """
        return self.platform_factory(self.config_cls.model_validate(raw_config))

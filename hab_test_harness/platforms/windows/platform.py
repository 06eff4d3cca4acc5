"""Windows platform placeholder."""

from typing import NoReturn

from hab_test_harness.platforms.base import UnsupportedPlatformError
from hab_test_harness.platforms.windows.config import WindowsPlatformConfig


class WindowsPlatform:
    """Windows platform, not implemented.

    Construction always fails so a run never proceeds with Linux paths.
    """

    def __init__(self) -> None:
        raise UnsupportedPlatformError("Windows platform not implemented")

    @classmethod
    def from_config(cls, config: WindowsPlatformConfig) -> NoReturn:
        """Raise UnsupportedPlatformError."""
        raise UnsupportedPlatformError("Windows platform not implemented")

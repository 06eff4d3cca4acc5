"""Windows platform module."""

from hab_test_harness.platforms.windows.config import WindowsPlatformConfig
from hab_test_harness.platforms.windows.manifest import windows_manifest
from hab_test_harness.platforms.windows.platform import WindowsPlatform

__all__ = ["WindowsPlatform", "WindowsPlatformConfig", "windows_manifest"]

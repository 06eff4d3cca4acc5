"""Linux platform module."""

from hab_test_harness.platforms.linux.config import LinuxPlatformConfig
from hab_test_harness.platforms.linux.manifest import linux_manifest
from hab_test_harness.platforms.linux.platform import LinuxPlatform

__all__ = ["LinuxPlatform", "LinuxPlatformConfig", "linux_manifest"]

"""Linux platform manifest."""

from hab_test_harness.platforms.linux.config import LinuxPlatformConfig
from hab_test_harness.platforms.linux.platform import LinuxPlatform
from hab_test_harness.platforms.manifest import PlatformManifest

linux_manifest = PlatformManifest(
    config_cls=LinuxPlatformConfig,
    platform_factory=LinuxPlatform.from_config,
    os_prefixes=("linux", "darwin"),
)

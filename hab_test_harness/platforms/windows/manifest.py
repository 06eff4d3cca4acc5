"""Windows platform manifest."""

from hab_test_harness.platforms.manifest import PlatformManifest
from hab_test_harness.platforms.windows.config import WindowsPlatformConfig
from hab_test_harness.platforms.windows.platform import WindowsPlatform

windows_manifest = PlatformManifest(
    config_cls=WindowsPlatformConfig,
    platform_factory=WindowsPlatform.from_config,
    os_prefixes=("win32", "cygwin"),
)

"""Loading of platforms from entry points."""

import sys
from collections.abc import Iterator
from importlib.metadata import entry_points
from typing import Any

from hab_test_harness.platforms.manifest import PlatformManifest

ENTRY_POINT_GROUP = "hab_test_harness.platforms"


class PlatformNotFoundError(Exception):
    """Raised when a platform is not found."""


def iter_platform_manifests() -> Iterator[tuple[str, PlatformManifest[Any]]]:
    """Yield every registered platform key with its manifest, in name order."""
    for entry in sorted(entry_points(group=ENTRY_POINT_GROUP), key=lambda e: e.name):
        yield entry.name, entry.load()


def load_platform_manifest(key: str) -> PlatformManifest[Any]:
    """Load a platform manifest by key.

    Raises:
        PlatformNotFoundError: If no platform with the given key is registered

    """
    entries = entry_points(group=ENTRY_POINT_GROUP, name=key)
    for entry in entries:
        manifest: PlatformManifest[Any] = entry.load()
        return manifest

    available = sorted(e.name for e in entry_points(group=ENTRY_POINT_GROUP))
    raise PlatformNotFoundError(
        f"Platform '{key}' not found. Available platforms: {available}"
    )


def default_platform_key() -> str:
    """Key of the first registered platform serving the running OS.

    Raises:
        PlatformNotFoundError: If no registered platform serves ``sys.platform``

    """
    for key, manifest in iter_platform_manifests():
        if manifest.supports(sys.platform):
            return key
    raise PlatformNotFoundError(f"No platform registered for OS '{sys.platform}'")

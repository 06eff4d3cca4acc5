"""Abstract base class for the environments the harness runs in."""

import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

log = logging.getLogger(__name__)

KEY_CACHE_ENV_VAR = "HAB_CACHE_KEY_PATH"

ENV_VARS: Sequence[str] = (
    "HAB_AUTH_TOKEN",
    "HAB_CACHE_KEY_PATH",
    "HAB_DEPOT_URL",
    "HAB_ORG",
    "HAB_ORIGIN",
    "HAB_ORIGIN_KEYS",
    "HAB_RING",
    "HAB_RING_KEY",
    "HAB_STUDIOS_HOME",
    "HAB_STUDIO_ROOT",
    "HAB_USER",
)


class UnsupportedPlatformError(Exception):
    """Raised when constructing a platform the harness cannot run on."""


@dataclass(frozen=True, kw_only=True)
class Platform(ABC):
    """Environment-specific paths and identities for one harness run.

    Every value is fixed at construction. The platform owns the key cache and
    studio root directories plus any scratch directory made by mk_temp_dir.
    """

    hab_bin: Path
    hab_sup_bin: Path
    hab_pkg_path: Path

    hab_org: str
    hab_origin: str
    hab_ring: str
    hab_service_group: str
    hab_user: str

    hab_key_cache: Path
    hab_studio_root: Path

    log_dir: Path
    log_name: str

    # Scratch dirs created after construction; not part of the value
    _temp_dirs: list[Path] = field(default_factory=list, repr=False, compare=False)

    @abstractmethod
    def mk_temp_dir(self) -> Path:
        """Create a fresh scratch directory owned by this platform."""

    def log_file_path(self) -> Path:
        """Path of the file every command appends its output to."""
        return self.log_dir / self.log_name

    def env_vars(self) -> Sequence[str]:
        """Variables expected to be unset before a run starts."""
        return ENV_VARS

    def binaries(self) -> Mapping[str, Path]:
        """Executables that must be built before the suite can run."""
        return {"hab": self.hab_bin, "hab-sup": self.hab_sup_bin}

    def package_path(self, ident: str) -> Path:
        """Installation path of a package ident such as ``core/bc``."""
        return self.hab_pkg_path.joinpath(*ident.split("/"))

    def child_env(self) -> Mapping[str, str]:
        """Variables set in the environment of every spawned command."""
        return {KEY_CACHE_ENV_VAR: str(self.hab_key_cache)}

    def describe(self) -> Mapping[str, str]:
        """Test parameters, sorted by name, for the run banner."""
        params = {
            "hab_bin": str(self.hab_bin),
            "hab_key_cache": str(self.hab_key_cache),
            "hab_org": self.hab_org,
            "hab_origin": self.hab_origin,
            "hab_pkg_path": str(self.hab_pkg_path),
            "hab_ring": self.hab_ring,
            "hab_service_group": self.hab_service_group,
            "hab_studio_root": str(self.hab_studio_root),
            "hab_sup_bin": str(self.hab_sup_bin),
            "hab_user": self.hab_user,
            "log_dir": str(self.log_dir),
            "log_name": self.log_name,
        }
        return dict(sorted(params.items()))

    def owned_dirs(self) -> Sequence[Path]:
        """Directories created by this platform, in creation order."""
        return [self.hab_key_cache, self.hab_studio_root, *self._temp_dirs]

    def remove_temp_dirs(self) -> Sequence[Path]:
        """Remove every owned directory and return the ones that could not be.

        Removal is best-effort: a failure is logged and the remaining
        directories are still attempted.
        """
        failed: list[Path] = []
        for path in self.owned_dirs():
            try:
                shutil.rmtree(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                log.warning("Could not remove temporary directory %s: %s", path, exc)
                failed.append(path)
            else:
                log.debug("Removed temporary directory %s", path)
        return failed

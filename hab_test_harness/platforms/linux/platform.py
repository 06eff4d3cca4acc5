"""Linux platform implementation."""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from hab_test_harness.identity import scoped_name
from hab_test_harness.platforms.base import Platform
from hab_test_harness.platforms.linux.config import LinuxPlatformConfig

log = logging.getLogger(__name__)


def log_name_for(timestamp: datetime) -> str:
    """Log file name for a run started at the given time.

    Colons are replaced since they are not valid in Windows file names.
    """
    iso = timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return f"hab_test-{iso.replace(':', '-')}.log"


@dataclass(frozen=True, kw_only=True)
class LinuxPlatform(Platform):
    """Linux platform running binaries from a source checkout."""

    temp_prefix: str = "hab_test"
    temp_root: Path | None = None

    @classmethod
    def from_config(
        cls, config: LinuxPlatformConfig, now: datetime | None = None
    ) -> "LinuxPlatform":
        """Create the platform, its identities and its temporary directories.

        Raises:
            OSError: If a temporary directory cannot be created

        """
        key_cache = Path(
            tempfile.mkdtemp(prefix=config.temp_prefix, dir=config.temp_root)
        )
        try:
            studio_root = Path(
                tempfile.mkdtemp(
                    prefix=f"{config.temp_prefix}_studio", dir=config.temp_root
                )
            )
        except OSError:
            shutil.rmtree(key_cache, ignore_errors=True)
            raise

        return cls(
            hab_bin=config.hab_bin,
            hab_sup_bin=config.hab_sup_bin,
            hab_pkg_path=config.hab_pkg_path,
            hab_org=scoped_name("org"),
            hab_origin=scoped_name("origin"),
            hab_ring=scoped_name("ring"),
            hab_service_group=scoped_name("service_group"),
            hab_user=scoped_name("user"),
            hab_key_cache=key_cache,
            hab_studio_root=studio_root,
            log_dir=config.log_dir,
            log_name=log_name_for(now or datetime.now(timezone.utc)),
            temp_prefix=config.temp_prefix,
            temp_root=config.temp_root,
        )

    def mk_temp_dir(self) -> Path:
        """Create a scratch directory that is removed with the other temp dirs."""
        path = Path(tempfile.mkdtemp(prefix=self.temp_prefix, dir=self.temp_root))
        self._temp_dirs.append(path)
        log.info("Temp dir = %s", path)
        return path

"""Configuration for the Linux platform."""

from pathlib import Path

from pydantic import BaseModel


class LinuxPlatformConfig(BaseModel):
    """Configuration for the Linux platform.

    Defaults match a source checkout built in debug mode under /src.
    """

    hab_bin: Path = Path("/src/components/hab/target/debug/hab")
    hab_sup_bin: Path = Path("/src/components/sup/target/debug/hab-sup")
    hab_pkg_path: Path = Path("/hab/pkgs")
    log_dir: Path = Path(".")
    temp_prefix: str = "hab_test"
    # Parent of the temporary directories; None uses the system default
    temp_root: Path | None = None

"""Suite configuration shared by every platform."""

from pathlib import Path
from typing import Literal

from pydantic import Field

from hab_test_harness.models.base import Model


class SuiteConfig(Model):
    """Settings for the setup, scenario and teardown phases of a run."""

    package: str = Field(
        default="core/bc", description="Package ident installed by the install scenario"
    )
    fixture_dir: Path = Field(
        default=Path("/src/test/fixtures/simple-service"),
        description="Plan tree copied into a scratch directory and built",
    )
    depot_url: str | None = Field(
        default=None,
        description="Depot API base URL checked before install (None skips the check)",
    )
    depot_timeout: float = Field(
        default=10.0, gt=0, description="Depot status check timeout in seconds"
    )
    command_timeout: float | None = Field(
        default=None, gt=0, description="Default command timeout (None waits forever)"
    )
    studio_timeout: float | None = Field(
        default=None, gt=0, description="Timeout for creating the studio"
    )
    build_timeout: float | None = Field(
        default=None, gt=0, description="Timeout for building the fixture package"
    )
    temp_dir_retention: Literal["always", "on-failure", "never"] = Field(
        default="on-failure",
        description="When to keep the temporary directories after the run",
    )
    remove_studio_on_success: bool = Field(
        default=False, description="Remove the origin studio when every scenario passed"
    )
    require_clean_env: bool = Field(
        default=False, description="Abort when any HAB_* variable is already set"
    )

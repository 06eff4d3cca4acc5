"""Shared fixtures: a Linux platform rooted in tmp_path and a fake hab binary."""

from collections.abc import Generator
from pathlib import Path

import pytest
from aioresponses import aioresponses as aioresponses_cls

from hab_test_harness.executor import CommandExecutor
from hab_test_harness.platforms.linux import LinuxPlatform, LinuxPlatformConfig
from hab_test_harness.testing.fake_hab import FakeHab, make_executable


@pytest.fixture
def platform_config(tmp_path: Path) -> LinuxPlatformConfig:
    """Platform configuration with every path under tmp_path."""
    (tmp_path / "logs").mkdir()
    (tmp_path / "tmp").mkdir()
    return LinuxPlatformConfig(
        hab_bin=tmp_path / "bin" / "hab",
        hab_sup_bin=tmp_path / "bin" / "hab-sup",
        hab_pkg_path=tmp_path / "pkgs",
        log_dir=tmp_path / "logs",
        temp_root=tmp_path / "tmp",
    )


@pytest.fixture
def linux_platform(platform_config: LinuxPlatformConfig) -> LinuxPlatform:
    """Linux platform built from the tmp_path configuration."""
    return LinuxPlatform.from_config(platform_config)


@pytest.fixture
def executor(linux_platform: LinuxPlatform) -> CommandExecutor:
    """Executor bound to the tmp_path platform."""
    return CommandExecutor(platform=linux_platform)


@pytest.fixture
def fake_hab(platform_config: LinuxPlatformConfig) -> FakeHab:
    """Install a fake hab and an executable hab-sup at the configured paths."""
    make_executable(platform_config.hab_sup_bin, "#!/bin/sh\nexit 0\n")
    return FakeHab.install(platform_config.hab_bin, platform_config.hab_pkg_path)


@pytest.fixture
def fixture_plan(tmp_path: Path) -> Path:
    """A minimal plan tree standing in for the simple-service fixture."""
    plan = tmp_path / "fixtures" / "simple-service"
    (plan / "hooks").mkdir(parents=True)
    (plan / "plan.sh").write_text("pkg_name=simple-service\npkg_origin=core\n")
    (plan / "hooks" / "run").write_text("#!/bin/sh\nexec sleep 1\n")
    return plan


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Intercept aiohttp requests."""
    with aioresponses_cls() as mocked:
        yield mocked

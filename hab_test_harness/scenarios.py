"""Scenarios exercising the hab CLI and the runner that executes them."""

import logging
import os
import shutil
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from hab_test_harness.depot import DepotUnavailableError, check_depot_status
from hab_test_harness.executor import CommandExecutor, CommandTimeoutError
from hab_test_harness.models.config import SuiteConfig
from hab_test_harness.models.result import ScenarioResult, ScenarioStatus
from hab_test_harness.platforms.base import Platform

log = logging.getLogger(__name__)


class ScenarioAssertionError(AssertionError):
    """Raised when a scenario postcondition does not hold."""


class FixtureError(Exception):
    """Raised when a scenario cannot stage its fixture files."""


@dataclass(frozen=True, kw_only=True)
class Scenario(ABC):
    """A named check run against the shared platform after setup."""

    name: str

    @abstractmethod
    async def run(self, platform: Platform, executor: CommandExecutor) -> None:
        """Run the scenario.

        Raises:
            ScenarioAssertionError: If the postcondition does not hold

        """


@dataclass(frozen=True, kw_only=True)
class BinaryPresenceScenario(Scenario):
    """Checks that a compiled binary exists and is executable."""

    binary: str

    async def run(self, platform: Platform, executor: CommandExecutor) -> None:
        """Check the binary registered under ``binary``."""
        path = platform.binaries()[self.binary]
        if not path.exists():
            raise ScenarioAssertionError(f"expected {path} to exist, it does not")
        if not path.is_file() or not os.access(path, os.X_OK):
            raise ScenarioAssertionError(f"expected {path} to be executable, it is not")


@dataclass(frozen=True, kw_only=True)
class PackageInstallScenario(Scenario):
    """Installs a package and checks it lands under the package root."""

    package: str
    depot_url: str | None = None
    depot_timeout: float = 10.0
    timeout: float | None = None

    async def run(self, platform: Platform, executor: CommandExecutor) -> None:
        """Install ``package`` and check its installation path."""
        pkg_path = platform.package_path(self.package)
        if pkg_path.exists():
            raise ScenarioAssertionError(
                f"expected {pkg_path} to not exist before install, it does"
            )

        if self.depot_url is not None and not await check_depot_status(
            self.depot_url, self.depot_timeout
        ):
            raise DepotUnavailableError(f"Depot at {self.depot_url} is not available")

        result = await executor.hab(
            "pkg", "install", self.package, timeout=self.timeout
        )
        if result.exit_code != 0:
            raise ScenarioAssertionError(
                f"expected exit code 0, got {result.exit_code}"
            )

        if not pkg_path.exists():
            raise ScenarioAssertionError(
                f"expected {pkg_path} to exist after install, it does not"
            )


@dataclass(frozen=True, kw_only=True)
class PackageBuildScenario(Scenario):
    """Copies a plan fixture into a scratch directory and builds it in the studio."""

    fixture_dir: Path
    timeout: float | None = None

    async def run(self, platform: Platform, executor: CommandExecutor) -> None:
        """Build the fixture plan."""
        plan_dir = platform.mk_temp_dir()
        stage_fixture(self.fixture_dir, plan_dir)

        result = await executor.hab(
            "studio", "build", str(plan_dir), timeout=self.timeout
        )
        if result is None:
            raise ScenarioAssertionError("expected a build result, got None")
        if not result.success:
            raise ScenarioAssertionError(
                f"expected build to succeed, it exited with {result.exit_code}"
            )


def stage_fixture(fixture_dir: Path, target: Path) -> None:
    """Copy the contents of a fixture tree into an existing directory.

    Raises:
        FixtureError: If the fixture is missing or cannot be copied

    """
    if not fixture_dir.is_dir():
        raise FixtureError(f"Fixture directory {fixture_dir} is missing")
    try:
        shutil.copytree(fixture_dir, target, dirs_exist_ok=True)
    except (OSError, shutil.Error) as exc:
        raise FixtureError(f"Failed to copy {fixture_dir} to {target}: {exc}") from exc
    log.info("Staged fixture %s into %s", fixture_dir, target)


def default_scenarios(config: SuiteConfig) -> Sequence[Scenario]:
    """Scenarios of the hab CLI suite, in execution order."""
    return [
        BinaryPresenceScenario(name="hab command should be compiled", binary="hab"),
        BinaryPresenceScenario(
            name="hab-sup command should be compiled", binary="hab-sup"
        ),
        PackageInstallScenario(
            name="install a core package",
            package=config.package,
            depot_url=config.depot_url,
            depot_timeout=config.depot_timeout,
            timeout=config.command_timeout,
        ),
        PackageBuildScenario(
            name="build a package",
            fixture_dir=config.fixture_dir,
            timeout=config.build_timeout,
        ),
    ]


@dataclass(frozen=True, kw_only=True)
class ScenarioRunner:
    """Runs scenarios in declared order and records their outcomes."""

    platform: Platform
    executor: CommandExecutor

    async def run_all(self, scenarios: Sequence[Scenario]) -> Sequence[ScenarioResult]:
        """Run every scenario, one after the other.

        A scenario's failure never stops the following ones.
        """
        results: list[ScenarioResult] = []
        for scenario in scenarios:
            result = await self.run_one(scenario)
            log.info(
                "Scenario completed: name=%s status=%s duration=%.1fs",
                result.name,
                result.status,
                result.duration,
            )
            results.append(result)
        return results

    async def run_one(self, scenario: Scenario) -> ScenarioResult:
        """Run a single scenario, mapping its outcome to a result status."""
        log.info("Running scenario: %s", scenario.name)
        start = time.monotonic()

        try:
            await scenario.run(self.platform, self.executor)
        except AssertionError as exc:
            return self._result(scenario, "failure", start, str(exc))
        except CommandTimeoutError as exc:
            return self._result(scenario, "timeout", start, str(exc))
        except (FixtureError, DepotUnavailableError) as exc:
            return self._result(scenario, "error", start, str(exc))
        except Exception as exc:
            log.error("Scenario %s raised: %s", scenario.name, exc, exc_info=exc)
            message = f"{type(exc).__name__}: {exc}"
            return self._result(scenario, "error", start, message)

        return self._result(scenario, "success", start)

    def _result(
        self,
        scenario: Scenario,
        status: ScenarioStatus,
        start: float,
        message: str | None = None,
    ) -> ScenarioResult:
        return ScenarioResult(
            name=scenario.name,
            status=status,
            duration=time.monotonic() - start,
            message=message,
        )

"""Suite lifecycle: setup, scenario execution and teardown on one platform."""

import logging
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from hab_test_harness.executor import CommandExecutor
from hab_test_harness.models.config import SuiteConfig
from hab_test_harness.models.result import StepResult, SuiteResult
from hab_test_harness.platforms.base import Platform
from hab_test_harness.scenarios import Scenario, ScenarioRunner

log = logging.getLogger(__name__)

TeardownHook: TypeAlias = Callable[[], Awaitable[None]]


class EnvironmentNotCleanError(Exception):
    """Raised when hab variables are set before a run that requires a clean env."""


@dataclass(frozen=True, kw_only=True)
class SetupStep:
    """A hab invocation run once before the scenarios."""

    name: str
    args: Sequence[str]
    timeout: float | None = None
    # Non-zero exit is an expected outcome, e.g. removing a studio that does not exist
    may_fail: bool = False
    notice: str | None = None


@dataclass(frozen=True, kw_only=True)
class HarnessOrchestrator:
    """Runs setup, the scenarios and teardown, strictly in that order."""

    platform: Platform
    executor: CommandExecutor
    scenarios: Sequence[Scenario]
    config: SuiteConfig = field(default_factory=SuiteConfig)
    teardown_hooks: Sequence[TeardownHook] = ()

    async def run(self) -> SuiteResult:
        """Run the whole suite.

        Teardown runs exactly once, after the scenarios, whatever their outcome,
        including when the environment check aborts the run.

        Raises:
            EnvironmentNotCleanError: If require_clean_env is set and hab
                variables are present; no command has been run at that point

        """
        suite_result = SuiteResult(setup=[], scenarios=[])
        completed = False
        try:
            self.check_environment()
            setup_results = await self.setup()
            runner = ScenarioRunner(platform=self.platform, executor=self.executor)
            suite_result = SuiteResult(
                setup=setup_results, scenarios=await runner.run_all(self.scenarios)
            )
            completed = True
        finally:
            await self.teardown(passed=completed and suite_result.passed)

        return suite_result

    def check_environment(self) -> Sequence[str]:
        """Report hab variables already set in this process's environment."""
        present = [name for name in self.platform.env_vars() if name in os.environ]
        if present and self.config.require_clean_env:
            raise EnvironmentNotCleanError(
                f"{', '.join(present)} currently set, please clear and try again"
            )
        for name in present:
            log.warning("%s is set in the environment and may affect the run", name)
        return present

    def setup_steps(self) -> Sequence[SetupStep]:
        """Setup commands in execution order."""
        origin = self.platform.hab_origin
        return [
            SetupStep(
                name="generate origin key", args=["origin", "key", "generate", origin]
            ),
            SetupStep(
                name="generate user key",
                args=["user", "key", "generate", self.platform.hab_user],
            ),
            SetupStep(
                name="generate ring key",
                args=["ring", "key", "generate", self.platform.hab_ring],
            ),
            SetupStep(
                name="remove existing studio",
                args=["studio", "rm", origin],
                may_fail=True,
            ),
            SetupStep(
                name="create studio",
                args=["studio", "-k", origin, "new"],
                timeout=self.config.studio_timeout,
                notice="Creating new studio, this may take a few minutes",
            ),
        ]

    async def setup(self) -> Sequence[StepResult]:
        """Generate keys and create a fresh studio for the origin.

        Step failures are recorded and logged but never stop the run: the
        scenarios that depend on them report the failure.
        """
        results: list[StepResult] = []
        for step in self.setup_steps():
            if step.notice:
                log.info("%s", step.notice)
            result = await self._run_step(step)
            if result.status == "failure" and step.may_fail:
                log.info("Setup step '%s' exited with %s", step.name, result.exit_code)
            elif result.status != "success":
                log.warning(
                    "Setup step '%s' did not succeed: %s", step.name, result.message
                )
            results.append(result)
        return results

    async def _run_step(self, step: SetupStep) -> StepResult:
        timeout = step.timeout
        if timeout is None:
            timeout = self.config.command_timeout
        try:
            result = await self.executor.hab(*step.args, timeout=timeout)
        except (OSError, TimeoutError) as exc:
            return StepResult(name=step.name, status="error", message=str(exc))

        if not result.success:
            return StepResult(
                name=step.name,
                status="failure",
                exit_code=result.exit_code,
                message=f"exit code {result.exit_code}",
            )
        return StepResult(name=step.name, status="success", exit_code=0)

    async def teardown(self, *, passed: bool) -> None:
        """Clean up after the scenarios.

        Every action is attempted; failures are logged as warnings and never
        change the suite result.
        """
        log.info("Clearing test environment")

        if passed and self.config.remove_studio_on_success:
            try:
                result = await self.executor.hab(
                    "studio", "rm", self.platform.hab_origin
                )
            except (OSError, TimeoutError) as exc:
                log.warning("Failed to remove studio: %s", exc)
            else:
                if not result.success:
                    log.warning("Studio removal exited with %d", result.exit_code)

        retention = self.config.temp_dir_retention
        if retention == "never" or (retention == "on-failure" and passed):
            for path in self.platform.remove_temp_dirs():
                log.warning("Temporary directory left behind: %s", path)
        else:
            log.info(
                "Keeping temporary directories: %s",
                ", ".join(str(p) for p in self.platform.owned_dirs()),
            )

        for hook in self.teardown_hooks:
            try:
                await hook()
            except Exception as exc:
                log.warning("Teardown hook %r failed: %s", hook, exc, exc_info=exc)

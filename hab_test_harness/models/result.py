"""Models for command, setup step and scenario results."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

ScenarioStatus: TypeAlias = Literal["success", "failure", "timeout", "error"]


@dataclass(frozen=True, kw_only=True)
class CommandResult:
    """Outcome of one external command invocation.

    A non-zero exit code is data, not an error: the caller decides what it means.
    """

    args: Sequence[str]
    exit_code: int
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """Whether the command exited with status zero."""
        return self.exit_code == 0


@dataclass(frozen=True, kw_only=True)
class StepResult:
    """Outcome of a setup or teardown step."""

    name: str
    status: Literal["success", "failure", "error"]
    exit_code: int | None = None
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class ScenarioResult:
    """Result of a single scenario execution."""

    name: str
    status: ScenarioStatus
    duration: float
    message: str | None = None

    @property
    def passed(self) -> bool:
        """Whether the scenario postcondition held."""
        return self.status == "success"


@dataclass(frozen=True, kw_only=True)
class SuiteResult:
    """Aggregate of a full harness run."""

    setup: Sequence[StepResult]
    scenarios: Sequence[ScenarioResult]

    @property
    def passed(self) -> bool:
        """Whether every scenario passed. Setup outcomes do not count."""
        return all(result.passed for result in self.scenarios)

"""Tests for CLI module."""

import json
import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from hab_test_harness.cli import (
    format_output,
    log_results_summary,
    log_test_params,
    main,
    run,
)
from hab_test_harness.models.result import ScenarioResult, StepResult, SuiteResult
from hab_test_harness.platforms.base import UnsupportedPlatformError
from hab_test_harness.platforms.linux import LinuxPlatform, LinuxPlatformConfig
from hab_test_harness.platforms.linux.manifest import linux_manifest
from hab_test_harness.testing.factories import (
    ScenarioResultFactory,
    StepResultFactory,
)


def test_log_test_params(
    linux_platform: LinuxPlatform, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs every platform parameter and the log file location."""
    with caplog.at_level(logging.INFO):
        log_test_params(logging.getLogger(), linux_platform)

    assert "Test params:" in caplog.text
    assert f"hab_origin = {linux_platform.hab_origin}" in caplog.text
    assert f"Logging command output to {linux_platform.log_file_path()}" in caplog.text


def test_log_results_summary_success(caplog: pytest.LogCaptureFixture) -> None:
    """Logs success results with checkmark symbol."""
    results = [
        ScenarioResult(name="install a core package", status="success", duration=10.5)
    ]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), [], results)

    assert "Test Results Summary:" in caplog.text
    assert "✓ install a core package: success (10.50s)" in caplog.text


def test_log_results_summary_failure(caplog: pytest.LogCaptureFixture) -> None:
    """Logs failure results with X symbol and the assertion message."""
    results = [
        ScenarioResult(
            name="install a core package",
            status="failure",
            duration=5.0,
            message="expected exit code 0, got 1",
        )
    ]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), [], results)

    assert "✗ install a core package: failure (5.00s)" in caplog.text
    assert "Message: expected exit code 0, got 1" in caplog.text


def test_log_results_summary_error_and_timeout(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Logs errors and timeouts with their own symbols."""
    results = [
        ScenarioResult(name="build a package", status="timeout", duration=600.0),
        ScenarioResult(name="fixture", status="error", duration=0.0, message="missing"),
    ]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), [], results)

    assert "⏱ build a package: timeout (600.00s)" in caplog.text
    assert "! fixture: error (0.00s)" in caplog.text


def test_log_results_summary_lists_failed_setup(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Mentions setup steps that did not succeed, and only those."""
    setup = [
        StepResult(name="generate origin key", status="success", exit_code=0),
        StepResult(
            name="create studio", status="failure", exit_code=1, message="exit code 1"
        ),
    ]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), setup, [])

    assert "setup create studio: failure (exit code 1)" in caplog.text
    assert "generate origin key" not in caplog.text


def test_format_output_empty() -> None:
    """Returns empty totals when no results."""
    output = format_output(SuiteResult(setup=[], scenarios=[]), Path("run.log"))

    assert output == {
        "total": 0,
        "passed": 0,
        "failed": 0,
        "errors": 0,
        "timeouts": 0,
        "log_file": "run.log",
        "setup": [],
        "results": [],
    }


def test_format_output_mixed_results() -> None:
    """Formats mixed results with correct totals."""
    suite = SuiteResult(
        setup=[StepResultFactory.build(name="generate user key")],
        scenarios=[
            ScenarioResultFactory.build(status="success"),
            ScenarioResultFactory.build(status="success"),
            ScenarioResultFactory.build(status="failure"),
            ScenarioResultFactory.build(status="error", message="fixture missing"),
            ScenarioResultFactory.build(status="timeout"),
        ],
    )

    output = format_output(suite, Path("/logs/hab_test.log"))

    assert output["total"] == 5
    assert output["passed"] == 2
    assert output["failed"] == 1
    assert output["errors"] == 1
    assert output["timeouts"] == 1
    assert output["log_file"] == "/logs/hab_test.log"
    assert output["setup"] == [
        {"step": "generate user key", "status": "success", "exit_code": 0, "message": None}
    ]
    assert output["results"][3]["message"] == "fixture missing"


class TestRun:
    """Tests for the async run function."""

    @pytest.fixture
    def orchestrator_cls(self) -> Generator[Mock, None, None]:
        """Patch the orchestrator so no command is executed."""
        with patch("hab_test_harness.cli.HarnessOrchestrator") as orchestrator_cls:
            yield orchestrator_cls

    async def test_returns_zero_when_all_pass(
        self,
        orchestrator_cls: Mock,
        platform_config: LinuxPlatformConfig,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Prints the JSON summary and returns 0."""
        orchestrator_cls.return_value.run = AsyncMock(
            return_value=SuiteResult(
                setup=[], scenarios=[ScenarioResultFactory.build(status="success")]
            )
        )

        exit_code = await run(
            "linux", platform_config.model_dump_json(), '{"package": "core/redis"}'
        )

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["passed"] == 1
        kwargs = orchestrator_cls.call_args.kwargs
        assert kwargs["config"].package == "core/redis"
        assert isinstance(kwargs["platform"], LinuxPlatform)
        assert kwargs["executor"].platform is kwargs["platform"]

    async def test_returns_one_on_failure(
        self, orchestrator_cls: Mock, platform_config: LinuxPlatformConfig
    ) -> None:
        """Any unsuccessful scenario makes the run fail."""
        orchestrator_cls.return_value.run = AsyncMock(
            return_value=SuiteResult(
                setup=[],
                scenarios=[
                    ScenarioResultFactory.build(status="success"),
                    ScenarioResultFactory.build(status="timeout"),
                ],
            )
        )

        exit_code = await run("linux", platform_config.model_dump_json(), "{}")

        assert exit_code == 1

    async def test_unsupported_platform_raises_before_running(
        self, orchestrator_cls: Mock
    ) -> None:
        """The Windows platform fails fast."""
        with pytest.raises(UnsupportedPlatformError):
            await run("windows", "{}", "{}")

        orchestrator_cls.assert_not_called()


class TestMain:
    """Tests for the console entry point."""

    def test_exits_with_run_result(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Passes the arguments through and exits with the run's code."""
        monkeypatch.setattr(
            "sys.argv",
            [
                "hab-test-harness",
                "--platform",
                "linux",
                "--platform-config",
                '{"log_dir": "/tmp"}',
                "--suite-config",
                '{"build_timeout": 900}',
            ],
        )
        run_mock = AsyncMock(return_value=1)

        with patch("hab_test_harness.cli.run", run_mock), pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 1
        run_mock.assert_awaited_once_with(
            platform_key="linux",
            platform_config_json='{"log_dir": "/tmp"}',
            suite_config_json='{"build_timeout": 900}',
        )

    def test_unsupported_platform_exits_with_two(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Platforms that cannot run exit with a distinct code."""
        monkeypatch.setattr("sys.argv", ["hab-test-harness", "--platform", "windows"])

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 2

    def test_unknown_platform_exits_with_two(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Unknown platform keys exit with a distinct code."""
        monkeypatch.setattr("sys.argv", ["hab-test-harness", "--platform", "solaris"])

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 2

    @pytest.mark.parametrize(
        ("option", "value"),
        [
            ("--suite-config", "{not json"),
            ("--suite-config", '{"temp_dir_retention": "sometimes"}'),
            ("--platform-config", '{"hab_bin": ["not", "a", "path"]}'),
        ],
    )
    def test_invalid_configuration_exits_with_two(
        self,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
        option: str,
        value: str,
    ) -> None:
        """Malformed or invalid JSON configuration is reported without a traceback."""
        monkeypatch.setattr(
            "sys.argv", ["hab-test-harness", "--platform", "linux", option, value]
        )

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 2
        assert "Invalid configuration" in caplog.text

    def test_temp_dir_failure_exits_with_two(
        self,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
        tmp_path: Path,
    ) -> None:
        """A temporary directory that cannot be created is reported cleanly."""
        platform_config = json.dumps({"temp_root": str(tmp_path / "missing")})
        monkeypatch.setattr(
            "sys.argv",
            [
                "hab-test-harness",
                "--platform",
                "linux",
                "--platform-config",
                platform_config,
            ],
        )

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 2
        assert "Could not prepare the test environment" in caplog.text

    def test_platform_defaults_to_current_os(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The platform is resolved at run time when not given."""
        monkeypatch.setattr("sys.argv", ["hab-test-harness"])
        run_mock = AsyncMock(return_value=0)

        with patch("hab_test_harness.cli.run", run_mock), pytest.raises(SystemExit):
            main()

        assert run_mock.await_args.kwargs["platform_key"] is None


def test_linux_manifest_builds_platform(platform_config: LinuxPlatformConfig) -> None:
    """The registered manifest validates raw JSON config and builds the platform."""
    platform = linux_manifest.build(json.loads(platform_config.model_dump_json()))

    assert isinstance(platform, LinuxPlatform)

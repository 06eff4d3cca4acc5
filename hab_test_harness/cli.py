"""CLI entry point for the hab CLI test harness."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from hab_test_harness.executor import CommandExecutor
from hab_test_harness.models.config import SuiteConfig
from hab_test_harness.models.result import ScenarioResult, StepResult, SuiteResult
from hab_test_harness.orchestrator import EnvironmentNotCleanError, HarnessOrchestrator
from hab_test_harness.platforms.base import Platform, UnsupportedPlatformError
from hab_test_harness.platforms.loading import (
    PlatformNotFoundError,
    default_platform_key,
    load_platform_manifest,
)
from hab_test_harness.scenarios import default_scenarios

STATUS_SYMBOLS = {
    "success": "✓",
    "failure": "✗",
    "error": "!",
    "timeout": "⏱",
}

EXIT_UNUSABLE_ENVIRONMENT = 2


def log_test_params(log: logging.Logger, platform: Platform) -> None:
    """Log the parameters of the run before anything is executed."""
    log.info("-" * 51)
    log.info("Test params:")
    for name, value in platform.describe().items():
        log.info("%s = %s", name, value)
    log.info("Logging command output to %s", platform.log_file_path())
    log.info("-" * 51)


def log_results_summary(
    log: logging.Logger,
    setup_results: Sequence[StepResult],
    scenario_results: Sequence[ScenarioResult],
) -> None:
    """Log a formatted summary of setup steps and scenario results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for step in setup_results:
        if step.status != "success":
            log.info("  setup %s: %s (%s)", step.name, step.status, step.message)

    for result in scenario_results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s: %s (%.2fs)", symbol, result.name, result.status, result.duration
        )
        if result.message:
            log.info("  Message: %s", result.message)


def format_output(suite_result: SuiteResult, log_file: Path) -> dict[str, Any]:
    """Format suite results for JSON output."""
    results = [
        {
            "scenario": result.name,
            "status": result.status,
            "duration": result.duration,
            "message": result.message,
        }
        for result in suite_result.scenarios
    ]
    setup = [
        {
            "step": step.name,
            "status": step.status,
            "exit_code": step.exit_code,
            "message": step.message,
        }
        for step in suite_result.setup
    ]

    return {
        "total": len(results),
        "passed": sum(1 for r in results if r["status"] == "success"),
        "failed": sum(1 for r in results if r["status"] == "failure"),
        "errors": sum(1 for r in results if r["status"] == "error"),
        "timeouts": sum(1 for r in results if r["status"] == "timeout"),
        "log_file": str(log_file),
        "setup": setup,
        "results": results,
    }


async def run(
    platform_key: str | None,
    platform_config_json: str,
    suite_config_json: str,
) -> int:
    """Run the suite and return exit code."""
    log = logging.getLogger("hab_test_harness")

    platform_key = platform_key or default_platform_key()
    log.info("Loading platform: %s", platform_key)
    manifest = load_platform_manifest(platform_key)

    # Validated before the platform creates its temporary directories
    suite_config = SuiteConfig.model_validate(json.loads(suite_config_json))
    platform = manifest.build(json.loads(platform_config_json))
    log_test_params(log, platform)

    orchestrator = HarnessOrchestrator(
        platform=platform,
        executor=CommandExecutor(
            platform=platform, timeout=suite_config.command_timeout
        ),
        scenarios=default_scenarios(suite_config),
        config=suite_config,
    )
    suite_result = await orchestrator.run()

    log_results_summary(log, suite_result.setup, suite_result.scenarios)

    output = format_output(suite_result, platform.log_file_path())
    print(json.dumps(output, indent=2))

    return 0 if suite_result.passed else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run end-to-end tests against the hab CLI"
    )
    parser.add_argument(
        "--platform",
        default=None,
        help="Platform key (linux, windows); defaults to the current OS",
    )
    parser.add_argument(
        "--platform-config",
        default="{}",
        help="JSON configuration for the platform (binary paths, log dir, ...)",
    )
    parser.add_argument(
        "--suite-config",
        default="{}",
        help="JSON configuration for the suite (package, fixture dir, timeouts, ...)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Level of the progress output written to stderr",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = asyncio.run(
            run(
                platform_key=args.platform,
                platform_config_json=args.platform_config,
                suite_config_json=args.suite_config,
            )
        )
    except (
        PlatformNotFoundError,
        UnsupportedPlatformError,
        EnvironmentNotCleanError,
    ) as exc:
        logging.getLogger("hab_test_harness").error("%s", exc)
        exit_code = EXIT_UNUSABLE_ENVIRONMENT
    except (json.JSONDecodeError, ValidationError) as exc:
        logging.getLogger("hab_test_harness").error("Invalid configuration: %s", exc)
        exit_code = EXIT_UNUSABLE_ENVIRONMENT
    except OSError as exc:
        logging.getLogger("hab_test_harness").error(
            "Could not prepare the test environment: %s", exc
        )
        exit_code = EXIT_UNUSABLE_ENVIRONMENT
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

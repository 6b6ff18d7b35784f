"""Validate generated aliases against a live cluster.

Reads the alias file, derives shell commands from alias and function
definitions that call `get` or `describe`, and runs them through bash in
parallel:

- A "valid" check targets an existing test object and fails only when the
  shell reports a syntax error; other errors (unsupported resource, missing
  object) are logged and tolerated.
- An "invalid" check targets an object that does not exist and fails when
  the command succeeds or reports a syntax error.

This is a test utility; it never affects generation.

Security:
- Commands come from the generated alias file only
- Worker pool bounded by max_workers
"""

import logging
import os
import subprocess
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from kubealias.kubectl_executor import KubectlExecutionError, run_kubectl_command

logger = logging.getLogger(__name__)

TEST_OBJECT_NAME = "test-pod"
MISSING_OBJECT_NAME = "missing-pod"
SYNTAX_ERROR_MARKERS = ("unexpected EOF", "syntax error")

# Alias targets that need an object name appended to be meaningful
NAMED_TARGET_HINTS = ("pod", "svc", "configmap")


class AliasValidatorError(Exception):
    """Raised when validation cannot be set up."""

    pass


@dataclass
class AliasCheck:
    """A single shell command to run, and whether it should succeed."""

    command: str
    expect_success: bool

    @property
    def label(self) -> str:
        return f"{'valid' if self.expect_success else 'invalid'}:{self.command}"


@dataclass
class CheckResult:
    """Result of running one AliasCheck."""

    check: AliasCheck
    passed: bool
    message: str
    output: str = ""
    duration: float = 0.0


class ValidationReport:
    """Aggregated results from a validation run."""

    def __init__(self, results: list[CheckResult]):
        self.results = results

    @property
    def total(self) -> int:
        """Total number of checks."""
        return len(self.results)

    @property
    def passed(self) -> int:
        """Number of passing checks."""
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        """Number of failing checks."""
        return sum(1 for r in self.results if not r.passed)

    @property
    def all_passed(self) -> bool:
        return all(r.passed for r in self.results)

    def get_failures(self) -> list[CheckResult]:
        """Get only failed results, sorted by command."""
        return sorted((r for r in self.results if not r.passed), key=lambda r: r.check.label)

    def format_summary(self) -> str:
        """Format summary of results."""
        return f"Total: {self.total}, Passed: {self.passed}, Failed: {self.failed}"


def clean_alias_command(raw: str) -> str:
    """Strip an inline comment and surrounding single quotes."""
    command = raw.split("#", 1)[0].strip()
    return command.strip("'")


def checks_for_line(line: str) -> list[AliasCheck]:
    """Derive checks from one alias file line.

    Only `get` and `describe` definitions are exercised; everything else
    would mutate the cluster.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return []
    if " get " not in line and " describe " not in line:
        return []

    if line.startswith("alias"):
        _, sep, target = line.partition("=")
        if not sep:
            return []
        command = clean_alias_command(target)
        if any(hint in command for hint in NAMED_TARGET_HINTS):
            return [
                AliasCheck(f"{command} {TEST_OBJECT_NAME}", expect_success=True),
                AliasCheck(f"{command} {MISSING_OBJECT_NAME}", expect_success=False),
            ]
        return [AliasCheck(command, expect_success=True)]

    if "() {" in line:
        start = line.find("{")
        end = line.rfind("}")
        if start == -1 or end <= start:
            return []
        body = clean_alias_command(line[start + 1 : end].strip())
        body = body.removesuffix(";").strip()
        return [
            AliasCheck(body.replace("$1", TEST_OBJECT_NAME), expect_success=True),
            AliasCheck(body.replace("$1", MISSING_OBJECT_NAME), expect_success=False),
        ]

    return []


def load_checks(alias_path: Path) -> list[AliasCheck]:
    """Read the alias file and build all checks.

    Raises:
        AliasValidatorError: If the alias file cannot be read
    """
    try:
        text = alias_path.read_text()
    except OSError as e:
        raise AliasValidatorError(f"Failed to open {alias_path}: {e}") from e

    checks: list[AliasCheck] = []
    for line in text.splitlines():
        checks.extend(checks_for_line(line))
    return checks


def _has_syntax_error(output: str) -> bool:
    return any(marker in output for marker in SYNTAX_ERROR_MARKERS)


class AliasValidator:
    """Run alias checks in parallel."""

    def __init__(
        self,
        max_workers: int = 20,
        binary: str = "kubectl",
        kubeconfig: str | None = None,
        timeout: float | None = None,
    ):
        self.max_workers = max_workers
        self.binary = binary
        self.kubeconfig = kubeconfig
        self.timeout = timeout

    def apply_manifest(self, manifest: Path) -> None:
        """Create the test objects the valid checks refer to.

        Raises:
            AliasValidatorError: If the manifest cannot be applied
        """
        try:
            run_kubectl_command(
                ["apply", "-f", str(manifest)],
                binary=self.binary,
                kubeconfig=self.kubeconfig,
                timeout=self.timeout,
            )
        except KubectlExecutionError as e:
            raise AliasValidatorError(f"Failed to apply test manifests: {e}") from e
        logger.info(f"Applied test manifests from {manifest}")

    def run_check(self, check: AliasCheck) -> CheckResult:
        """Run one check through bash and classify the outcome."""
        env = None
        if self.kubeconfig:
            env = {**os.environ, "KUBECONFIG": str(Path(self.kubeconfig).expanduser())}

        start_time = time.time()
        try:
            proc = subprocess.run(
                ["bash", "-c", check.command],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired:
            return CheckResult(
                check=check,
                passed=False,
                message=f"Timed out after {self.timeout}s",
                duration=time.time() - start_time,
            )

        output = proc.stdout + proc.stderr
        duration = time.time() - start_time
        succeeded = proc.returncode == 0

        if _has_syntax_error(output):
            return CheckResult(check, False, "Invalid shell syntax in alias", output, duration)

        if check.expect_success:
            if not succeeded:
                logger.debug(
                    f"Expected failure for unsupported or non-existent object: {check.command}"
                )
            return CheckResult(check, True, "ok", output, duration)

        if succeeded:
            return CheckResult(
                check, False, "Expected failure, but command succeeded", output, duration
            )
        return CheckResult(check, True, "ok", output, duration)

    def validate(
        self,
        checks: list[AliasCheck],
        progress_callback: Callable[[str], None] | None = None,
    ) -> ValidationReport:
        """Run all checks with at most max_workers in flight.

        Args:
            checks: Checks to run
            progress_callback: Optional progress callback

        Returns:
            ValidationReport
        """
        if not checks:
            return ValidationReport([])

        def run(check: AliasCheck) -> CheckResult:
            if progress_callback:
                progress_callback(f"Running {check.label}")
            return self.run_check(check)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(run, check): check for check in checks}
            results = [future.result() for future in as_completed(futures)]

        for result in results:
            if not result.passed:
                logger.warning(f"{result.check.label}: {result.message}")
        return ValidationReport(results)


__all__ = [
    "AliasCheck",
    "AliasValidator",
    "AliasValidatorError",
    "CheckResult",
    "ValidationReport",
    "checks_for_line",
    "clean_alias_command",
    "load_checks",
]

"""Pre-deployment validation pipeline combining the individual checks."""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Sequence

from sniffcheck.env import analyze_environment
from sniffcheck.imports_analyzer import analyze_imports
from sniffcheck.large import DEFAULT_THRESHOLD, scan_large_files

PathLike = str | os.PathLike


class CheckStatus(Enum):
    PASSED = "Passed"
    FAILED = "Failed"
    WARNING = "Warning"
    SKIPPED = "Skipped"


@dataclass
class CheckResult:
    name: str
    status: CheckStatus
    duration_ms: int
    issues_found: int
    critical_issues: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "issues_found": self.issues_found,
            "critical_issues": self.critical_issues,
            "message": self.message,
        }


@dataclass
class DeploymentSummary:
    total_checks: int
    passed: int
    failed: int
    warnings: int
    skipped: int
    overall_status: CheckStatus
    deployment_ready: bool


@dataclass
class DeploymentReport:
    checks: list[CheckResult]
    summary: DeploymentSummary
    duration_ms: int

    def to_dict(self) -> dict[str, Any]:
        """Return the report as plain JSON-ready data."""
        s = self.summary
        return {
            "checks": [c.to_dict() for c in self.checks],
            "summary": {
                "total_checks": s.total_checks,
                "passed": s.passed,
                "failed": s.failed,
                "warnings": s.warnings,
                "skipped": s.skipped,
                "overall_status": s.overall_status.value,
                "deployment_ready": s.deployment_ready,
            },
            "duration_ms": self.duration_ms,
        }


_CHECK_ERRORS = (OSError, UnicodeDecodeError, ValueError)


def _timed_check(
    name: str,
    passes: Callable[[], bool],
    passed_message: str,
    failed_status: CheckStatus,
    failed_message: str,
) -> CheckResult:
    start = time.perf_counter()
    try:
        ok = passes()
    except _CHECK_ERRORS:
        ok = False
    duration = int((time.perf_counter() - start) * 1000)
    if ok:
        return CheckResult(name, CheckStatus.PASSED, duration, 0, 0, passed_message)
    critical = 1 if failed_status is CheckStatus.FAILED else 0
    return CheckResult(name, failed_status, duration, 1, critical, failed_message)


def run_env_check(directory: PathLike | None = None) -> CheckResult:
    """Environment variables must all be present and free of exposed secrets."""

    def passes() -> bool:
        summary = analyze_environment(directory).summary
        return not summary.missing and not summary.security_issues

    return _timed_check(
        "Environment Variables",
        passes,
        "All environment variables are properly configured",
        CheckStatus.FAILED,
        "Environment variables validation failed",
    )


def run_large_files_check(directory: PathLike | None = None) -> CheckResult:
    """Large source files only produce a warning."""
    return _timed_check(
        "Large Files Detection",
        lambda: scan_large_files(directory, DEFAULT_THRESHOLD).summary.large_files_found
        == 0,
        "No large files detected",
        CheckStatus.WARNING,
        "Large files detected - consider refactoring",
    )


def run_imports_check(directory: PathLike | None = None) -> CheckResult:
    """Unused or broken imports only produce a warning."""

    def passes() -> bool:
        summary = analyze_imports(directory).summary
        return not summary.unused_imports and not summary.broken_imports

    return _timed_check(
        "Unused Imports",
        passes,
        "No unused imports found",
        CheckStatus.WARNING,
        "Unused imports detected - clean up recommended",
    )


_CHECKS = (
    ("🔍 Checking environment variables...", "Environment check", run_env_check),
    ("📏 Checking for large files...", "Large files check", run_large_files_check),
    ("🧹 Checking for unused imports...", "Imports check", run_imports_check),
)


def run_checks(directory: PathLike | None = None, quiet: bool = False) -> list[CheckResult]:
    """Run every deployment check in order."""
    base = Path.cwd() if directory is None else Path(directory)
    total = len(_CHECKS)
    if not quiet:
        print(f"🔄 Running {total} deployment validation checks...")
    results = []
    for number, (intro, label, check) in enumerate(_CHECKS, start=1):
        if not quiet:
            print(intro)
        results.append(check(base))
        if not quiet:
            print(f"✅ {number}/{total} {label} completed")
    if not quiet:
        print("🎉 All deployment checks completed!")
    return results


def calculate_summary(checks: Sequence[CheckResult]) -> DeploymentSummary:
    """Tally the check results and decide whether deployment may go ahead."""
    counts = {status: 0 for status in CheckStatus}
    has_critical = False
    for check in checks:
        counts[check.status] += 1
        if check.status is CheckStatus.FAILED and check.critical_issues > 0:
            has_critical = True
    failed = counts[CheckStatus.FAILED]
    warnings = counts[CheckStatus.WARNING]
    if failed:
        overall = CheckStatus.FAILED
    elif warnings:
        overall = CheckStatus.WARNING
    else:
        overall = CheckStatus.PASSED
    return DeploymentSummary(
        total_checks=len(checks),
        passed=counts[CheckStatus.PASSED],
        failed=failed,
        warnings=warnings,
        skipped=counts[CheckStatus.SKIPPED],
        overall_status=overall,
        deployment_ready=failed == 0 or not has_critical,
    )


_CHECK_LABELS = {
    CheckStatus.PASSED: "✅ PASSED",
    CheckStatus.FAILED: "❌ FAILED",
    CheckStatus.WARNING: "⚠️ WARNING",
    CheckStatus.SKIPPED: "⏭️ SKIPPED",
}

_OVERALL_LABELS = {
    CheckStatus.PASSED: "🎉 ALL CHECKS PASSED",
    CheckStatus.FAILED: "🚨 CHECKS FAILED",
    CheckStatus.WARNING: "⚠️ WARNINGS DETECTED",
    CheckStatus.SKIPPED: "⏭️ SOME CHECKS SKIPPED",
}


def _render_summary(summary: DeploymentSummary, duration_ms: int) -> list[str]:
    lines = ["🎯 DEPLOYMENT SUMMARY", "════════════════════"]
    lines.append(f"  Total checks: {summary.total_checks}")
    if summary.passed:
        lines.append(f"  Passed: {summary.passed}")
    if summary.failed:
        lines.append(f"  Failed: {summary.failed}")
    if summary.warnings:
        lines.append(f"  Warnings: {summary.warnings}")
    if summary.skipped:
        lines.append(f"  Skipped: {summary.skipped}")
    lines.append(f"  Total time: {duration_ms}ms")
    lines.append("")
    lines.append(f"  Status: {_OVERALL_LABELS[summary.overall_status]}")

    if summary.deployment_ready:
        lines += [
            "  🚀 READY FOR DEPLOYMENT",
            "",
            "✨ Your project passes all critical checks and is ready for deployment!",
        ]
    else:
        lines += [
            "  🛑 NOT READY FOR DEPLOYMENT",
            "",
            "🚨 Critical issues must be fixed before deployment",
            "",
            "💡 Fix the failed checks above and run 'sniff deploy' again",
        ]
    lines.append("")

    if summary.deployment_ready:
        lines += [
            "🎯 NEXT STEPS",
            "────────────",
            "  • Run your build command (npm run build)",
            "  • Test in staging environment",
            "  • Deploy to production",
        ]
        if summary.warnings:
            lines.append("  • Consider addressing warnings for optimal performance")
    else:
        lines += [
            "🔧 ACTION REQUIRED",
            "─────────────────",
            "  • Fix all failed checks above",
            "  • Run 'sniff deploy' again to verify fixes",
            "  • Only deploy when all critical checks pass",
        ]
    lines.append("")
    lines.append(
        "💡 TIP: Use 'sniff --help' to run individual checks during development"
    )
    return lines


def render_report(report: DeploymentReport, quiet: bool = False) -> str:
    """Human-readable text of ``report``."""
    lines: list[str] = []
    if not quiet:
        lines += ["", "📊 Deployment Validation Results", "=" * 31, ""]
    for check in report.checks:
        lines.append(
            f"  {_CHECK_LABELS[check.status]} {check.name} ({check.duration_ms}ms)"
        )
        lines.append(f"     {check.message}")
        if check.issues_found:
            lines.append(
                f"     Issues: {check.issues_found}, Critical: {check.critical_issues}"
            )
        lines.append("")
    lines += _render_summary(report.summary, report.duration_ms)
    return "\n".join(lines)


def run(
    json_output: bool = False,
    quiet: bool = False,
    directory: PathLike | None = None,
) -> int:
    """Run the pipeline, print the report and return the exit status."""
    if not json_output and not quiet:
        print("🚀 Running Pre-Deployment Validation Pipeline")
        print("=" * 45)
        print()
    start = time.perf_counter()
    checks = run_checks(directory, quiet or json_output)
    duration = int((time.perf_counter() - start) * 1000)
    report = DeploymentReport(checks, calculate_summary(checks), duration)
    if json_output:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_report(report, quiet))
    return 0 if report.summary.deployment_ready else 1
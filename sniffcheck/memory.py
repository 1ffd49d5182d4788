"""Memory leak analysis: leak-prone code patterns and running Node.js processes."""

from __future__ import annotations

import json
import os
import subprocess
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Sequence

from sniffcheck.memory_patterns import (
    MemoryPattern,
    PatternType,
    Severity,
    scan_for_memory_patterns,
)

DEFAULT_TOTAL_MEMORY_GB = 8.0
_COMMAND_WIDTH = 80
_COMMAND_TIMEOUT = 10
_NODE_COMMAND_WORDS = ("node", "npm", "yarn")


class ProcessStatus(Enum):
    NORMAL = "Normal"
    HIGH_MEMORY = "HighMemory"
    MEMORY_LEAK = "MemoryLeak"
    UNRESPONSIVE = "Unresponsive"


@dataclass
class NodeProcess:
    pid: int
    memory_usage_mb: float
    cpu_usage: float
    command: str
    status: ProcessStatus

    @property
    def uses_much_memory(self) -> bool:
        return self.status in (ProcessStatus.HIGH_MEMORY, ProcessStatus.MEMORY_LEAK)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pid": self.pid,
            "memory_usage_mb": self.memory_usage_mb,
            "cpu_usage": self.cpu_usage,
            "command": self.command,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class SystemMemoryInfo:
    total_memory_gb: float
    available_memory_gb: float
    high_memory_threshold_mb: float
    critical_memory_threshold_mb: float


@dataclass
class MemorySummary:
    total_patterns: int = 0
    critical_issues: int = 0
    high_issues: int = 0
    medium_issues: int = 0
    low_issues: int = 0
    active_processes: int = 0
    high_memory_processes: int = 0


@dataclass
class MemoryReport:
    patterns: list[MemoryPattern]
    node_processes: list[NodeProcess]
    summary: MemorySummary
    recommendations: list[str]
    duration_ms: int = 0
    system_info: SystemMemoryInfo | None = field(default=None, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the report as plain JSON-ready data."""
        s = self.summary
        return {
            "patterns": [p.to_dict() for p in self.patterns],
            "node_processes": [p.to_dict() for p in self.node_processes],
            "summary": {
                "total_patterns": s.total_patterns,
                "critical_issues": s.critical_issues,
                "high_issues": s.high_issues,
                "medium_issues": s.medium_issues,
                "low_issues": s.low_issues,
                "active_processes": s.active_processes,
                "high_memory_processes": s.high_memory_processes,
            },
            "recommendations": list(self.recommendations),
            "duration_ms": self.duration_ms,
        }


def _command_output(args: Sequence[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            errors="replace",
            timeout=_COMMAND_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        return None


def _meminfo_total_gb() -> float | None:
    try:
        text = Path("/proc/meminfo").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    for line in text.splitlines():
        if line.startswith("MemTotal:"):
            parts = line.split()
            if len(parts) > 1:
                try:
                    return int(parts[1]) / 1024.0 / 1024.0
                except ValueError:
                    continue
    return None


def _system_profiler_total_gb() -> float | None:
    result = _command_output(["system_profiler", "SPHardwareDataType"])
    if result is None:
        return None
    for line in result.stdout.splitlines():
        if "Memory:" in line:
            parts = line.split()
            if len(parts) >= 2:
                try:
                    return float(parts[1])
                except ValueError:
                    continue
    return None


def _powershell_total_gb() -> float | None:
    result = _command_output(
        [
            "powershell",
            "-Command",
            "(Get-WmiObject -Class Win32_ComputerSystem).TotalPhysicalMemory",
        ]
    )
    if result is None:
        return None
    try:
        total_bytes = int(result.stdout.strip())
    except ValueError:
        return None
    if total_bytes < 0:
        return None
    return total_bytes / 1024.0 / 1024.0 / 1024.0


def total_system_memory_gb() -> float | None:
    """Total physical memory in GB, or None if it cannot be detected."""
    for probe in (_meminfo_total_gb, _system_profiler_total_gb, _powershell_total_gb):
        total = probe()
        if total is not None:
            return total
    return None


def system_memory_info(total_memory_gb: float | None = None) -> SystemMemoryInfo:
    """Memory thresholds scaled to the machine; detects the total when not given."""
    if total_memory_gb is None:
        detected = total_system_memory_gb()
        total_memory_gb = DEFAULT_TOTAL_MEMORY_GB if detected is None else detected
    total_mb = total_memory_gb * 1024.0
    return SystemMemoryInfo(
        total_memory_gb=total_memory_gb,
        available_memory_gb=total_memory_gb,
        high_memory_threshold_mb=max(total_mb * 0.05, 256.0),
        critical_memory_threshold_mb=max(total_mb * 0.15, 512.0),
    )


def memory_mb_from_percentage(percentage: float, info: SystemMemoryInfo) -> float:
    """Megabytes that ``percentage`` of the system memory amounts to."""
    return (percentage / 100.0) * info.total_memory_gb * 1024.0


def _process_status(memory_mb: float, info: SystemMemoryInfo) -> ProcessStatus:
    if memory_mb > info.critical_memory_threshold_mb:
        return ProcessStatus.MEMORY_LEAK
    if memory_mb > info.high_memory_threshold_mb:
        return ProcessStatus.HIGH_MEMORY
    return ProcessStatus.NORMAL


def parse_ps_output(output: str, info: SystemMemoryInfo) -> list[NodeProcess]:
    """Node.js, npm and yarn processes listed in ``ps aux`` output."""
    processes: list[NodeProcess] = []
    for line in output.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 11:
            continue
        command = " ".join(fields[10:])
        if not any(word in command for word in _NODE_COMMAND_WORDS):
            continue
        try:
            pid = int(fields[1])
            cpu = float(fields[2])
            mem = float(fields[3])
        except ValueError:
            continue
        if pid < 0:
            continue
        memory_mb = memory_mb_from_percentage(mem, info)
        processes.append(
            NodeProcess(
                pid=pid,
                memory_usage_mb=memory_mb,
                cpu_usage=cpu,
                command=command[:_COMMAND_WIDTH],
                status=_process_status(memory_mb, info),
            )
        )
    return processes


def _node_processes(info: SystemMemoryInfo) -> list[NodeProcess]:
    result = _command_output(["ps", "aux"])
    if result is None or result.returncode != 0:
        return []
    return parse_ps_output(result.stdout, info)


def check_node_processes() -> list[NodeProcess]:
    """Running Node.js processes, as reported by ``ps aux``."""
    return _node_processes(system_memory_info())


def generate_memory_recommendations(
    patterns: Sequence[MemoryPattern], processes: Sequence[NodeProcess]
) -> list[str]:
    """Advice derived from the findings, followed by general advice."""
    recommendations: list[str] = []
    critical = sum(1 for p in patterns if p.severity is Severity.CRITICAL)
    high = sum(1 for p in patterns if p.severity is Severity.HIGH)
    if critical:
        recommendations.append(
            f"🚨 {critical} critical memory issues require immediate attention"
        )
    if high:
        recommendations.append(f"⚠️ {high} high-priority memory issues should be addressed")

    heavy = sum(1 for p in processes if p.uses_much_memory)
    if heavy:
        recommendations.append(f"Monitor {heavy} high-memory Node.js processes")

    types = {p.pattern_type for p in patterns}
    if PatternType.UNREMOVED_EVENT_LISTENER in types:
        recommendations.append(
            "Implement proper event listener cleanup in React useEffect dependencies"
        )
    if PatternType.TIMER_LEAK in types:
        recommendations.append(
            "Use React useEffect cleanup functions for timers and intervals"
        )

    recommendations += [
        "Use React DevTools Profiler to identify memory leaks during development",
        "Implement memory monitoring in production environments",
        "Consider using WeakMap and WeakSet for managing object references",
        "Profile memory usage before and after major code changes",
    ]
    return recommendations


def calculate_memory_summary(
    patterns: Sequence[MemoryPattern], processes: Sequence[NodeProcess]
) -> MemorySummary:
    def count(severity: Severity) -> int:
        return sum(1 for p in patterns if p.severity is severity)

    return MemorySummary(
        total_patterns=len(patterns),
        critical_issues=count(Severity.CRITICAL),
        high_issues=count(Severity.HIGH),
        medium_issues=count(Severity.MEDIUM),
        low_issues=count(Severity.LOW),
        active_processes=len(processes),
        high_memory_processes=sum(1 for p in processes if p.uses_much_memory),
    )


def recommended_node_memory_mb(info: SystemMemoryInfo) -> int:
    """Half the system memory in MB, kept between 2048 and 8192."""
    half = int(info.total_memory_gb * 1024.0 * 0.5)
    return max(2048, min(half, 8192))


_SEVERITY_ICONS = {
    Severity.CRITICAL: "🚨",
    Severity.HIGH: "⚠️",
    Severity.MEDIUM: "📋",
    Severity.LOW: "ℹ️",
    Severity.INFO: "ℹ️",
}

_SEVERITY_SECTIONS = (
    (Severity.CRITICAL, "🚨 CRITICAL MEMORY ISSUES", "───────────────────────────"),
    (Severity.HIGH, "⚠️  HIGH PRIORITY ISSUES", "───────────────────────"),
    (Severity.MEDIUM, "📋 MEDIUM PRIORITY ISSUES", "────────────────────────"),
    (Severity.LOW, "ℹ️  LOW PRIORITY ISSUES", "──────────────────────"),
)

_PROCESS_ICONS = {
    ProcessStatus.NORMAL: "✅",
    ProcessStatus.HIGH_MEMORY: "⚠️",
    ProcessStatus.MEMORY_LEAK: "🚨",
    ProcessStatus.UNRESPONSIVE: "💀",
}


def _render_pattern(pattern: MemoryPattern) -> list[str]:
    return [
        f"  {_SEVERITY_ICONS[pattern.severity]} {pattern.file_path}:{pattern.line_number}",
        f"     {pattern.code_snippet}",
        f"     {pattern.description}",
        f"     💡 {pattern.recommendation}",
        "",
    ]


def _overall_status(summary: MemorySummary) -> str:
    if summary.critical_issues > 0:
        return "🚨 CRITICAL MEMORY ISSUES DETECTED"
    if summary.high_issues > 3 or summary.high_memory_processes > 2:
        return "⚠️ MEMORY ISSUES NEED ATTENTION"
    if summary.total_patterns > 0:
        return "📋 MINOR MEMORY CONCERNS"
    return "✅ NO MAJOR MEMORY ISSUES"


def _render_summary(
    summary: MemorySummary, duration_ms: int, info: SystemMemoryInfo
) -> list[str]:
    lines = ["📊 MEMORY ANALYSIS SUMMARY", "─────────────────────────"]
    lines.append(f"  Total patterns found: {summary.total_patterns}")
    if summary.critical_issues:
        lines.append(f"  Critical issues: {summary.critical_issues}")
    if summary.high_issues:
        lines.append(f"  High priority: {summary.high_issues}")
    if summary.medium_issues:
        lines.append(f"  Medium priority: {summary.medium_issues}")
    if summary.low_issues:
        lines.append(f"  Low priority: {summary.low_issues}")
    lines.append(f"  Active Node.js processes: {summary.active_processes}")
    if summary.high_memory_processes:
        lines.append(f"  High memory processes: {summary.high_memory_processes}")
    lines.append(f"  Analysis time: {duration_ms}ms")
    lines.append("")
    lines.append(f"  Status: {_overall_status(summary)}")

    if summary.critical_issues > 0 or summary.high_memory_processes > 2:
        lines += ["", "🎯 ACTION REQUIRED", "─────────────────"]
        if summary.critical_issues > 0:
            lines.append("  • Fix critical memory leak patterns immediately")
        if summary.high_memory_processes > 2:
            lines.append("  • Investigate high-memory Node.js processes")
        lines.append("  • Monitor memory usage during development")
        lines.append("  • Set up memory alerts in production")

    lines.append("")
    lines.append(
        f"💡 TIP: Use 'node --max-old-space-size={recommended_node_memory_mb(info)}' "
        "to optimize Node.js memory limit for your system "
        f"({info.total_memory_gb:.1f}GB RAM)"
    )
    return lines


def render_report(report: MemoryReport, quiet: bool = False) -> str:
    """Human-readable text of ``report``."""
    lines: list[str] = []
    if not quiet:
        lines += ["", "🧠 Memory Leak Analysis Report", "=============================", ""]

    for severity, title, rule in _SEVERITY_SECTIONS:
        if severity is Severity.LOW and quiet:
            continue
        matching = [p for p in report.patterns if p.severity is severity]
        if not matching:
            continue
        lines += [title, rule]
        for pattern in matching:
            lines += _render_pattern(pattern)
        lines.append("")

    if report.node_processes:
        lines += ["🔄 NODE.JS PROCESSES", "────────────────────"]
        for process in report.node_processes:
            lines.append(
                f"  {_PROCESS_ICONS[process.status]} PID: {process.pid} | "
                f"Memory: {process.memory_usage_mb:.1f}MB | "
                f"CPU: {process.cpu_usage:.1f}%"
            )
            lines.append(f"     {process.command}")
        lines.append("")

    if report.recommendations:
        lines += ["💡 RECOMMENDATIONS", "──────────────────"]
        lines.extend(f"  • {rec}" for rec in report.recommendations)
        lines.append("")

    info = report.system_info or system_memory_info()
    lines += _render_summary(report.summary, report.duration_ms, info)
    return "\n".join(lines)


def analyze_memory(
    root: str | os.PathLike[str] | None = None, quiet: bool = False
) -> MemoryReport:
    """Scan the code under ``root`` and the running Node.js processes."""
    start = time.perf_counter()
    if not quiet:
        print("🧠 Scanning for memory leak patterns...")
        print("🔍 Analyzing code patterns for memory leaks...")
    patterns, recommendations = scan_for_memory_patterns(root)

    if not quiet:
        print("⚡ Checking Node.js processes for memory usage...")
    info = system_memory_info()
    processes = _node_processes(info)
    if not quiet:
        print("✅ Memory analysis completed")

    recommendations = recommendations + generate_memory_recommendations(
        patterns, processes
    )
    summary = calculate_memory_summary(patterns, processes)
    duration = int((time.perf_counter() - start) * 1000)
    return MemoryReport(patterns, processes, summary, recommendations, duration, info)


def run(
    json_output: bool = False,
    quiet: bool = False,
    root: str | os.PathLike[str] | None = None,
) -> int:
    """Analyse memory usage, print the report and return the exit status."""
    if not json_output and not quiet:
        print("🔍 Analyzing memory usage and potential leaks...")
    report = analyze_memory(root, quiet or json_output)
    if json_output:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_report(report, quiet))
    summary = report.summary
    return 1 if summary.critical_issues > 0 or summary.high_memory_processes > 2 else 0
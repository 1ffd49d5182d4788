"""Detection of oversized TypeScript/JavaScript source files."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator

DEFAULT_THRESHOLD = 100
SOURCE_EXTENSIONS = ("ts", "tsx", "js", "jsx")
MAX_DEPTH = 10
_SKIPPED_DIRS = frozenset({"node_modules", ".git", ".next"})


class FileType(Enum):
    API_ROUTE = "ApiRoute"
    SERVER_COMPONENT = "ServerComponent"
    CLIENT_COMPONENT = "ClientComponent"
    CUSTOM_HOOK = "CustomHook"
    TYPE_DEFINITION = "TypeDefinition"
    MIDDLEWARE = "Middleware"
    LAYOUT = "Layout"
    PAGE = "Page"
    COMPONENT = "Component"
    SERVICE = "Service"
    UTIL = "Util"
    CONFIG = "Config"
    TEST = "Test"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return _FILE_TYPE_LABELS[self]

    def __str__(self) -> str:
        return self.label


_FILE_TYPE_LABELS = {
    FileType.API_ROUTE: "API Route",
    FileType.SERVER_COMPONENT: "Server Component",
    FileType.CLIENT_COMPONENT: "Client Component",
    FileType.CUSTOM_HOOK: "Custom Hook",
    FileType.TYPE_DEFINITION: "Type Definition",
    FileType.MIDDLEWARE: "Middleware",
    FileType.LAYOUT: "Layout",
    FileType.PAGE: "Page",
    FileType.COMPONENT: "Component",
    FileType.SERVICE: "Service",
    FileType.UTIL: "Utility",
    FileType.CONFIG: "Configuration",
    FileType.TEST: "Test",
    FileType.OTHER: "Other",
}


class Severity(Enum):
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class SeverityLevels:
    """Line counts at which a file becomes a warning, an error or critical."""

    warning: int = 100
    error: int = 200
    critical: int = 400


@dataclass
class LargeFile:
    path: str
    lines: int
    size_bytes: int
    size_kb: float
    file_type: FileType
    severity: Severity
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "lines": self.lines,
            "size_bytes": self.size_bytes,
            "size_kb": self.size_kb,
            "file_type": self.file_type.value,
            "severity": self.severity.value,
            "suggestions": list(self.suggestions),
        }


@dataclass
class LargeFileSummary:
    total_files_scanned: int = 0
    large_files_found: int = 0
    warnings: int = 0
    errors: int = 0
    critical: int = 0


@dataclass
class LargeFileReport:
    files: list[LargeFile]
    summary: LargeFileSummary

    def to_dict(self) -> dict[str, Any]:
        """Return the report as plain JSON-ready data."""
        return {
            "files": [f.to_dict() for f in self.files],
            "summary": {
                "total_files_scanned": self.summary.total_files_scanned,
                "large_files_found": self.summary.large_files_found,
                "warnings": self.summary.warnings,
                "errors": self.summary.errors,
                "critical": self.summary.critical,
            },
        }


def _has_use_client(path: Path) -> bool:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False
    head = content.splitlines()[:10]
    return any(
        line.strip().startswith(("'use client'", '"use client"')) for line in head
    )


def determine_file_type(path: str | os.PathLike[str]) -> FileType:
    """Classify a file by its name, location and ``use client`` directive."""
    p = Path(path)
    path_str = p.as_posix()
    lower = path_str.lower()
    name = p.name
    use_client = _has_use_client(p)

    if name in ("middleware.ts", "middleware.js"):
        return FileType.MIDDLEWARE
    if name in ("layout.tsx", "layout.js"):
        return FileType.LAYOUT
    if name in ("page.tsx", "page.js"):
        return FileType.PAGE
    if "/api/" in lower:
        return FileType.API_ROUTE
    if path_str.endswith(".d.ts") or (
        "/types/" in lower and lower.endswith((".ts", ".tsx"))
    ):
        return FileType.TYPE_DEFINITION
    if name.startswith("use") and len(name) > 3:
        return FileType.CUSTOM_HOOK if name[3].isupper() else FileType.COMPONENT
    if use_client:
        return FileType.CLIENT_COMPONENT
    if "/components/" in lower:
        return FileType.SERVER_COMPONENT if "/app/" in lower else FileType.COMPONENT
    if "/pages/" in lower:
        return FileType.PAGE
    if "/services/" in lower or "/lib/" in lower:
        return FileType.SERVICE
    if "/utils/" in lower or "/helpers/" in lower:
        return FileType.UTIL
    if "config" in lower:
        return FileType.CONFIG
    if "test" in lower or "spec" in lower:
        return FileType.TEST
    return FileType.OTHER


def determine_severity(lines: int, levels: SeverityLevels | None = None) -> Severity:
    """Severity of a file with ``lines`` lines under ``levels``."""
    levels = levels or SeverityLevels()
    if lines >= levels.critical:
        return Severity.CRITICAL
    if lines >= levels.error:
        return Severity.ERROR
    return Severity.WARNING


def severity_labels(levels: SeverityLevels | None = None) -> tuple[str, str, str]:
    """Labels for the critical, error and warning bands."""
    levels = levels or SeverityLevels()
    return (
        f"Critical ({levels.critical}+ lines)",
        f"Error ({levels.error}-{levels.critical - 1} lines)",
        f"Warning ({levels.warning}-{levels.error - 1} lines)",
    )


_SUGGESTIONS = {
    FileType.SERVICE: [
        "🔧 Split into multiple service classes",
        "📝 Extract interfaces and types",
        "💉 Use dependency injection",
    ],
    FileType.API_ROUTE: [
        "🛣️ Split into multiple route handlers",
        "✅ Extract validation logic",
        "🏢 Move business logic to services",
    ],
    FileType.PAGE: [
        "🏗️ Extract page components",
        "🎣 Move data fetching to separate hooks",
        "📱 Split into layout and content components",
    ],
    FileType.LAYOUT: [
        "🎨 Extract layout components",
        "🔧 Move layout logic to custom hooks",
        "📐 Split complex layouts into sections",
    ],
    FileType.CUSTOM_HOOK: [
        "⚡ Split hook into smaller focused hooks",
        "🔄 Extract shared logic to utilities",
        "🎯 Consider hook composition patterns",
    ],
    FileType.TYPE_DEFINITION: [
        "📋 Split types by domain or feature",
        "🏗️ Group related interfaces together",
        "📦 Consider type-only import/export",
    ],
    FileType.MIDDLEWARE: [
        "🔀 Split middleware by functionality",
        "🛡️ Extract validation to separate functions",
        "📊 Move logging logic to utilities",
    ],
    FileType.UTIL: [
        "🔧 Split utility functions by domain",
        "📁 Create separate files for each utility group",
        "🎯 Group related functions together",
    ],
}

_COMPONENT_SUGGESTIONS = [
    "🧩 Break into smaller components",
    "🎣 Extract custom hooks for logic",
    "📦 Move utility functions to separate files",
]

_GENERIC_SUGGESTIONS = [
    "📦 Consider breaking into smaller modules",
    "♻️ Extract reusable logic",
]


def generate_suggestions(file_type: FileType) -> list[str]:
    """Refactoring hints suited to ``file_type``."""
    if file_type in (
        FileType.SERVER_COMPONENT,
        FileType.CLIENT_COMPONENT,
        FileType.COMPONENT,
    ):
        return list(_COMPONENT_SUGGESTIONS)
    return list(_SUGGESTIONS.get(file_type, _GENERIC_SUGGESTIONS))


def create_summary(total_files: int, large_files: Iterable[LargeFile]) -> LargeFileSummary:
    files = list(large_files)
    return LargeFileSummary(
        total_files_scanned=total_files,
        large_files_found=len(files),
        warnings=sum(1 for f in files if f.severity is Severity.WARNING),
        errors=sum(1 for f in files if f.severity is Severity.ERROR),
        critical=sum(1 for f in files if f.severity is Severity.CRITICAL),
    )


def find_source_files(
    root: str | os.PathLike[str],
    extensions: Iterable[str] = SOURCE_EXTENSIONS,
    max_depth: int = MAX_DEPTH,
) -> Iterator[Path]:
    """Yield files under ``root`` with one of ``extensions``, in sorted order."""
    base = Path(root)
    wanted = {ext.lstrip(".") for ext in extensions}
    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        depth = len(current.relative_to(base).parts)
        if depth + 1 >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRS)
        if depth + 1 > max_depth:
            continue
        for name in sorted(filenames):
            if Path(name).suffix.lstrip(".") in wanted:
                yield current / name


def count_lines(path: str | os.PathLike[str]) -> int:
    """Number of lines in a file; a final line without newline counts."""
    data = Path(path).read_bytes()
    if not data:
        return 0
    return data.count(b"\n") + (0 if data.endswith(b"\n") else 1)


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def scan_large_files(
    root: str | os.PathLike[str] | None = None,
    threshold: int = DEFAULT_THRESHOLD,
    levels: SeverityLevels | None = None,
) -> LargeFileReport:
    """Find source files under ``root`` with at least ``threshold`` lines."""
    base = Path.cwd() if root is None else Path(root)
    levels = levels or SeverityLevels()
    files = list(find_source_files(base))
    large: list[LargeFile] = []
    for path in files:
        try:
            lines = count_lines(path)
        except OSError:
            lines = 0
        if lines < threshold:
            continue
        try:
            size = path.stat().st_size
        except OSError:
            size = 0
        file_type = determine_file_type(path)
        large.append(
            LargeFile(
                path=_relative(path, base),
                lines=lines,
                size_bytes=size,
                size_kb=size / 1024.0,
                file_type=file_type,
                severity=determine_severity(lines, levels),
                suggestions=generate_suggestions(file_type),
            )
        )
    return LargeFileReport(large, create_summary(len(files), large))


def format_size(size_kb: float) -> str:
    if size_kb >= 1024.0:
        return f"{size_kb / 1024.0:.1f} MB"
    return f"{size_kb:.1f} KB"


_SEVERITY_HEADINGS = (
    (Severity.CRITICAL, "🚨 CRITICAL:"),
    (Severity.ERROR, "⚠️  ERROR:"),
    (Severity.WARNING, "⚡ WARNING:"),
)


def render_report(
    report: LargeFileReport,
    levels: SeverityLevels | None = None,
    quiet: bool = False,
) -> str:
    """Human-readable text of ``report``."""
    levels = levels or SeverityLevels()
    lines: list[str] = []
    if not quiet:
        lines += ["", "📊 Large Files Report", "=" * 20, ""]
    if report.summary.large_files_found == 0:
        lines.append("✅ No large files found! Your code is clean.")
        return "\n".join(lines)

    for severity, heading in _SEVERITY_HEADINGS:
        for f in (f for f in report.files if f.severity is severity):
            lines.append(f"{heading} {f.path}")
            lines.append(f"   📏 {f.lines} lines | 💾 {format_size(f.size_kb)}")
            lines.extend(f"   {s}" for s in f.suggestions)
            lines.append("")

    s = report.summary
    lines += ["📈 SUMMARY", "─────────"]
    lines.append(f"  Files scanned: {s.total_files_scanned}")
    lines.append(f"  Large files found: {s.large_files_found}")
    if s.critical:
        lines.append(f"  Critical: {s.critical}")
    if s.errors:
        lines.append(f"  Errors: {s.errors}")
    if s.warnings:
        lines.append(f"  Warnings: {s.warnings}")
    lines.append("")
    lines.append(
        f"💡 TIP: Files over {levels.warning} lines are considered "
        "'smelly code' and should be refactored"
    )
    return "\n".join(lines)


def run(
    threshold: int = DEFAULT_THRESHOLD,
    json_output: bool = False,
    quiet: bool = False,
    root: str | os.PathLike[str] | None = None,
) -> int:
    """Scan for large files, print the report and return the exit status."""
    levels = SeverityLevels()
    if not json_output and not quiet:
        print("🔍 Scanning for large files...")
    report = scan_large_files(root, threshold, levels)
    if json_output:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_report(report, levels, quiet))
    return 1 if report.summary.large_files_found else 0
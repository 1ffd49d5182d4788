"""Text rendering of the import analysis report."""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from sniffcheck.imports_types import (
    BrokenImport,
    BrokenImportType,
    ImportsReport,
    ImportsSummary,
    UnusedImport,
)

_ERROR_TEXT = {
    BrokenImportType.FILE_NOT_FOUND: "File not found",
    BrokenImportType.MODULE_NOT_INSTALLED: "Module not installed",
    BrokenImportType.INVALID_PATH: "Invalid path",
}


def calculate_savings(unused_imports: Sequence[UnusedImport]) -> str:
    """Rough size of the code that removing the unused imports would save."""
    total = len(unused_imports)
    if total == 0:
        return "0 lines"
    return f"~{total} lines of code"


def _render_summary(summary: ImportsSummary) -> list[str]:
    lines = ["📈 SUMMARY", "─────────"]
    lines.append(f"  Files scanned: {summary.files_scanned}")
    lines.append(f"  Total imports: {summary.total_imports}")
    lines.append(f"  Unused imports: {summary.unused_imports}")
    lines.append(f"  Broken imports: {summary.broken_imports}")
    lines.append(f"  Potential savings: {summary.potential_savings}")
    lines.append("")
    if summary.unused_imports:
        lines.append(
            "💡 TIP: Remove unused imports to reduce bundle size "
            "and improve build performance"
        )
        lines.append(
            "🔧 Consider using an IDE extension or linter to automatically "
            "remove unused imports"
        )
    if summary.broken_imports:
        lines.append("🔧 Fix broken imports to resolve compilation errors")
        lines.append(
            "💡 Check if files were moved/renamed, or if packages need to be installed"
        )
    return lines


def render_report(report: ImportsReport, quiet: bool = False) -> str:
    """Human-readable text of ``report``, grouped by file."""
    lines: list[str] = []
    if not quiet:
        lines += ["", "📊 Imports Analysis Report", "==========================", ""]

    if not report.unused_imports and not report.broken_imports:
        lines.append("✅ No import issues found! Your imports are clean.")
        return "\n".join(lines)

    unused_by_file: dict[str, list[UnusedImport]] = defaultdict(list)
    for item in report.unused_imports:
        unused_by_file[item.file].append(item)
    broken_by_file: dict[str, list[BrokenImport]] = defaultdict(list)
    for item in report.broken_imports:
        broken_by_file[item.file].append(item)

    for file in sorted(set(unused_by_file) | set(broken_by_file)):
        lines.append(file)
        for item in unused_by_file.get(file, []):
            lines.append(f"  Line {item.line}: {item.import_statement}")
            lines.append(f"    🚫 Unused: {', '.join(item.unused_items)}")
            lines.append("")
        for item in broken_by_file.get(file, []):
            lines.append(f"  Line {item.line}: {item.import_statement}")
            lines.append(f"    💥 {_ERROR_TEXT[item.error_type]}: {item.import_path}")
            if item.suggestion:
                lines.append(f"    💡 {item.suggestion}")
            lines.append("")

    lines += _render_summary(report.summary)
    return "\n".join(lines)
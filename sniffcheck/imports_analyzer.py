"""Detection of unused and broken imports in a TypeScript/JavaScript project."""

from __future__ import annotations

import json
import os
from pathlib import Path

from sniffcheck.imports_parser import (
    collect_used_identifiers,
    find_unused_items,
    match_import_statement,
    parse_import_statement,
)
from sniffcheck.imports_reporter import calculate_savings, render_report
from sniffcheck.imports_types import (
    BrokenImport,
    FileAnalysis,
    ImportsReport,
    ImportsSummary,
    UnusedImport,
)
from sniffcheck.imports_validation import PathAliasResolver, check_import_validity

_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx"})
_SKIPPED_DIRS = frozenset(
    {"node_modules", ".git", ".next", "dist", "build", "coverage"}
)


def find_js_ts_files(root: str | os.PathLike[str]) -> list[Path]:
    """All JavaScript and TypeScript sources under ``root``, in sorted order."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRS)
        current = Path(dirpath)
        found.extend(
            current / name
            for name in sorted(filenames)
            if Path(name).suffix in _EXTENSIONS
        )
    return found


def analyze_file_imports(
    path: str | os.PathLike[str],
    project_root: str | os.PathLike[str],
    resolver: PathAliasResolver | None = None,
) -> FileAnalysis:
    """Find the unused and broken imports of one file."""
    file_path = Path(path)
    lines = file_path.read_text(encoding="utf-8").splitlines()

    imports = []
    for number, line in enumerate(lines, start=1):
        statement = line.strip()
        match = match_import_statement(statement)
        if match:
            spec, import_path = match.group(1), match.group(2)
            imports.append(
                (number, statement, parse_import_statement(spec, import_path), import_path)
            )

    used = collect_used_identifiers(lines)
    unused: list[UnusedImport] = []
    broken: list[BrokenImport] = []
    for number, statement, parsed, import_path in imports:
        items = find_unused_items(parsed, used)
        if items:
            unused.append(
                UnusedImport(
                    file=str(file_path),
                    line=number,
                    import_statement=statement,
                    unused_items=items,
                    import_type=parsed.import_type,
                )
            )
        problem = check_import_validity(
            file_path, project_root, import_path, number, statement, resolver
        )
        if problem is not None:
            broken.append(problem)

    return FileAnalysis(len(imports), unused, broken)


def analyze_imports(project_root: str | os.PathLike[str] | None = None) -> ImportsReport:
    """Analyse every source file under ``project_root``."""
    root = Path.cwd() if project_root is None else Path(project_root)
    files = find_js_ts_files(root)
    resolver = PathAliasResolver.from_project_root(root)

    unused: list[UnusedImport] = []
    broken: list[BrokenImport] = []
    total = 0
    for path in files:
        analysis = analyze_file_imports(path, root, resolver)
        total += analysis.total_imports
        unused.extend(analysis.unused_imports)
        broken.extend(analysis.broken_imports)

    summary = ImportsSummary(
        files_scanned=len(files),
        total_imports=total,
        unused_imports=len(unused),
        broken_imports=len(broken),
        potential_savings=calculate_savings(unused),
    )
    return ImportsReport(unused, broken, summary)


def run(
    json_output: bool = False,
    quiet: bool = False,
    project_root: str | os.PathLike[str] | None = None,
) -> int:
    """Analyse imports, print the report and return the exit status."""
    if not json_output and not quiet:
        print("🔍 Scanning for unused and broken imports...")
    report = analyze_imports(project_root)
    if json_output:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_report(report, quiet))
    return 1 if report.summary.unused_imports or report.summary.broken_imports else 0
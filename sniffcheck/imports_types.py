"""Data types shared by the import analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BrokenImportType(Enum):
    FILE_NOT_FOUND = "FileNotFound"
    MODULE_NOT_INSTALLED = "ModuleNotInstalled"
    INVALID_PATH = "InvalidPath"


class ImportType(Enum):
    DEFAULT_IMPORT = "DefaultImport"
    NAMED_IMPORT = "NamedImport"
    NAMESPACE_IMPORT = "NamespaceImport"
    SIDE_EFFECT_IMPORT = "SideEffectImport"


@dataclass
class UnusedImport:
    file: str
    line: int
    import_statement: str
    unused_items: list[str]
    import_type: ImportType

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "import_statement": self.import_statement,
            "unused_items": list(self.unused_items),
            "import_type": self.import_type.value,
        }


@dataclass
class BrokenImport:
    file: str
    line: int
    import_statement: str
    import_path: str
    error_type: BrokenImportType
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "import_statement": self.import_statement,
            "import_path": self.import_path,
            "error_type": self.error_type.value,
            "suggestion": self.suggestion,
        }


@dataclass
class ImportsSummary:
    files_scanned: int
    total_imports: int
    unused_imports: int
    broken_imports: int
    potential_savings: str


@dataclass
class ImportsReport:
    unused_imports: list[UnusedImport]
    broken_imports: list[BrokenImport]
    summary: ImportsSummary

    def to_dict(self) -> dict[str, Any]:
        """Return the report as plain JSON-ready data."""
        return {
            "unused_imports": [u.to_dict() for u in self.unused_imports],
            "broken_imports": [b.to_dict() for b in self.broken_imports],
            "summary": {
                "files_scanned": self.summary.files_scanned,
                "total_imports": self.summary.total_imports,
                "unused_imports": self.summary.unused_imports,
                "broken_imports": self.summary.broken_imports,
                "potential_savings": self.summary.potential_savings,
            },
        }


@dataclass
class ParsedImport:
    import_type: ImportType
    default_import: str | None = None
    named_imports: list[str] = field(default_factory=list)
    namespace_import: str | None = None


@dataclass
class FileAnalysis:
    total_imports: int = 0
    unused_imports: list[UnusedImport] = field(default_factory=list)
    broken_imports: list[BrokenImport] = field(default_factory=list)
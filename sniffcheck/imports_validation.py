"""Resolution of import paths and detection of broken imports."""

from __future__ import annotations

import json
import os
from pathlib import Path

from sniffcheck.imports_types import BrokenImport, BrokenImportType

_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".json", ".mjs", ".cjs")

PathLike = str | os.PathLike


def import_exists(base_path: PathLike) -> bool:
    """Whether an import resolves to a file, trying extensions and index files."""
    base = Path(base_path)
    if base.exists():
        return True
    for ext in _EXTENSIONS:
        try:
            candidate = base.with_suffix(ext)
        except ValueError:
            continue
        if candidate.exists():
            return True
    return any((base / f"index{ext}").exists() for ext in _EXTENSIONS)


def _strip_wildcard(target: str) -> str:
    while target.endswith("/*"):
        target = target[:-2]
    return target


class PathAliasResolver:
    """Resolves ``compilerOptions.paths`` aliases from a ``tsconfig.json``."""

    def __init__(self, base_url: Path, path_mappings: dict[str, list[Path]]):
        self.base_url = base_url
        self.path_mappings = path_mappings

    @classmethod
    def from_project_root(cls, project_root: PathLike) -> PathAliasResolver | None:
        """Build a resolver from the project's tsconfig, or None if it has none."""
        root = Path(project_root)
        tsconfig = root / "tsconfig.json"
        if not tsconfig.exists():
            return None
        try:
            data = json.loads(tsconfig.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        options = data.get("compilerOptions")
        if not isinstance(options, dict):
            return None
        base = options.get("baseUrl")
        paths = options.get("paths")
        if base is not None and not isinstance(base, str):
            return None
        if paths is not None and not (
            isinstance(paths, dict)
            and all(
                isinstance(v, list) and all(isinstance(t, str) for t in v)
                for v in paths.values()
            )
        ):
            return None
        base_url = root / base if base is not None else root
        mappings = {
            pattern: [base_url / _strip_wildcard(t) for t in targets]
            for pattern, targets in (paths or {}).items()
        }
        return cls(base_url, mappings)

    def resolve_alias_path(self, import_path: str) -> Path | None:
        """The path an aliased import points to, or None if no alias matches."""
        for pattern, targets in self.path_mappings.items():
            resolved = self._try_resolve_pattern(pattern, import_path, targets)
            if resolved is not None:
                return resolved
        return None

    def _try_resolve_pattern(
        self, pattern: str, import_path: str, targets: list[Path]
    ) -> Path | None:
        if pattern.endswith("/*"):
            prefix = pattern[:-2]
            if import_path.startswith(prefix) and targets:
                target = targets[0]
                suffix = import_path[len(prefix):].lstrip("/")
                resolved = target / suffix
                if not import_exists(resolved):
                    fixed = self._try_fix_redundant_path(target, suffix)
                    if fixed is not None:
                        return fixed
                return resolved
        elif pattern == import_path and targets:
            return targets[0]
        return None

    @staticmethod
    def _try_fix_redundant_path(target: Path, suffix: str) -> Path | None:
        """Drop a leading segment that repeats the target's own name."""
        first, sep, remaining = suffix.partition("/")
        if target.name and first == target.name and sep:
            fixed = target / remaining
            if import_exists(fixed):
                return fixed
        return None


def package_name(import_path: str) -> str:
    """The npm package an import refers to, keeping the scope of scoped ones."""
    if import_path.startswith("@"):
        parts = import_path.split("/", 2)
        return f"{parts[0]}/{parts[1]}" if len(parts) >= 2 else import_path
    return import_path.split("/")[0]


def resolve_import_path(current_dir: PathLike, import_path: str) -> Path:
    """Join a relative import onto ``current_dir``, handling ``.`` and ``..``."""
    resolved = Path(current_dir)
    for part in import_path.split("/"):
        if part == ".":
            continue
        if part == "..":
            resolved = resolved.parent
        else:
            resolved = resolved / part
    return resolved


def find_similar_file(current_dir: PathLike, import_path: str) -> str | None:
    """Suggest a nearby file whose name contains the imported file's name."""
    current = Path(current_dir)
    filename = import_path.split("/")[-1].lower()
    parent = current.parent
    if parent == current:
        return None
    for search_dir, prefix in ((current, "./"), (parent, "../")):
        try:
            entries = sorted(search_dir.iterdir(), key=lambda p: p.name)
        except OSError:
            continue
        for entry in entries:
            if filename in Path(entry.name).stem.lower():
                return f"{prefix}{entry.name}"
    return None


def check_node_modules_import(
    current_file: PathLike,
    project_root: PathLike,
    import_path: str,
    line_num: int,
    import_statement: str,
) -> BrokenImport | None:
    """Report a package import whose package is missing from node_modules."""
    name = package_name(import_path)
    if (Path(project_root) / "node_modules" / name).exists():
        return None
    return BrokenImport(
        file=str(current_file),
        line=line_num,
        import_statement=import_statement,
        import_path=import_path,
        error_type=BrokenImportType.MODULE_NOT_INSTALLED,
        suggestion=f"Run: npm install {name}",
    )


def check_import_validity(
    current_file: PathLike,
    project_root: PathLike,
    import_path: str,
    line_num: int,
    import_statement: str,
    resolver: PathAliasResolver | None = None,
) -> BrokenImport | None:
    """Return a BrokenImport if ``import_path`` does not resolve, else None."""
    if not import_path.startswith("."):
        if resolver is not None:
            resolved = resolver.resolve_alias_path(import_path)
            if resolved is not None:
                if import_exists(resolved):
                    return None
                return BrokenImport(
                    file=str(current_file),
                    line=line_num,
                    import_statement=import_statement,
                    import_path=import_path,
                    error_type=BrokenImportType.FILE_NOT_FOUND,
                    suggestion=(
                        f"Path alias '{import_path}' resolves to "
                        f"'{resolved}' but file not found"
                    ),
                )
        return check_node_modules_import(
            current_file, project_root, import_path, line_num, import_statement
        )

    current_dir = Path(current_file).parent
    resolved = resolve_import_path(current_dir, import_path)
    if import_exists(resolved):
        return None
    return BrokenImport(
        file=str(current_file),
        line=line_num,
        import_statement=import_statement,
        import_path=import_path,
        error_type=BrokenImportType.FILE_NOT_FOUND,
        suggestion=find_similar_file(current_dir, import_path),
    )
"""Parsing of import statements and detection of used identifiers."""

from __future__ import annotations

import re
from typing import Iterable

from sniffcheck.imports_types import ImportType, ParsedImport

_IMPORT_STATEMENT = re.compile(r"""^import\s+(.+?)\s+from\s+['"]([^'"]+)['"]""")

_KEYWORDS_AND_BUILTINS = frozenset(
    {
        # JavaScript keywords
        "abstract", "as", "async", "await", "break", "case", "catch", "class",
        "const", "continue", "debugger", "default", "delete", "do", "else",
        "enum", "export", "extends", "false", "finally", "for", "from",
        "function", "get", "if", "implements", "import", "in", "instanceof",
        "interface", "let", "new", "null", "of", "package", "private",
        "protected", "public", "return", "set", "static", "super", "switch",
        "this", "throw", "true", "try", "typeof", "var", "void", "while",
        "with", "yield",
        # TypeScript keywords
        "any", "boolean", "declare", "infer", "is", "keyof", "module",
        "namespace", "never", "number", "object", "readonly", "require",
        "string", "symbol", "type", "undefined", "unique", "unknown",
        # Common globals
        "console", "window", "document", "global", "process", "Buffer",
        "setTimeout", "setInterval", "clearTimeout", "clearInterval",
        "JSON", "Math", "Date", "Error", "RegExp", "Array", "Object",
        "String", "Number", "Boolean", "Symbol", "BigInt", "Promise",
        # Node.js globals
        "__dirname", "__filename", "exports",
        # Test framework globals
        "describe", "it", "test", "expect", "beforeEach", "afterEach",
        "beforeAll", "afterAll", "jest", "jasmine", "mocha",
    }
)

_TYPESCRIPT_BUILTIN_TYPES = frozenset(
    {
        "Array", "Promise", "Record", "Partial", "Required", "Pick", "Omit",
        "Exclude", "Extract", "NonNullable", "Parameters", "ConstructorParameters",
        "ReturnType", "InstanceType", "ThisParameterType", "OmitThisParameter",
        "ThisType", "Uppercase", "Lowercase", "Capitalize", "Uncapitalize",
        "String", "Number", "Boolean", "Object", "Function", "Date", "RegExp",
        "Error", "Map", "Set", "WeakMap", "WeakSet", "ArrayBuffer", "DataView",
        "Int8Array", "Uint8Array", "Uint8ClampedArray", "Int16Array", "Uint16Array",
        "Int32Array", "Uint32Array", "Float32Array", "Float64Array", "BigInt64Array",
        "BigUint64Array",
    }
)

_TYPE_IDENTIFIER = re.compile(r"\b([A-Z][a-zA-Z0-9_]*)\b")
_GENERAL_USAGE = re.compile(r"\b([A-Z][a-zA-Z0-9_]*|[a-z][a-zA-Z0-9_]*)\b")
_REACT_HOOK_USAGE = re.compile(
    r"const\s*\[([^,\]]+),\s*([^\]]+)\]\s*=\s*(use[A-Z]\w*)"
)
_TYPE_ANNOTATION = re.compile(r":\s*([A-Z][a-zA-Z0-9_<>,\s\[\]]*)")
_GENERIC_USAGE = re.compile(r"<([A-Z][a-zA-Z0-9_<>,\s\[\]]*?)>")
_JSX_USAGE = re.compile(r"</?([A-Z][a-zA-Z0-9_.]*)")
_INTERFACE_EXTENDS = re.compile(r"(?:extends|implements)\s+([A-Z][a-zA-Z0-9_<>,\s]*)")
_FUNCTION_PARAM_TYPE = re.compile(r"\(\s*[^:)]*:\s*([A-Z][a-zA-Z0-9_<>,\s\[\]]*)")

# Patterns whose captured text holds type names to extract.
_TYPE_CONTEXTS = (
    _TYPE_ANNOTATION,
    _GENERIC_USAGE,
    _INTERFACE_EXTENDS,
    _FUNCTION_PARAM_TYPE,
)


def match_import_statement(line: str) -> re.Match[str] | None:
    """Match an ``import ... from '...'`` line; group 1 is the spec, group 2 the path."""
    return _IMPORT_STATEMENT.search(line)


def is_keyword_or_builtin(identifier: str) -> bool:
    return identifier in _KEYWORDS_AND_BUILTINS


def is_typescript_builtin_type(identifier: str) -> bool:
    return identifier in _TYPESCRIPT_BUILTIN_TYPES


def _first_word(text: str) -> str:
    words = text.split()
    return words[0] if words else ""


def _named_list(inner: str) -> list[str]:
    names = []
    for item in inner.split(","):
        trimmed = item.strip()
        if trimmed.startswith("type "):
            name = trimmed[5:].strip()
        else:
            name = _first_word(trimmed)
        if name:
            names.append(name)
    return names


def parse_import_statement(import_spec: str, module_path: str = "") -> ParsedImport:
    """Break the part between ``import`` and ``from`` into imported names."""
    spec = import_spec.strip()
    cleaned = spec[5:].strip() if spec.startswith("type ") else spec

    if cleaned.startswith("{") and cleaned.endswith("}"):
        return ParsedImport(ImportType.NAMED_IMPORT, named_imports=_named_list(cleaned[1:-1]))

    if " as " in cleaned and cleaned.startswith("*"):
        parts = cleaned.split(" as ")
        namespace = parts[1].strip() if len(parts) > 1 else ""
        return ParsedImport(ImportType.NAMESPACE_IMPORT, namespace_import=namespace)

    if "," in cleaned:
        parts = cleaned.split(",")
        named: list[str] = []
        for part in (p.strip() for p in parts[1:]):
            if part.startswith("{") and part.endswith("}"):
                named.extend(
                    name
                    for name in (_first_word(s.strip()) for s in part[1:-1].split(","))
                    if name
                )
        return ParsedImport(
            ImportType.DEFAULT_IMPORT,
            default_import=parts[0].strip(),
            named_imports=named,
        )

    return ParsedImport(ImportType.DEFAULT_IMPORT, default_import=cleaned)


def find_unused_items(
    parsed_import: ParsedImport, used_identifiers: Iterable[str]
) -> list[str]:
    """Imported names that never appear among ``used_identifiers``."""
    used = used_identifiers if isinstance(used_identifiers, (set, frozenset)) else set(
        used_identifiers
    )
    candidates: list[str] = []
    if parsed_import.default_import is not None:
        candidates.append(parsed_import.default_import)
    candidates.extend(parsed_import.named_imports)
    if parsed_import.namespace_import is not None:
        candidates.append(parsed_import.namespace_import)
    return [name for name in candidates if name not in used]


def extract_type_identifiers(type_str: str) -> set[str]:
    """Capitalised names in a type expression, minus built-in types."""
    return {
        m.group(0)
        for m in _TYPE_IDENTIFIER.finditer(type_str)
        if not is_typescript_builtin_type(m.group(0))
    }


def collect_used_identifiers(lines: Iterable[str]) -> set[str]:
    """Every identifier referenced outside import lines."""
    used: set[str] = set()
    for raw in lines:
        line = raw.strip()
        if match_import_statement(line):
            continue

        used.update(
            m.group(0)
            for m in _GENERAL_USAGE.finditer(line)
            if not is_keyword_or_builtin(m.group(0))
        )

        hook = _REACT_HOOK_USAGE.search(line)
        if hook:
            used.add(hook.group(3))

        for pattern in _TYPE_CONTEXTS:
            for m in pattern.finditer(line):
                used |= extract_type_identifiers(m.group(1))

        used.update(m.group(1) for m in _JSX_USAGE.finditer(line))
    return used
import pytest

from sniffcheck.imports_parser import (
    collect_used_identifiers,
    extract_type_identifiers,
    find_unused_items,
    is_keyword_or_builtin,
    is_typescript_builtin_type,
    match_import_statement,
    parse_import_statement,
)
from sniffcheck.imports_types import ImportType, ParsedImport


def test_match_import_statement_groups():
    m = match_import_statement("import React from 'react'")
    assert m is not None
    assert m.group(1) == "React"
    assert m.group(2) == "react"


def test_match_import_statement_double_quotes_and_named():
    m = match_import_statement('import { useState } from "react";')
    assert (m.group(1), m.group(2)) == ("{ useState }", "react")


def test_match_import_statement_rejects_other_lines():
    assert match_import_statement("const x = 1;") is None


def test_parse_default_import():
    parsed = parse_import_statement("React", "react")
    assert parsed.import_type is ImportType.DEFAULT_IMPORT
    assert parsed.default_import == "React"
    assert parsed.named_imports == []
    assert parsed.namespace_import is None


def test_parse_named_imports_with_alias():
    parsed = parse_import_statement("{ useState, useEffect as effect }", "react")
    assert parsed.import_type is ImportType.NAMED_IMPORT
    assert parsed.named_imports == ["useState", "useEffect"]
    assert parsed.default_import is None


def test_parse_type_only_import():
    parsed = parse_import_statement("type { Props }", "./types")
    assert parsed.import_type is ImportType.NAMED_IMPORT
    assert parsed.named_imports == ["Props"]


def test_parse_inline_type_import():
    parsed = parse_import_statement("{ type NextRequest, NextResponse }", "next/server")
    assert parsed.named_imports == ["NextRequest", "NextResponse"]


def test_parse_namespace_import():
    parsed = parse_import_statement("* as path", "path")
    assert parsed.import_type is ImportType.NAMESPACE_IMPORT
    assert parsed.namespace_import == "path"
    assert parsed.named_imports == []


def test_parse_mixed_import():
    parsed = parse_import_statement("React, { useState }", "react")
    assert parsed.import_type is ImportType.DEFAULT_IMPORT
    assert parsed.default_import == "React"
    assert parsed.named_imports == ["useState"]


def test_parse_empty_named_list_drops_blanks():
    parsed = parse_import_statement("{ a, , b, }", "x")
    assert parsed.named_imports == ["a", "b"]


def test_find_unused_items_order():
    parsed = ParsedImport(
        ImportType.DEFAULT_IMPORT,
        default_import="React",
        named_imports=["useState", "useMemo"],
        namespace_import="ns",
    )
    assert find_unused_items(parsed, {"useState"}) == ["React", "useMemo", "ns"]


def test_find_unused_items_all_used():
    parsed = ParsedImport(ImportType.NAMED_IMPORT, named_imports=["a", "b"])
    assert find_unused_items(parsed, {"a", "b", "c"}) == []


@pytest.mark.parametrize(
    "identifier, expected",
    [("const", True), ("console", True), ("describe", True), ("myValue", False)],
)
def test_is_keyword_or_builtin(identifier, expected):
    assert is_keyword_or_builtin(identifier) is expected


@pytest.mark.parametrize(
    "identifier, expected",
    [("Promise", True), ("Record", True), ("BigUint64Array", True), ("User", False)],
)
def test_is_typescript_builtin_type(identifier, expected):
    assert is_typescript_builtin_type(identifier) is expected


def test_extract_type_identifiers_skips_builtins():
    assert extract_type_identifiers("Promise<Record<string, User>>") == {"User"}


def test_collect_skips_import_lines():
    used = collect_used_identifiers(["import { Foo } from './foo'"])
    assert "Foo" not in used


def test_collect_type_annotation_and_keywords():
    used = collect_used_identifiers(["  const value: Foo = build();"])
    assert {"Foo", "value", "build"} <= used
    assert "const" not in used


def test_collect_jsx_member_component():
    used = collect_used_identifiers(["return <Icons.Star size={2} />"])
    assert "Icons.Star" in used


def test_collect_react_hook():
    used = collect_used_identifiers(["const [count, setCount] = useState(0)"])
    assert {"useState", "count", "setCount"} <= used


def test_unused_detection_round_trip():
    lines = [
        "import { Foo, Bar } from './things'",
        "export function make(x: Foo) { return x }",
    ]
    m = match_import_statement(lines[0])
    parsed = parse_import_statement(m.group(1), m.group(2))
    assert find_unused_items(parsed, collect_used_identifiers(lines)) == ["Bar"]
"""Static detection of code patterns that commonly leak memory."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Sequence

SOURCE_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx"})
MAX_DEPTH = 5
DEFAULT_EXCLUDED_DIRS = ("node_modules", ".git", ".next", "dist", "build", "coverage")

_LOOP_LOOKAHEAD = 20


class PatternType(Enum):
    UNBOUNDED_ARRAY_GROWTH = "UnboundedArrayGrowth"
    UNREMOVED_EVENT_LISTENER = "UnremovedEventListener"
    CIRCULAR_REFERENCE = "CircularReference"
    LARGE_OBJECT_RETENTION = "LargeObjectRetention"
    UNCONTROLLED_LOOP = "UncontrolledLoop"
    TIMER_LEAK = "TimerLeak"
    DOM_ELEMENT_LEAK = "DomElementLeak"
    CLOSURE_LEAK = "ClosureLeak"


class Severity(Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    INFO = "Info"


@dataclass
class MemoryPattern:
    file_path: str
    line_number: int
    pattern_type: PatternType
    code_snippet: str
    severity: Severity
    description: str
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "line_number": self.line_number,
            "pattern_type": self.pattern_type.value,
            "code_snippet": self.code_snippet,
            "severity": self.severity.value,
            "description": self.description,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class LeakRule:
    """A regular expression that flags one kind of leak-prone code."""

    pattern_type: PatternType
    regex: re.Pattern[str]
    severity: Severity
    description: str
    recommendation: str


@dataclass(frozen=True)
class LoopContext:
    has_break_conditions: bool


_EVENT_LISTENER = re.compile(r"\.addEventListener\s*\(")
_TIMER_FUNCTION = re.compile(r"\b(?:setInterval|setTimeout)\s*\(")
_ARRAY_PUSH = re.compile(r"\.push\s*\(")
_INFINITE_LOOP = re.compile(r"\bwhile\s*\(\s*true\s*\)|\bfor\s*\(\s*;\s*;\s*\)")
_CLOSURE = re.compile(r"\bfunction\b[^{]*\{.*\bfunction\b")


def default_rules(disabled: Iterable[str] = ()) -> list[LeakRule]:
    """The built-in rules, minus those whose pattern type name is in ``disabled``."""
    disabled_names = set(disabled)
    rules = [
        LeakRule(
            PatternType.UNREMOVED_EVENT_LISTENER,
            _EVENT_LISTENER,
            Severity.HIGH,
            "Event listener added - verify corresponding removal",
            "Add removeEventListener in cleanup function or useEffect return",
        ),
        LeakRule(
            PatternType.TIMER_LEAK,
            _TIMER_FUNCTION,
            Severity.HIGH,
            "Timer function used - verify cleanup",
            "Store timer ID and call clear function in cleanup",
        ),
        LeakRule(
            PatternType.UNBOUNDED_ARRAY_GROWTH,
            _ARRAY_PUSH,
            Severity.MEDIUM,
            "Array push without bounds checking",
            "Implement array size limits or periodic cleanup",
        ),
        LeakRule(
            PatternType.UNCONTROLLED_LOOP,
            _INFINITE_LOOP,
            Severity.MEDIUM,
            "Potential infinite loop pattern",
            "Verify proper exit conditions exist within the loop body",
        ),
        LeakRule(
            PatternType.CLOSURE_LEAK,
            _CLOSURE,
            Severity.LOW,
            "Nested function closures may retain outer scope",
            "Minimize closure scope and avoid unnecessary variable capture",
        ),
    ]
    return [r for r in rules if r.pattern_type.value not in disabled_names]


def is_in_string_literal_or_comment(line: str) -> bool:
    """Whether a line is a comment or starts inside a string literal."""
    stripped = line.strip()
    return stripped.startswith(("//", "/*", "*", '"', "'", "`"))


_SKIP_WORDS = {
    PatternType.UNCONTROLLED_LOOP: ("analytics", "tracking", "polyfill", "shim", "vendor"),
    PatternType.CLOSURE_LEAK: ("react", "component", "hook", "callback", "handler"),
    PatternType.CIRCULAR_REFERENCE: (
        "this.", "const ", "let ", "var ", "state.", "props.",
    ),
    PatternType.UNBOUNDED_ARRAY_GROWTH: ("map(", "filter(", "reduce(", "foreach("),
}


def should_skip_pattern(pattern_type: PatternType, line: str) -> bool:
    """Whether a match is a common false positive for ``pattern_type``."""
    lower = line.lower()
    return any(word in lower for word in _SKIP_WORDS.get(pattern_type, ()))


def analyze_loop_context(lines: Sequence[str], loop_line: int) -> LoopContext | None:
    """Look at the body of the loop starting at ``loop_line`` for exit statements.

    Returns None when no opening brace is found within the look-ahead window.
    """
    depth = 0
    opened = False
    has_exit = False
    for raw in lines[loop_line:loop_line + _LOOP_LOOKAHEAD]:
        line = raw.strip()
        for ch in line:
            if ch == "{":
                depth += 1
                opened = True
            elif ch == "}":
                depth -= 1
                if opened and depth == 0:
                    return LoopContext(has_exit)
        if opened and depth > 0:
            commented = line.startswith("//")
            if not commented and any(w in line for w in ("break", "return", "throw")):
                has_exit = True
            if "if" in line and ("break" in line or "return" in line):
                has_exit = True
    return LoopContext(has_exit) if opened else None


def analyze_file_for_patterns(
    file_path: str, content: str, rules: Sequence[LeakRule]
) -> list[MemoryPattern]:
    """Every rule match in ``content``, line by line."""
    lines = content.splitlines()
    found: list[MemoryPattern] = []
    for index, line in enumerate(lines):
        for rule in rules:
            if not rule.regex.search(line):
                continue
            if is_in_string_literal_or_comment(line):
                continue
            if should_skip_pattern(rule.pattern_type, line):
                continue
            severity = rule.severity
            description = rule.description
            recommendation = rule.recommendation
            if rule.pattern_type is PatternType.UNCONTROLLED_LOOP:
                context = analyze_loop_context(lines, index)
                if context is not None and context.has_break_conditions:
                    severity = Severity.LOW
                    description = f"{rule.description} (has exit conditions)"
                    recommendation = (
                        "Verify exit conditions are reachable in all execution paths"
                    )
            found.append(
                MemoryPattern(
                    file_path=file_path,
                    line_number=index + 1,
                    pattern_type=rule.pattern_type,
                    code_snippet=line.strip(),
                    severity=severity,
                    description=description,
                    recommendation=recommendation,
                )
            )
    return found


def matches_excluded_file(file_name: str, patterns: Iterable[str]) -> bool:
    """Whether ``file_name`` matches any exclusion; ``*`` is a wildcard."""
    for pattern in patterns:
        if "*" in pattern:
            try:
                if re.search(pattern.replace("*", ".*"), file_name):
                    return True
            except re.error:
                continue
        elif file_name == pattern:
            return True
    return False


def scan_for_memory_patterns(
    root: str | os.PathLike[str] | None = None,
    excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    excluded_files: Iterable[str] = (),
    disabled_patterns: Iterable[str] = (),
) -> tuple[list[MemoryPattern], list[str]]:
    """Scan sources under ``root``; return the findings and basic recommendations."""
    base = Path.cwd() if root is None else Path(root)
    skipped_dirs = set(excluded_dirs)
    file_exclusions = list(excluded_files)
    rules = default_rules(disabled_patterns)

    patterns: list[MemoryPattern] = []
    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        depth = len(current.relative_to(base).parts)
        if depth + 1 >= MAX_DEPTH:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if d not in skipped_dirs)
        for name in sorted(filenames):
            path = current / name
            if path.suffix not in SOURCE_EXTENSIONS:
                continue
            if matches_excluded_file(name, file_exclusions):
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            patterns.extend(analyze_file_for_patterns(str(path), content, rules))

    recommendations: list[str] = []
    if patterns:
        recommendations = [
            "Review identified memory leak patterns and implement proper cleanup",
            "Use proper cleanup in useEffect hooks and component unmounting",
            "Monitor memory usage during development and testing",
        ]
    return patterns, recommendations
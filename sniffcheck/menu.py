"""Overview of the available commands."""

from __future__ import annotations

_SECTIONS = (
    (
        "🔍 Code Quality",
        "───────────────",
        (
            ("sniff large", "Large Files", 'Find "smelly code" files over 100 lines'),
            (
                "sniff components",
                "Component Analysis",
                "Analyze and split large React/Vue/Angular components",
            ),
            ("sniff imports", "Unused Imports", "Detect and clean unused imports"),
            (
                "sniff types",
                "TypeScript Coverage",
                "Check TypeScript type coverage and quality",
            ),
        ),
    ),
    (
        "📊 Analysis",
        "───────────",
        (
            (
                "sniff context",
                "Project Context",
                "Analyze project structure and provide insights",
            ),
            (
                "sniff bundle",
                "Bundle Analysis",
                "Analyze bundle size and optimization opportunities",
            ),
            ("sniff perf", "Performance Audit", "Run Lighthouse performance audits"),
            ("sniff memory", "Memory Check", "Detect memory leaks during development"),
        ),
    ),
    (
        "🚀 Deploy",
        "─────────",
        (
            ("sniff env", "Environment Check", "Validate environment variables"),
            (
                "sniff deploy",
                "Pre-Deploy",
                "Complete deployment validation pipeline",
            ),
        ),
    ),
    (
        "⚙️  Configuration",
        "─────────────────",
        (
            (
                "sniff config init",
                "Initialize Config",
                "Create default configuration file",
            ),
            ("sniff config show", "Show Config", "Display current configuration"),
            (
                "sniff config validate",
                "Validate Config",
                "Check configuration file syntax",
            ),
        ),
    ),
)

_WORKFLOW = (
    ("# Project analysis", "sniff context"),
    ("# Daily development", "sniff large && sniff imports"),
    ("# Pre-commit", "sniff types"),
    ("# Pre-deployment", "sniff deploy"),
)


def _command(command: str, title: str, description: str) -> list[str]:
    return [
        f"    {command:<24} {title}",
        f"    {'':<24} {description}",
        "",
    ]


def render_menu() -> str:
    """Text of the tools menu."""
    lines = ["", "🛠️  Dev Tools Menu", "=" * 16, "", "Available development tools:", ""]
    for title, rule, commands in _SECTIONS:
        lines += [title, rule]
        for command in commands:
            lines += _command(*command)
        lines.append("")
    lines += ["💡 Usage Examples:", "=" * 18]
    lines.append(f"  {'sniff large':<20} # Check for large files")
    lines.append(f"  {'sniff deploy':<20} # Run full pre-deployment check")
    lines.append("")
    lines += ["📚 Quick Workflow:", "=" * 18]
    for comment, command in _WORKFLOW:
        lines += [f"  {comment}", f"  {command}", ""]
    return "\n".join(lines)


def run() -> int:
    """Print the menu and return the exit status."""
    print(render_menu())
    return 0
from sniffcheck.menu import render_menu, run


def test_menu_lists_every_command():
    text = render_menu()
    for command in (
        "sniff large",
        "sniff components",
        "sniff imports",
        "sniff types",
        "sniff context",
        "sniff bundle",
        "sniff perf",
        "sniff memory",
        "sniff env",
        "sniff deploy",
        "sniff config init",
        "sniff config show",
        "sniff config validate",
    ):
        assert command in text


def test_menu_section_order():
    text = render_menu()
    positions = [
        text.index(title)
        for title in ("🔍 Code Quality", "📊 Analysis", "🚀 Deploy", "⚙️  Configuration")
    ]
    assert positions == sorted(positions)
    assert text.index("💡 Usage Examples:") < text.index("📚 Quick Workflow:")


def test_command_columns_are_aligned():
    lines = render_menu().splitlines()
    large = next(line for line in lines if line.strip().startswith("sniff large") and "Large Files" in line)
    deploy = next(line for line in lines if "Pre-Deploy" in line)
    assert large.index("Large Files") == deploy.index("Pre-Deploy")
    following = lines[lines.index(large) + 1]
    assert following.strip() == 'Find "smelly code" files over 100 lines'
    assert following.index("Find") == large.index("Large Files")


def test_workflow_contains_daily_command():
    assert "  sniff large && sniff imports" in render_menu().splitlines()


def test_run_prints_menu(capsys):
    assert run() == 0
    out = capsys.readouterr().out
    assert out.rstrip("\n") == render_menu().rstrip("\n")
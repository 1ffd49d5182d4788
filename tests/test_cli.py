import json

import pytest

from sniffcheck.cli import main


def test_no_command_shows_menu(capsys):
    assert main([]) == 0
    assert "🛠️  Dev Tools Menu" in capsys.readouterr().out


def test_menu_command_matches_default(capsys):
    main([])
    default_out = capsys.readouterr().out
    assert main(["menu"]) == 0
    assert capsys.readouterr().out == default_out


def test_large_on_clean_project(tmp_path, capsys):
    assert main(["large", "-C", str(tmp_path)]) == 0
    assert "✅ No large files found! Your code is clean." in capsys.readouterr().out


def test_large_with_threshold_reports_file(tmp_path, capsys):
    (tmp_path / "a.ts").write_text("const x = 1;\n" * 6)
    code = main(["large", "--threshold", "5", "--json", "-C", str(tmp_path)])
    data = json.loads(capsys.readouterr().out)
    assert code == 1
    assert data["summary"]["large_files_found"] == 1
    assert data["files"][0]["path"] == "a.ts"


def test_imports_reports_broken_and_unused(tmp_path, capsys):
    (tmp_path / "a.ts").write_text("import { foo } from './missing';\n")
    code = main(["imports", "--json", "-C", str(tmp_path)])
    data = json.loads(capsys.readouterr().out)
    assert code == 1
    assert data["summary"]["broken_imports"] == 1
    assert data["summary"]["unused_imports"] == 1


def test_imports_on_empty_project(tmp_path, capsys):
    assert main(["imports", "-q", "-C", str(tmp_path)]) == 0
    assert "✅ No import issues found! Your imports are clean." in capsys.readouterr().out


def test_memory_json_on_empty_project(tmp_path, capsys):
    main(["memory", "--json", "-C", str(tmp_path)])
    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["total_patterns"] == 0


def test_unknown_command_is_rejected():
    with pytest.raises(SystemExit) as excinfo:
        main(["nonsense"])
    assert excinfo.value.code == 2
import json

import pytest

from sniffcheck.memory import (
    MemoryReport,
    NodeProcess,
    ProcessStatus,
    analyze_memory,
    calculate_memory_summary,
    generate_memory_recommendations,
    memory_mb_from_percentage,
    parse_ps_output,
    recommended_node_memory_mb,
    render_report,
    run,
    system_memory_info,
)
from sniffcheck.memory_patterns import MemoryPattern, PatternType, Severity

HEADER = "USER PID %CPU %MEM VSZ RSS TTY STAT START TIME COMMAND"


def _pattern(severity, pattern_type=PatternType.TIMER_LEAK):
    return MemoryPattern("a.ts", 1, pattern_type, "code()", severity, "desc", "rec")


def _process(status, pid=1):
    return NodeProcess(pid, 10.0, 0.5, "node app.js", status)


def _ps_line(pid, cpu, mem, command):
    return f"user {pid} {cpu} {mem} 1000 2000 ? S 10:00 0:01 {command}"


def test_small_system_uses_minimum_thresholds():
    info = system_memory_info(1.0)
    assert info.high_memory_threshold_mb == 256.0
    assert info.critical_memory_threshold_mb == 512.0
    assert info.available_memory_gb == info.total_memory_gb


def test_large_system_thresholds_scale():
    info = system_memory_info(64.0)
    assert info.high_memory_threshold_mb > 256.0
    assert info.critical_memory_threshold_mb > info.high_memory_threshold_mb


def test_detected_system_info_is_positive():
    info = system_memory_info()
    assert info.total_memory_gb > 0
    assert info.critical_memory_threshold_mb >= 512.0


def test_full_percentage_is_total_memory():
    info = system_memory_info(4.0)
    assert memory_mb_from_percentage(100.0, info) == info.total_memory_gb * 1024.0
    assert memory_mb_from_percentage(0.0, info) == 0.0


@pytest.mark.parametrize("total, expected", [(1.0, 2048), (64.0, 8192)])
def test_recommended_node_memory_is_clamped(total, expected):
    assert recommended_node_memory_mb(system_memory_info(total)) == expected


def test_parse_ps_output_keeps_node_processes():
    info = system_memory_info(8.0)
    output = "\n".join(
        [
            HEADER,
            _ps_line(101, 1.5, 0.1, "node server.js"),
            _ps_line(102, 0.0, 0.1, "/usr/bin/bash"),
            _ps_line(103, 2.0, 10.0, "npm run dev"),
            _ps_line(104, 3.0, 50.0, "yarn start"),
            "short node line",
        ]
    )
    processes = parse_ps_output(output, info)
    assert [p.pid for p in processes] == [101, 103, 104]
    assert [p.status for p in processes] == [
        ProcessStatus.NORMAL,
        ProcessStatus.HIGH_MEMORY,
        ProcessStatus.MEMORY_LEAK,
    ]
    assert processes[0].command == "node server.js"
    assert processes[0].cpu_usage == 1.5
    assert processes[1].memory_usage_mb == memory_mb_from_percentage(10.0, info)


def test_parse_ps_output_truncates_commands():
    info = system_memory_info(8.0)
    output = HEADER + "\n" + _ps_line(7, 0.1, 0.1, "node " + "x" * 100)
    (process,) = parse_ps_output(output, info)
    assert len(process.command) == 80
    assert process.command.startswith("node ")


def test_parse_ps_output_skips_unparsable_numbers():
    info = system_memory_info(8.0)
    output = HEADER + "\n" + _ps_line("abc", 0.1, 0.1, "node app.js")
    assert parse_ps_output(output, info) == []


def test_recommendations_for_event_listeners():
    patterns = [_pattern(Severity.HIGH, PatternType.UNREMOVED_EVENT_LISTENER)]
    recs = generate_memory_recommendations(patterns, [])
    assert recs[0] == "⚠️ 1 high-priority memory issues should be addressed"
    assert (
        "Implement proper event listener cleanup in React useEffect dependencies" in recs
    )
    assert not any("timers and intervals" in r for r in recs)
    assert recs[-1] == "Profile memory usage before and after major code changes"


def test_recommendations_for_heavy_processes():
    processes = [_process(ProcessStatus.HIGH_MEMORY), _process(ProcessStatus.NORMAL)]
    recs = generate_memory_recommendations([], processes)
    assert recs[0] == "Monitor 1 high-memory Node.js processes"
    assert len(recs) == 5


def test_calculate_summary_counts():
    patterns = [
        _pattern(Severity.CRITICAL),
        _pattern(Severity.HIGH),
        _pattern(Severity.HIGH),
        _pattern(Severity.MEDIUM),
        _pattern(Severity.LOW),
    ]
    processes = [
        _process(ProcessStatus.NORMAL),
        _process(ProcessStatus.HIGH_MEMORY),
        _process(ProcessStatus.MEMORY_LEAK),
    ]
    summary = calculate_memory_summary(patterns, processes)
    assert summary.total_patterns == len(patterns)
    assert summary.critical_issues == 1
    assert summary.high_issues == 2
    assert summary.medium_issues == 1
    assert summary.low_issues == 1
    assert summary.active_processes == len(processes)
    assert summary.high_memory_processes == 2


def _report(patterns, processes=()):
    processes = list(processes)
    return MemoryReport(
        patterns=patterns,
        node_processes=processes,
        summary=calculate_memory_summary(patterns, processes),
        recommendations=generate_memory_recommendations(patterns, processes),
        duration_ms=3,
        system_info=system_memory_info(16.0),
    )


def test_to_dict_is_json_ready():
    report = _report([_pattern(Severity.HIGH)], [_process(ProcessStatus.HIGH_MEMORY)])
    data = json.loads(json.dumps(report.to_dict()))
    assert set(data) == {
        "patterns",
        "node_processes",
        "summary",
        "recommendations",
        "duration_ms",
    }
    assert data["node_processes"][0]["status"] == "HighMemory"
    assert data["patterns"][0]["severity"] == "High"
    assert data["summary"]["high_issues"] == 1


def test_render_empty_report():
    text = render_report(_report([]))
    assert "✅ NO MAJOR MEMORY ISSUES" in text
    assert "max-old-space-size=8192" in text
    assert "(16.0GB RAM)" in text


def test_render_critical_report():
    text = render_report(_report([_pattern(Severity.CRITICAL)]))
    assert "🚨 CRITICAL MEMORY ISSUES DETECTED" in text
    assert "  • Fix critical memory leak patterns immediately" in text


def test_render_hides_low_priority_when_quiet():
    report = _report([_pattern(Severity.LOW)])
    assert "LOW PRIORITY ISSUES" in render_report(report, quiet=False)
    assert "LOW PRIORITY ISSUES" not in render_report(report, quiet=True)
    assert "📋 MINOR MEMORY CONCERNS" in render_report(report, quiet=True)


def test_render_lists_processes():
    report = _report([], [_process(ProcessStatus.MEMORY_LEAK, pid=42)])
    text = render_report(report)
    assert "PID: 42" in text
    assert "🔄 NODE.JS PROCESSES" in text


def test_analyze_memory_finds_patterns(tmp_path):
    (tmp_path / "app.ts").write_text("window.addEventListener('resize', onResize);\n")
    report = analyze_memory(tmp_path, quiet=True)
    assert [p.pattern_type for p in report.patterns] == [
        PatternType.UNREMOVED_EVENT_LISTENER
    ]
    assert report.summary.high_issues == 1
    assert (
        "Review identified memory leak patterns and implement proper cleanup"
        in report.recommendations
    )


def test_run_json_on_empty_project(tmp_path, capsys):
    run(json_output=True, root=tmp_path)
    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["total_patterns"] == 0
    assert data["patterns"] == []
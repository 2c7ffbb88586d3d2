"""Tests for analyze_file, analyze_project and project aggregation."""

import itertools
import threading

import pytest

from aicov_cli.analyzer import aggregate_project, analyze_file, analyze_project, summarize_folders
from aicov_cli.errors import CancellationRequested, ReadError, UnsupportedContent
from aicov_cli.models import FileAnalysis


def _file(path, code, generated):
    return FileAnalysis(
        file_path=path,
        language="python",
        total_lines=code,
        generated_lines=generated,
        human_lines=code - generated,
        comment_lines=0,
        empty_lines=0,
        generated_percentage=round(100 * generated / code),
        human_percentage=100 - round(100 * generated / code),
        confidence=50,
    )


def _provider(text):
    return lambda: text


def test_generated_file(generated_source, settings):
    analysis = analyze_file("users.py", generated_source, settings)

    assert analysis.language == "python"
    assert analysis.comment_lines == 3
    assert analysis.code_lines == 3
    assert analysis.generated_percentage == 100
    assert analysis.human_percentage == 0
    assert analysis.confidence >= 90
    assert {p.kind.value for p in analysis.detected_patterns} == {"comment", "structure"}


def test_human_file(human_source, settings):
    analysis = analyze_file("main.py", human_source, settings)

    assert analysis.generated_percentage == 0
    assert analysis.human_lines == analysis.code_lines == 8
    assert analysis.detected_patterns == ()
    assert analysis.confidence == 0


def test_blank_file(settings):
    analysis = analyze_file("empty.py", "\n\n\n", settings)

    assert analysis.generated_percentage == 0
    assert analysis.confidence == 0
    assert list(analysis.detected_patterns) == []
    assert analysis.total_lines == analysis.empty_lines == 3


def test_analysis_is_idempotent(generated_source, settings):
    assert analyze_file("a.py", generated_source, settings) == analyze_file("a.py", generated_source, settings)


def test_bytes_are_decoded(generated_source, settings):
    from_bytes = analyze_file("a.py", generated_source.encode("utf-8"), settings)
    assert from_bytes == analyze_file("a.py", generated_source, settings)


def test_binary_input_is_rejected(settings):
    with pytest.raises(UnsupportedContent):
        analyze_file("logo.py", b"\x89PNG\x00\x00", settings)


def test_line_weighting():
    """10 lines at 100% and 90 lines at 0% is 10% overall, not 50%."""
    project = aggregate_project("/p", 2, [_file("small.py", 10, 10), _file("big.py", 90, 0)])

    assert project.overall_percentage == 10
    assert project.generated_lines == 10
    assert project.human_lines == 90
    assert project.total_lines == 100
    assert project.analyzed_files == 2


def test_empty_project_reports_zero():
    project = aggregate_project("/p", 0, [])
    assert project.overall_percentage == 0
    assert project.analyzed_files == 0


def test_aggregation_is_order_independent(generated_source, human_source, settings):
    files = [
        ("gen.py", _provider(generated_source)),
        ("human.py", _provider(human_source)),
        ("blank.py", _provider("\n")),
    ]
    results = [analyze_project(list(order), "/p", settings) for order in itertools.permutations(files)]

    first = results[0]
    for other in results[1:]:
        assert other.total_lines == first.total_lines
        assert other.generated_lines == first.generated_lines
        assert other.human_lines == first.human_lines
        assert other.overall_percentage == first.overall_percentage
        assert sorted(f.file_path for f in other.file_analyses) == sorted(f.file_path for f in first.file_analyses)


def test_parallel_matches_sequential(generated_source, human_source, settings):
    files = [(f"f{i}.py", _provider(generated_source if i % 2 else human_source)) for i in range(8)]
    sequential = analyze_project(files, "/p", settings, workers=1)
    parallel = analyze_project(files, "/p", settings, workers=4)

    assert parallel.file_analyses == sequential.file_analyses
    assert parallel.overall_percentage == sequential.overall_percentage


def test_failing_files_are_skipped(generated_source, settings):
    def unreadable():
        raise ReadError("gone.py", "No such file")

    def broken_disk():
        raise OSError(5, "Input/output error")

    files = [
        ("gen.py", _provider(generated_source)),
        ("gone.py", unreadable),
        ("disk.py", broken_disk),
        ("blob.py", _provider(b"\x00\x01")),
    ]
    project = analyze_project(files, "/p", settings)

    assert project.total_files == 4
    assert project.analyzed_files == 1
    assert [s.path for s in project.skipped] == ["gone.py", "disk.py", "blob.py"]
    assert project.generated_lines == 3
    assert project.overall_percentage == 100


def test_cancelled_before_start(generated_source, settings):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(CancellationRequested):
        analyze_project([("a.py", _provider(generated_source))], "/p", settings, cancel_event=cancel)


def test_cancelled_between_files(generated_source, settings):
    cancel = threading.Event()
    seen = []

    def first():
        seen.append("a.py")
        cancel.set()
        return generated_source

    def second():
        seen.append("b.py")
        return generated_source

    with pytest.raises(CancellationRequested) as exc_info:
        analyze_project([("a.py", first), ("b.py", second)], "/p", settings, cancel_event=cancel)

    assert seen == ["a.py"]
    assert exc_info.value.context == {"completed": 1, "total": 2}


def test_project_to_dict(generated_source, settings):
    project = analyze_project([("gen.py", _provider(generated_source))], "/p", settings)
    data = project.to_dict()

    assert data["overallAiPercentage"] == 100
    assert data["fileAnalyses"][0]["aiPercentage"] == 100
    assert data["fileAnalyses"][0]["detectedPatterns"][0]["type"] == "comment"


def test_comment_markers_in_strings_keep_lines_as_code(settings):
    text = 'app.get("/api/*", handler);\nconst a = compute(1);\nconst b = compute(2);\nreturn a + b;\n'
    analysis = analyze_file("routes.ts", text, settings)

    assert analysis.code_lines == 4
    assert analysis.comment_lines == 0


def test_any_provider_failure_is_skipped(generated_source, settings):
    def bad_provider():
        raise ValueError("cannot decode buffer")

    project = analyze_project(
        [("gen.py", _provider(generated_source)), ("odd.py", bad_provider)], "/p", settings
    )

    assert project.analyzed_files == 1
    assert [s.path for s in project.skipped] == ["odd.py"]
    assert "ValueError" in project.skipped[0].reason


def test_folder_summary_sums_lines():
    """src holds 100% of 10 lines and 0% of 30 lines: 25%, not the 50% mean."""
    project = aggregate_project("/p", 3, [
        _file("/p/src/a.py", 10, 10),
        _file("/p/src/b.py", 30, 0),
        _file("/p/main.py", 20, 10),
    ])
    folders = summarize_folders(project)

    assert [f.path for f in folders] == [".", "src"]
    root, src = folders
    assert (root.files, root.generated_lines, root.human_lines, root.generated_percentage) == (1, 10, 10, 50)
    assert (src.files, src.generated_lines, src.human_lines, src.generated_percentage) == (2, 10, 30, 25)

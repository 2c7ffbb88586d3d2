"""Tests for file discovery, loading and the workspace coordinator."""

import shutil
import threading

import pytest

from aicov_cli.errors import ReadError, UnsupportedContent
from aicov_cli.git_client import discover_files, is_excluded, load_text
from aicov_cli.workspace import WorkspaceAnalyzer


@pytest.fixture
def project(tmp_path, generated_source, human_source):
    (tmp_path / "gen.py").write_text(generated_source)
    (tmp_path / "human.py").write_text(human_source)
    (tmp_path / "blob.py").write_bytes(b"\x00\x01\x02")
    (tmp_path / "logo.png").write_bytes(b"\x89PNG")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "dep.js").write_text("var a = 1;\n")
    (tmp_path / "app.min.js").write_text("var a=1;\n")
    return tmp_path


def test_discover_files_without_git(project, settings):
    names = sorted(p.name for p in discover_files(str(project), settings))
    assert names == ["blob.py", "gen.py", "human.py"]


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_discover_files_honours_gitignore(project, settings):
    import git

    git.Repo.init(project)
    (project / ".gitignore").write_text("human.py\nnode_modules/\n")
    names = sorted(p.name for p in discover_files(str(project), settings))
    assert names == ["blob.py", "gen.py"]


def test_is_excluded():
    assert is_excluded("web/app.min.js", ["*.min.js"])
    assert is_excluded("dist/bundle.py", ["dist/*"])
    assert not is_excluded("src/app.py", ["*.min.js", "dist/*"])


def test_load_text_errors(tmp_path):
    with pytest.raises(ReadError):
        load_text(str(tmp_path / "missing.py"), 1024)

    big = tmp_path / "big.py"
    big.write_text("x = 1\n" * 10)
    with pytest.raises(UnsupportedContent):
        load_text(str(big), 5)


def test_analyze_workspace(project, settings):
    workspace = WorkspaceAnalyzer(settings)
    analysis = workspace.analyze_workspace(str(project))

    assert analysis is not None
    assert analysis.total_files == 3
    assert analysis.analyzed_files == 2
    assert [s.path for s in analysis.skipped] == [str((project / "blob.py").resolve())]
    assert analysis.generated_lines == 3
    assert analysis.human_lines == 8
    assert analysis.overall_percentage == 27
    assert workspace.current_analysis is analysis
    assert len(workspace.cache) == 2


def test_cached_result_is_reused(project, settings):
    workspace = WorkspaceAnalyzer(settings)
    workspace.analyze_workspace(str(project))
    cached = workspace.get_file_analysis(str(project / "gen.py"))

    assert cached is not None
    assert workspace.analyze_file(str(project / "gen.py")) is cached


def test_dirty_document_bypasses_cache(project, settings, human_source):
    workspace = WorkspaceAnalyzer(settings)
    path = str(project / "gen.py")
    before = workspace.analyze_file(path)

    after = workspace.analyze_file(path, text=human_source, is_dirty=True)

    assert before.generated_percentage == 100
    assert after.generated_percentage == 0
    assert workspace.get_file_analysis(path) is after


def test_cancelled_pass_leaves_no_trace(project, settings):
    workspace = WorkspaceAnalyzer(settings)
    cancel = threading.Event()
    cancel.set()

    assert workspace.analyze_workspace(str(project), cancel_event=cancel) is None
    assert len(workspace.cache) == 0
    assert workspace.current_analysis is None


def test_clear_cache(project, settings):
    workspace = WorkspaceAnalyzer(settings)
    workspace.analyze_workspace(str(project))
    workspace.clear_cache()

    assert workspace.current_analysis is None
    assert workspace.get_file_analysis(str(project / "gen.py")) is None

import fnmatch
import os
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import git

from aicov_cli.config import AnalyzerSettings
from aicov_cli.detectors.preprocess import decode_source
from aicov_cli.errors import ReadError, UnsupportedContent
from aicov_cli.logging_config import get_logger

logger = get_logger(__name__)

# Skipped when walking a directory that is not a git work tree
DEFAULT_IGNORE_DIRS = frozenset([
    '.git', '.hg', '.svn', 'node_modules', '__pycache__', '.venv', 'venv',
    'env', '.tox', '.mypy_cache', '.pytest_cache', 'dist', 'build', '.idea',
    '.vscode', 'target', 'out', 'coverage',
])


def get_repo(path: str = "."):
    try:
        return git.Repo(path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        return None


def _git_files(root: Path) -> Optional[List[str]]:
    """Tracked plus untracked-but-not-ignored files, relative to ``root``."""
    if get_repo(str(root)) is None:
        return None
    try:
        out = git.Git(str(root)).ls_files("--cached", "--others", "--exclude-standard", "-z")
    except git.exc.GitCommandError as e:
        logger.warning("git ls-files failed in %s, falling back to a directory walk: %s", root, e)
        return None
    return sorted({p for p in out.split("\0") if p})


def _walk_files(root: Path) -> List[str]:
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in DEFAULT_IGNORE_DIRS)
        rel_dir = Path(dirpath).relative_to(root)
        for name in sorted(filenames):
            found.append((rel_dir / name).as_posix())
    return found


def is_excluded(relative: str, patterns: List[str]) -> bool:
    name = relative.rsplit("/", 1)[-1]
    return any(fnmatch.fnmatch(relative, p) or fnmatch.fnmatch(name, p) for p in patterns)


def discover_files(root: str, settings: AnalyzerSettings) -> List[Path]:
    """Candidate source files under ``root``, honouring ignore files and excludes."""
    root_path = Path(root).resolve()
    relative = _git_files(root_path)
    if relative is None:
        relative = _walk_files(root_path)

    extensions = {e.lower() for e in settings.include_extensions}
    candidates = []
    for rel in relative:
        if Path(rel).suffix.lower() not in extensions:
            continue
        if is_excluded(rel, settings.exclude_patterns):
            continue
        path = root_path / rel
        # --cached also lists tracked files deleted from the work tree
        if path.is_file():
            candidates.append(path)
    logger.debug("Discovered %d candidate files under %s", len(candidates), root_path)
    return candidates


def load_text(path: str, max_file_size: int) -> str:
    """Read a file as source text. Raises ReadError or UnsupportedContent."""
    try:
        size = os.path.getsize(path)
        if size > max_file_size:
            raise UnsupportedContent(path, f"file too large ({size} bytes)")
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ReadError(path, e.strerror or str(e)) from e
    return decode_source(data, path)


def text_providers(paths: List[Path], max_file_size: int) -> List[Tuple[str, Callable[[], str]]]:
    """(path, provider) pairs for ``analyze_project``; reading happens lazily."""
    return [(str(p), lambda p=p: load_text(str(p), max_file_size)) for p in paths]

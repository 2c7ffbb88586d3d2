"""
Workspace coordinator: owns the cache and the latest ProjectAnalysis.

Cache policy lives here, not in the cache: a document with unsaved edits
bypasses the cached record. A project pass is all-or-nothing: results are
written to the cache only after the pass finished without cancellation.
"""

import threading
from pathlib import Path
from typing import Optional, Union

from aicov_cli.analyzer import analyze_file, analyze_project
from aicov_cli.cache import AnalysisCache
from aicov_cli.config import AnalyzerSettings, load_settings
from aicov_cli.errors import CancellationRequested
from aicov_cli.git_client import discover_files, load_text, text_providers
from aicov_cli.logging_config import get_logger
from aicov_cli.models import FileAnalysis, ProjectAnalysis

logger = get_logger(__name__)


def _key(path: Union[str, Path]) -> str:
    return str(Path(path).resolve())


class WorkspaceAnalyzer:
    def __init__(self, settings: Optional[AnalyzerSettings] = None, cache: Optional[AnalysisCache] = None):
        self.settings = settings or load_settings()
        self.cache = cache if cache is not None else AnalysisCache()
        self._current: Optional[ProjectAnalysis] = None

    @property
    def current_analysis(self) -> Optional[ProjectAnalysis]:
        return self._current

    def analyze_workspace(self, root: str = ".", cancel_event: Optional[threading.Event] = None) -> Optional[ProjectAnalysis]:
        """Full project pass. Returns None when cancelled."""
        paths = discover_files(root, self.settings)
        files = text_providers(paths, self.settings.max_file_size)
        try:
            analysis = analyze_project(
                files,
                project_path=_key(root),
                settings=self.settings,
                workers=self.settings.workers,
                cancel_event=cancel_event,
            )
        except CancellationRequested as e:
            logger.info("%s; nothing was cached", e)
            return None

        for file_analysis in analysis.file_analyses:
            self.cache.put(file_analysis.file_path, file_analysis)
        self._current = analysis
        return analysis

    def analyze_file(self, path: str, text: Optional[str] = None, is_dirty: bool = False) -> FileAnalysis:
        """
        Analysis of one file, served from the cache unless the document has
        unsaved edits. ``text`` is the in-memory content of a dirty document;
        without it the file is read from disk.
        """
        key = _key(path)
        if not is_dirty:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        if text is None:
            text = load_text(key, self.settings.max_file_size)
        analysis = analyze_file(key, text, self.settings)
        self.cache.put(key, analysis)
        return analysis

    def get_file_analysis(self, path: str) -> Optional[FileAnalysis]:
        return self.cache.get(_key(path))

    def clear_cache(self) -> None:
        self.cache.clear()
        self._current = None

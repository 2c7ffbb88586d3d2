"""
In-memory store of the latest FileAnalysis per path.

No TTL and no history: an entry lives until the path is analyzed again or
the cache is cleared. Staleness (e.g. unsaved editor changes) is decided by
the caller, never here.
"""

import threading
from typing import Dict, List, Optional

from aicov_cli.logging_config import get_logger
from aicov_cli.models import FileAnalysis

logger = get_logger(__name__)


class AnalysisCache:
    """Thread-safe path -> FileAnalysis map.

    Records are immutable and writes replace the whole record under a lock,
    so a reader sees either the old analysis or the new one.
    """

    def __init__(self):
        self._entries: Dict[str, FileAnalysis] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Optional[FileAnalysis]:
        with self._lock:
            return self._entries.get(path)

    def put(self, path: str, analysis: FileAnalysis) -> None:
        with self._lock:
            self._entries[path] = analysis

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries = {}
        logger.debug("Cache cleared (%d entries dropped)", count)

    def paths(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

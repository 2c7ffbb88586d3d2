"""aicov: static estimate of machine-generated code share per file and per project."""

__version__ = "0.1.0"

from aicov_cli.analyzer import aggregate_project, analyze_file, analyze_project, summarize_folders
from aicov_cli.cache import AnalysisCache
from aicov_cli.models import DetectedPattern, FileAnalysis, FolderSummary, PatternKind, ProjectAnalysis

__all__ = [
    "AnalysisCache",
    "DetectedPattern",
    "FileAnalysis",
    "FolderSummary",
    "PatternKind",
    "ProjectAnalysis",
    "aggregate_project",
    "analyze_file",
    "analyze_project",
    "summarize_folders",
    "__version__",
]

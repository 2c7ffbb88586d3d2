"""
Engine entry points.

``analyze_file`` runs one text through preprocess -> detectors -> scoring.
``analyze_project`` does that for many files and reduces the results with
``aggregate_project``, which sums raw line counts before dividing so a
large file weighs more than a small one.
"""

import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import PurePath
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from aicov_cli.config import AnalyzerSettings, load_settings
from aicov_cli.detectors import run_detectors
from aicov_cli.detectors.preprocess import decode_source, language_for_path, preprocess
from aicov_cli.detectors.scoring import score_file
from aicov_cli.errors import CancellationRequested, ReadError, UnreadableInput
from aicov_cli.logging_config import get_logger
from aicov_cli.models import FileAnalysis, FolderSummary, ProjectAnalysis, SkippedFile, percent

logger = get_logger(__name__)

# Any exception a provider raises turns its file into a SkippedFile.
TextProvider = Callable[[], Union[str, bytes]]


def analyze_file(
    path: str,
    text: Union[str, bytes],
    settings: Optional[AnalyzerSettings] = None,
) -> FileAnalysis:
    """
    Analyze one file's content.
    Raises UnreadableInput (or UnsupportedContent) if the content is not source text.
    """
    settings = settings or load_settings()
    source = decode_source(text, path)
    language = language_for_path(path)
    lines = preprocess(source, language)
    patterns = run_detectors(lines, settings)
    analysis = score_file(path, lines, patterns, language)
    logger.debug(
        "%s: %d%% generated over %d code lines (confidence %d%%, %d patterns)",
        path, analysis.generated_percentage, analysis.code_lines,
        analysis.confidence, len(analysis.detected_patterns),
    )
    return analysis


def aggregate_project(
    project_path: str,
    total_files: int,
    analyses: Iterable[FileAnalysis],
    skipped: Iterable[SkippedFile] = (),
    timestamp: Optional[datetime] = None,
) -> ProjectAnalysis:
    """Line-weighted reduction of per-file analyses. Input order does not matter."""
    analyses = tuple(analyses)
    generated = sum(a.generated_lines for a in analyses)
    human = sum(a.human_lines for a in analyses)
    return ProjectAnalysis(
        project_path=project_path,
        total_files=total_files,
        analyzed_files=len(analyses),
        total_lines=sum(a.total_lines for a in analyses),
        generated_lines=generated,
        human_lines=human,
        overall_percentage=percent(generated, generated + human),
        file_analyses=analyses,
        skipped=tuple(skipped),
        timestamp=timestamp or datetime.now(),
    )


def _folder_of(file_path: str, project_path: str) -> str:
    parent = PurePath(file_path).parent
    if project_path:
        try:
            parent = parent.relative_to(project_path)
        except ValueError:
            pass
    return parent.as_posix()


def summarize_folders(analysis: ProjectAnalysis) -> List[FolderSummary]:
    """
    Roll file results up to the folder that directly holds them.
    Percentages come from summed line counts, most generated folder first.
    """
    totals = defaultdict(lambda: [0, 0, 0])
    for f in analysis.file_analyses:
        entry = totals[_folder_of(f.file_path, analysis.project_path)]
        entry[0] += 1
        entry[1] += f.generated_lines
        entry[2] += f.human_lines
    folders = [
        FolderSummary(path=path, files=files, generated_lines=generated, human_lines=human)
        for path, (files, generated, human) in totals.items()
    ]
    return sorted(folders, key=lambda s: (-s.generated_percentage, s.path))


def _analyze_one(
    path: str,
    provider: TextProvider,
    settings: AnalyzerSettings,
    cancel_event: Optional[threading.Event],
) -> Union[FileAnalysis, SkippedFile, None]:
    if cancel_event is not None and cancel_event.is_set():
        return None
    try:
        text = provider()
    except (ReadError, UnreadableInput) as e:
        logger.warning("Skipping %s: %s", path, e)
        return SkippedFile(path=path, reason=str(e))
    except OSError as e:
        logger.warning("Skipping %s: %s", path, e)
        return SkippedFile(path=path, reason=str(ReadError(path, e.strerror or str(e))))
    except Exception as e:
        logger.warning("Skipping %s: provider raised %s", path, type(e).__name__, exc_info=True)
        return SkippedFile(path=path, reason=str(ReadError(path, f"{type(e).__name__}: {e}")))
    try:
        return analyze_file(path, text, settings)
    except UnreadableInput as e:
        logger.warning("Skipping %s: %s", path, e)
        return SkippedFile(path=path, reason=str(e))


def analyze_project(
    files: Sequence[Tuple[str, TextProvider]],
    project_path: str = "",
    settings: Optional[AnalyzerSettings] = None,
    workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> ProjectAnalysis:
    """
    Analyze every (path, text_provider) pair and aggregate the results.

    Files whose provider or content fails are counted in ``total_files`` and
    listed in ``skipped``; they never abort the pass. Cancellation is only
    checked between files; if it is requested the whole pass is discarded
    and CancellationRequested is raised.
    """
    settings = settings or load_settings()
    files = list(files)

    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(
                lambda item: _analyze_one(item[0], item[1], settings, cancel_event), files
            ))
    else:
        outcomes = []
        for path, provider in files:
            if cancel_event is not None and cancel_event.is_set():
                break
            outcomes.append(_analyze_one(path, provider, settings, cancel_event))

    if cancel_event is not None and cancel_event.is_set():
        done = sum(1 for o in outcomes if o is not None)
        logger.info("Project pass cancelled after %d of %d files", done, len(files))
        raise CancellationRequested(done, len(files))

    analyses: List[FileAnalysis] = [o for o in outcomes if isinstance(o, FileAnalysis)]
    skipped = [o for o in outcomes if isinstance(o, SkippedFile)]
    result = aggregate_project(project_path, len(files), analyses, skipped)
    logger.info(
        "Analyzed %d of %d files: %d%% generated",
        result.analyzed_files, result.total_files, result.overall_percentage,
    )
    return result

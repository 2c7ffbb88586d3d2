"""Detector families, keyed by the pattern kind they emit.

The set is closed: adding a detector means adding a ``PatternKind`` member
and an entry here. Detectors are pure functions of the preprocessed lines
and the settings, so they can run in any order.
"""

from typing import Callable, Dict, List, Sequence

from aicov_cli.config import AnalyzerSettings
from aicov_cli.detectors.comment import detect_comment_patterns
from aicov_cli.detectors.complexity import detect_complexity_patterns
from aicov_cli.detectors.naming import detect_naming_patterns
from aicov_cli.detectors.structural import detect_structure_patterns
from aicov_cli.logging_config import get_logger
from aicov_cli.models import DetectedPattern, LineRecord, PatternKind

Detector = Callable[[Sequence[LineRecord], AnalyzerSettings], List[DetectedPattern]]

DETECTORS: Dict[PatternKind, Detector] = {
    PatternKind.COMMENT: detect_comment_patterns,
    PatternKind.STRUCTURE: detect_structure_patterns,
    PatternKind.NAMING: detect_naming_patterns,
    PatternKind.COMPLEXITY: detect_complexity_patterns,
}

logger = get_logger(__name__)


def run_detectors(lines: Sequence[LineRecord], settings: AnalyzerSettings) -> List[DetectedPattern]:
    """Run every detector family and concatenate their matches in kind order."""
    patterns = []
    for kind in PatternKind:
        found = DETECTORS[kind](lines, settings)
        logger.debug("%s detector: %d pattern(s)", kind.value, len(found))
        patterns.extend(found)
    return patterns


__all__ = [
    "DETECTORS",
    "Detector",
    "run_detectors",
    "detect_comment_patterns",
    "detect_complexity_patterns",
    "detect_naming_patterns",
    "detect_structure_patterns",
]

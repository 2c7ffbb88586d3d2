"""
Per-Line Score Aggregator
─────────────────────────
Turns detector output into a FileAnalysis.

  1. every code line starts at likelihood 0
  2. each pattern folds its confidence into the lines it covers with a
     saturating union:  l = 1 - (1 - l) * (1 - c/100)
  3. a code line is generated when l >= DECISION_THRESHOLD, else human
  4. percentages are line counts over code lines, rounded half up
  5. confidence = 0.5 * coverage + 0.5 * strength, where coverage is the
     share of code lines touched by any pattern and strength the mean
     likelihood of the lines classified as generated

Lines that are not code (blank, comment) never receive a likelihood even if
a pattern lists them.
"""

from functools import reduce
from typing import Dict, Iterable, List, Sequence

from aicov_cli.detectors.preprocess import line_counts
from aicov_cli.models import DetectedPattern, FileAnalysis, LineKind, LineRecord, percent

DECISION_THRESHOLD = 0.5
COVERAGE_WEIGHT = 0.5
STRENGTH_WEIGHT = 0.5


def combine_likelihood(current: float, confidence: int) -> float:
    """Saturating union of a line likelihood with one pattern confidence (0-100)."""
    return 1.0 - (1.0 - current) * (1.0 - confidence / 100.0)


def line_likelihoods(lines: Sequence[LineRecord], patterns: Iterable[DetectedPattern]) -> Dict[int, float]:
    """Combined generation likelihood for each code line number."""
    code_numbers = {l.number for l in lines if l.kind is LineKind.CODE}
    contributions: Dict[int, List[int]] = {n: [] for n in code_numbers}
    for pattern in patterns:
        for number in pattern.line_numbers:
            if number in code_numbers:
                contributions[number].append(pattern.confidence)
    return {
        number: reduce(combine_likelihood, confidences, 0.0)
        for number, confidences in contributions.items()
    }


def is_generated(likelihood: float) -> bool:
    return likelihood >= DECISION_THRESHOLD


def file_confidence(likelihoods: Dict[int, float], touched: int) -> int:
    if not likelihoods:
        return 0
    coverage = touched / len(likelihoods)
    generated = [l for l in likelihoods.values() if is_generated(l)]
    strength = sum(generated) / len(generated) if generated else 0.0
    return percent(COVERAGE_WEIGHT * coverage + STRENGTH_WEIGHT * strength, 1)


def score_file(
    path: str,
    lines: Sequence[LineRecord],
    patterns: Sequence[DetectedPattern],
    language: str = "text",
) -> FileAnalysis:
    empty, comments, _ = line_counts(lines)
    likelihoods = line_likelihoods(lines, patterns)

    if not likelihoods:
        return FileAnalysis(
            file_path=path,
            language=language,
            total_lines=len(lines),
            generated_lines=0,
            human_lines=0,
            comment_lines=comments,
            empty_lines=empty,
            generated_percentage=0,
            human_percentage=100,
            confidence=0,
            detected_patterns=(),
        )

    generated = sum(1 for l in likelihoods.values() if is_generated(l))
    touched = len({n for p in patterns for n in p.line_numbers} & likelihoods.keys())
    generated_pct = percent(generated, len(likelihoods))

    return FileAnalysis(
        file_path=path,
        language=language,
        total_lines=len(lines),
        generated_lines=generated,
        human_lines=len(likelihoods) - generated,
        comment_lines=comments,
        empty_lines=empty,
        generated_percentage=generated_pct,
        human_percentage=100 - generated_pct,
        confidence=file_confidence(likelihoods, touched),
        detected_patterns=tuple(patterns),
    )

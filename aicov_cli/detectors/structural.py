"""
Structural Repetition Detector
──────────────────────────────
Generators emit templated blocks: the same code shape stamped out several
times with only names and literals changed. Each code line is reduced to a
token skeleton (keywords and punctuation kept, identifiers -> I, numbers -> N,
strings -> S) and two kinds of repetition are flagged:

1. Line skeletons
   One skeleton appearing at least ``structure_min_repeats`` times, each
   occurrence within ``structure_window`` lines of the previous one.

2. Block skeletons
   A run of ``structure_block_lines`` consecutive code lines whose joined
   skeleton repeats (non-overlapping) within the same span.

Confidence grows with the repetition count and with skeleton length, since
long identical shapes are less likely to be coincidence.
"""

import re
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from aicov_cli.config import AnalyzerSettings
from aicov_cli.detectors.tokens import skeleton
from aicov_cli.models import DetectedPattern, LineRecord, PatternKind

# Import lists are repetitive in every codebase.
_IMPORT_LINE = re.compile(r'^\s*(import|from|#include|using|package|require|use|extern crate)\b')


def _confidence(repeats: int, token_count: int) -> int:
    score = 25 + 12 * (repeats - 1) + 3 * min(token_count, 10)
    return int(min(95, score))


def _clusters(numbers: List[int], window: int) -> List[List[int]]:
    """Split sorted line numbers wherever the gap exceeds ``window``."""
    clusters = [[numbers[0]]]
    for n in numbers[1:]:
        if n - clusters[-1][-1] <= window:
            clusters[-1].append(n)
        else:
            clusters.append([n])
    return clusters


def _line_repeats(code: Sequence[Tuple[LineRecord, List[str]]], settings) -> List[DetectedPattern]:
    by_shape: Dict[Tuple[str, ...], List[int]] = defaultdict(list)
    for line, shape in code:
        if len(shape) >= settings.structure_min_tokens and not _IMPORT_LINE.match(line.text):
            by_shape[tuple(shape)].append(line.number)

    patterns = []
    for shape, numbers in by_shape.items():
        for cluster in _clusters(numbers, settings.structure_window):
            if len(cluster) < settings.structure_min_repeats:
                continue
            patterns.append(DetectedPattern(
                kind=PatternKind.STRUCTURE,
                description=f"Identical line shape repeated {len(cluster)} times within {cluster[-1] - cluster[0] + 1} lines",
                confidence=_confidence(len(cluster), len(shape)),
                signature=" ".join(shape),
                line_numbers=tuple(cluster),
            ))
    return patterns


def _block_repeats(code: Sequence[Tuple[LineRecord, List[str]]], settings) -> List[DetectedPattern]:
    size = settings.structure_block_lines
    if len(code) < size * settings.structure_min_block_repeats:
        return []

    starts: Dict[Tuple[str, ...], List[int]] = defaultdict(list)
    for i in range(len(code) - size + 1):
        window = code[i:i + size]
        shapes = [s for _, s in window]
        # a block made of one repeated line shape is already a line repeat
        if len(set(map(tuple, shapes))) == 1:
            continue
        if sum(len(s) for s in shapes) < settings.structure_min_tokens * size:
            continue
        if any(_IMPORT_LINE.match(l.text) for l, _ in window):
            continue
        key = tuple(" ".join(s) for s in shapes)
        # keep occurrences non-overlapping
        if starts[key] and i - starts[key][-1] < size:
            continue
        starts[key].append(i)

    patterns = []
    for key, indexes in starts.items():
        first_lines = [code[i][0].number for i in indexes]
        for cluster in _clusters(first_lines, settings.structure_window):
            if len(cluster) < settings.structure_min_block_repeats:
                continue
            numbers = []
            for i in indexes:
                if code[i][0].number in cluster:
                    numbers.extend(l.number for l, _ in code[i:i + size])
            token_count = sum(len(k.split()) for k in key)
            patterns.append(DetectedPattern(
                kind=PatternKind.STRUCTURE,
                description=f"{size}-line block shape repeated {len(cluster)} times",
                confidence=_confidence(len(cluster), token_count),
                signature=" / ".join(key),
                line_numbers=tuple(numbers),
            ))
    return patterns


def detect_structure_patterns(lines: Sequence[LineRecord], settings: AnalyzerSettings) -> List[DetectedPattern]:
    code = [(l, skeleton(l.text)) for l in lines if l.is_code]
    if len(code) < settings.structure_min_repeats:
        return []
    patterns = _line_repeats(code, settings) + _block_repeats(code, settings)
    return sorted(patterns, key=lambda p: (p.line_numbers[0], p.signature))

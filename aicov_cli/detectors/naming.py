"""
Naming Convention Detector
──────────────────────────
Signals tracked:
  - placeholder names: foo/bar/tmp/my_*/example*, and sequential names
    that share a stem with different numeric suffixes (item1, item2, ...)
  - boilerplate verbs: long handler-style names (handleUserSubmit,
    fetch_user_profile_data) making up a large share of the identifiers
  - uniform islands: a block whose multi-word identifiers all follow one
    convention while the rest of the file mixes conventions

Confidence follows the share of identifiers matching the suspicious
convention.
"""

import re
from collections import Counter, defaultdict
from typing import Dict, List, Sequence, Set, Tuple

from aicov_cli.config import AnalyzerSettings
from aicov_cli.detectors.tokens import identifiers, naming_style, split_words
from aicov_cli.models import DetectedPattern, LineRecord, PatternKind

_PLACEHOLDER = re.compile(
    r'^(foo|bar|baz|qux|quux|tmp\d*|temp\d*|dummy\w*|placeholder\w*|example\w*|sample\w*|'
    r'my_\w+|my[A-Z]\w*|some_\w+|some[A-Z]\w*|your_\w+|your[A-Z]\w*|thing\d*|stuff)$'
)
_NUMBERED = re.compile(r'^([A-Za-z_]*[A-Za-z])_?(\d+)$')

# Typical assistant-generated identifier prefixes
_BOILERPLATE_PREFIXES = frozenset([
    "handle", "on", "get", "set", "fetch", "update", "create", "delete",
    "parse", "format", "process", "validate", "render", "initialize",
])

_CASE_STYLES = ("snake_case", "camelCase")


def _occurrences(code: Sequence[LineRecord]) -> List[Tuple[str, int]]:
    found = []
    for line in code:
        found.extend((ident, line.number) for ident in identifiers(line.text))
    return found


def _confidence(fraction: float, base: int = 30) -> int:
    return int(round(min(90.0, base + 200 * fraction)))


def _placeholders(occ: List[Tuple[str, int]], settings) -> List[DetectedPattern]:
    stems: Dict[str, Set[str]] = defaultdict(set)
    for ident, _ in occ:
        m = _NUMBERED.match(ident)
        if m:
            stems[m.group(1)].add(m.group(2))
    sequential = {s for s, nums in stems.items() if len(nums) >= 2}

    hits = []
    for ident, number in occ:
        m = _NUMBERED.match(ident)
        if _PLACEHOLDER.match(ident) or (m and m.group(1) in sequential):
            hits.append((ident, number))
    if len(hits) < settings.naming_min_matches:
        return []

    names = sorted({i for i, _ in hits})
    return [DetectedPattern(
        kind=PatternKind.NAMING,
        description=f"Placeholder or sequential identifiers ({len(names)} distinct names)",
        confidence=_confidence(len(hits) / len(occ)),
        signature=", ".join(names[:8]),
        line_numbers=tuple(n for _, n in hits),
    )]


def _boilerplate(occ: List[Tuple[str, int]], settings) -> List[DetectedPattern]:
    distinct = {i for i, _ in occ}
    verbose = set()
    for ident in distinct:
        parts = split_words(ident)
        if len(parts) >= 3 and parts[0] in _BOILERPLATE_PREFIXES:
            verbose.add(ident)
    if len(verbose) < settings.naming_min_matches:
        return []
    fraction = len(verbose) / len(distinct)
    if fraction < settings.naming_verbose_fraction:
        return []
    return [DetectedPattern(
        kind=PatternKind.NAMING,
        description=f"Boilerplate verb-prefixed names make up {fraction * 100:.0f}% of identifiers",
        confidence=_confidence(fraction - settings.naming_verbose_fraction, base=35),
        signature=", ".join(sorted(verbose)[:8]),
        line_numbers=tuple(n for i, n in occ if i in verbose),
    )]


def _uniform_islands(code: Sequence[LineRecord], settings) -> List[DetectedPattern]:
    size = settings.naming_block_lines
    if len(code) < size * 2:
        return []

    blocks = [code[i:i + size] for i in range(0, len(code), size)]
    styles = []
    for block in blocks:
        counter = Counter()
        for line in block:
            for ident in set(identifiers(line.text)):
                style = naming_style(ident)
                if style in _CASE_STYLES:
                    counter[style] += 1
        styles.append(counter)

    patterns = []
    for idx, (block, counter) in enumerate(zip(blocks, styles)):
        total = sum(counter.values())
        if total < settings.naming_min_identifiers or len(counter) != 1:
            continue
        style = next(iter(counter))
        rest = Counter()
        for j, other in enumerate(styles):
            if j != idx:
                rest.update(other)
        rest_total = sum(rest.values())
        if not rest_total:
            continue
        contrast = 1 - rest[style] / rest_total
        if contrast < settings.naming_min_contrast:
            continue
        patterns.append(DetectedPattern(
            kind=PatternKind.NAMING,
            description=f"Block uses only {style} names while the rest of the file mixes conventions",
            confidence=int(round(min(85.0, 35 + 50 * contrast))),
            signature=style,
            line_numbers=tuple(l.number for l in block),
        ))
    return patterns


def detect_naming_patterns(lines: Sequence[LineRecord], settings: AnalyzerSettings) -> List[DetectedPattern]:
    code = [l for l in lines if l.is_code]
    occ = _occurrences(code)
    if not occ:
        return []
    return _placeholders(occ, settings) + _boilerplate(occ, settings) + _uniform_islands(code, settings)

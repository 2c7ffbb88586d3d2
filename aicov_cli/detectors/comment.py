"""
Comment-Style Detector
──────────────────────
Two signals from comment text:

1. Templated comments
   Generated scaffolding repeats the same comment shape: docstring section
   headers (Args:, Returns:, @param ...) and sentence templates such as
   "Get the user by id" / "Get the order by id". Comments are keyed by a
   template (section marker, or leading word + word count); any template
   seen often enough becomes a pattern.

2. Restating comments
   A comment whose words mostly reappear in the identifiers of the next
   code line ("# increment the counter" above "counter += 1") narrates
   the code instead of explaining it.

Each pattern covers the comment lines and the code line each comment sits
above, so the signal lands on substantive lines.
"""

import re
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from aicov_cli.config import AnalyzerSettings
from aicov_cli.detectors.tokens import comment_text, identifiers, split_words, words
from aicov_cli.models import DetectedPattern, LineKind, LineRecord, PatternKind

_SECTION_MARKER = re.compile(
    r'^(args|arguments|parameters|params|returns?|yields|raises|throws|example|examples|note|'
    r'attributes|@param|@returns?|@throws|@type|@example|:param|:returns?|:raises)\b:?',
    re.IGNORECASE,
)

_STOP_WORDS = frozenset(
    "the a an of to and or for in on at by with from this that is are be it its "
    "we our if then else when will can should into as".split()
)


def _template_key(text: str, min_words: int) -> Optional[Tuple[str, ...]]:
    marker = _SECTION_MARKER.match(text)
    if marker:
        return ("section", marker.group(1).lower().lstrip('@:'))
    tokens = words(text)
    if len(tokens) < min_words:
        return None
    return ("sentence", tokens[0], str(len(tokens)))


def _next_code_line(lines: Sequence[LineRecord], index: int) -> Optional[LineRecord]:
    for line in lines[index + 1:]:
        if line.kind is LineKind.CODE:
            return line
        if line.kind is LineKind.BLANK:
            return None
    return None


def _confidence(matched: int, total: int) -> int:
    return int(round(min(90.0, 30 + 60 * matched / max(total, 1))))


def _templated(lines, comments, settings) -> List[DetectedPattern]:
    groups: Dict[Tuple[str, ...], List[int]] = defaultdict(list)
    for idx, line in comments:
        key = _template_key(comment_text(line.text), settings.comment_min_words)
        if key is not None:
            groups[key].append(idx)

    repeated = {k: v for k, v in groups.items() if len(v) >= settings.comment_min_template_repeats}
    templated_total = sum(len(v) for v in repeated.values())
    patterns = []
    for key, indexes in sorted(repeated.items(), key=lambda kv: kv[1][0]):
        numbers = set()
        for idx in indexes:
            numbers.add(lines[idx].number)
            target = _next_code_line(lines, idx)
            if target is not None:
                numbers.add(target.number)
        if key[0] == "section":
            description = f"Docstring section header '{key[1]}' repeated {len(indexes)} times"
            signature = key[1]
        else:
            description = f"Templated comments starting with '{key[1]}' ({key[2]} words) repeated {len(indexes)} times"
            signature = f"{key[1]} ... ({key[2]} words)"
        patterns.append(DetectedPattern(
            kind=PatternKind.COMMENT,
            description=description,
            confidence=_confidence(templated_total, len(comments)),
            signature=signature,
            line_numbers=tuple(numbers),
        ))
    return patterns


def _restating(lines, comments, settings) -> List[DetectedPattern]:
    numbers = []
    examples = []
    for idx, line in comments:
        text = comment_text(line.text)
        said = {w for w in words(text) if len(w) >= 3 and w not in _STOP_WORDS}
        if len(said) < 2:
            continue
        target = _next_code_line(lines, idx)
        if target is None:
            continue
        code_words = set()
        for ident in identifiers(target.text):
            code_words.update(split_words(ident))
        overlap = len(said & code_words) / len(said)
        if overlap >= settings.comment_restate_overlap:
            numbers.extend((line.number, target.number))
            examples.append(text)

    if not numbers:
        return []
    return [DetectedPattern(
        kind=PatternKind.COMMENT,
        description=f"{len(examples)} comment(s) restate the code line that follows",
        confidence=_confidence(2 * len(examples), len(comments)),
        signature=examples[0],
        line_numbers=tuple(numbers),
    )]


def detect_comment_patterns(lines: Sequence[LineRecord], settings: AnalyzerSettings) -> List[DetectedPattern]:
    comments = [(i, l) for i, l in enumerate(lines) if l.kind is LineKind.COMMENT]
    if not comments:
        return []
    return _templated(lines, comments, settings) + _restating(lines, comments, settings)

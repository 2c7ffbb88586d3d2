"""Result records produced by the engine.

All records are frozen: a new analysis pass supersedes a record, it never
mutates one.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Tuple


class LineKind(str, Enum):
    BLANK = "blank"
    COMMENT = "comment"
    CODE = "code"


class PatternKind(str, Enum):
    """The closed set of detector families."""

    COMMENT = "comment"
    STRUCTURE = "structure"
    NAMING = "naming"
    COMPLEXITY = "complexity"


def percent(part: float, whole: float) -> int:
    """Integer percentage rounded half up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


@dataclass(frozen=True)
class LineRecord:
    number: int
    text: str
    kind: LineKind

    @property
    def is_code(self) -> bool:
        return self.kind is LineKind.CODE


@dataclass(frozen=True)
class DetectedPattern:
    kind: PatternKind
    description: str
    confidence: int
    signature: str
    line_numbers: Tuple[int, ...]

    def __post_init__(self):
        if not self.line_numbers:
            raise ValueError("a detected pattern must cover at least one line")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"confidence out of range: {self.confidence}")
        if min(self.line_numbers) < 1:
            raise ValueError("line numbers are 1-based")
        object.__setattr__(self, "line_numbers", tuple(sorted(set(self.line_numbers))))

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "description": self.description,
            "confidence": self.confidence,
            "pattern": self.signature,
            "lineNumbers": list(self.line_numbers),
        }


@dataclass(frozen=True)
class FileAnalysis:
    file_path: str
    language: str
    total_lines: int
    generated_lines: int
    human_lines: int
    comment_lines: int
    empty_lines: int
    generated_percentage: int
    human_percentage: int
    confidence: int
    detected_patterns: Tuple[DetectedPattern, ...] = ()

    def __post_init__(self):
        if self.generated_percentage + self.human_percentage != 100:
            raise ValueError("generated and human percentages must sum to 100")
        if self.generated_lines + self.human_lines != self.code_lines:
            raise ValueError("every code line must be attributed exactly once")

    @property
    def code_lines(self) -> int:
        return self.total_lines - self.empty_lines - self.comment_lines

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "language": self.language,
            "totalLines": self.total_lines,
            "aiGeneratedLines": self.generated_lines,
            "humanWrittenLines": self.human_lines,
            "commentLines": self.comment_lines,
            "emptyLines": self.empty_lines,
            "aiPercentage": self.generated_percentage,
            "humanPercentage": self.human_percentage,
            "confidence": self.confidence,
            "detectedPatterns": [p.to_dict() for p in self.detected_patterns],
        }


@dataclass(frozen=True)
class SkippedFile:
    """A discovered file that produced no analysis, and why."""

    path: str
    reason: str


@dataclass(frozen=True)
class FolderSummary:
    """Line totals of the analyzed files directly inside one folder."""

    path: str
    files: int
    generated_lines: int
    human_lines: int

    @property
    def generated_percentage(self) -> int:
        return percent(self.generated_lines, self.generated_lines + self.human_lines)


@dataclass(frozen=True)
class ProjectAnalysis:
    project_path: str
    total_files: int
    analyzed_files: int
    total_lines: int
    generated_lines: int
    human_lines: int
    overall_percentage: int
    file_analyses: Tuple[FileAnalysis, ...] = ()
    skipped: Tuple[SkippedFile, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "projectPath": self.project_path,
            "totalFiles": self.total_files,
            "analyzedFiles": self.analyzed_files,
            "totalLines": self.total_lines,
            "aiGeneratedLines": self.generated_lines,
            "humanWrittenLines": self.human_lines,
            "overallAiPercentage": self.overall_percentage,
            "fileAnalyses": [f.to_dict() for f in self.file_analyses],
            "skipped": [{"path": s.path, "reason": s.reason} for s in self.skipped],
            "timestamp": self.timestamp.isoformat(),
        }

"""Tuning knobs for the detectors and the file scanner.

Every value can be overridden with an ``AICOV_``-prefixed environment
variable or a ``.env`` file, e.g. ``AICOV_STRUCTURE_MIN_REPEATS=4``.
The per-line decision threshold and the likelihood combination rule are
not configurable; they live in ``detectors.scoring``.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyzerSettings(BaseSettings):
    """Detector thresholds plus discovery settings."""

    model_config = SettingsConfigDict(
        env_prefix="AICOV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Comment-style detector
    comment_min_template_repeats: int = Field(default=3, ge=2)
    comment_min_words: int = Field(default=3, ge=1)
    comment_restate_overlap: float = Field(default=0.6, gt=0.0, le=1.0)

    # Structure detector
    structure_min_repeats: int = Field(default=3, ge=2)
    structure_window: int = Field(default=30, ge=2, description="Max line gap between repeats")
    structure_min_tokens: int = Field(default=4, ge=1)
    structure_block_lines: int = Field(default=3, ge=2)
    structure_min_block_repeats: int = Field(default=2, ge=2)

    # Naming detector
    naming_min_matches: int = Field(default=2, ge=1)
    naming_block_lines: int = Field(default=15, ge=4)
    naming_min_identifiers: int = Field(default=6, ge=2)
    naming_min_contrast: float = Field(default=0.25, ge=0.0, le=1.0)
    naming_verbose_fraction: float = Field(default=0.15, gt=0.0, le=1.0)

    # Complexity detector
    complexity_block_lines: int = Field(default=12, ge=4)
    complexity_min_block_lines: int = Field(default=8, ge=4)
    complexity_max_cv: float = Field(default=0.35, gt=0.0)
    complexity_max_line_length: int = Field(default=100, ge=20)
    complexity_max_depth: int = Field(default=4, ge=1)
    complexity_min_shape: float = Field(default=0.8, gt=0.0, le=1.0)

    # Discovery
    include_extensions: List[str] = Field(
        default=[
            '.py', '.js', '.jsx', '.ts', '.tsx', '.java', '.c', '.cc', '.cpp',
            '.h', '.hpp', '.cs', '.go', '.rs', '.rb', '.php', '.swift', '.kt',
            '.scala', '.sh', '.sql', '.lua', '.vue', '.html', '.css', '.scss',
        ]
    )
    exclude_patterns: List[str] = Field(
        default=['*.min.js', '*.lock', '*.generated.*', 'dist/*', 'build/*', 'vendor/*']
    )
    max_file_size: int = Field(default=1048576, ge=1, description="Bytes; larger files are skipped")
    workers: int = Field(default=4, ge=1)

    # Rendering bands (percent of generated lines)
    high_band: int = Field(default=70, ge=0, le=100)
    medium_band: int = Field(default=40, ge=0, le=100)


def load_settings(**overrides) -> AnalyzerSettings:
    """Build settings from the environment, applying explicit overrides last."""
    return AnalyzerSettings(**overrides)

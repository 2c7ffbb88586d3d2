"""
Line Preprocessor
─────────────────
Splits source text into numbered lines and tags each one as blank,
comment or code. Block comments are tracked with a single open/close
state, so interior lines of a block (and Python docstrings) count as
comments too.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import List, Optional, Tuple, Union

from aicov_cli.detectors.tokens import mask_strings
from aicov_cli.errors import UnreadableInput, UnsupportedContent
from aicov_cli.models import LineKind, LineRecord


@dataclass(frozen=True)
class CommentSyntax:
    line: Tuple[str, ...]
    block: Tuple[Tuple[str, str], ...]


_C_STYLE = CommentSyntax(line=("//",), block=(("/*", "*/"),))

COMMENT_SYNTAX = {
    "c": _C_STYLE,
    "python": CommentSyntax(line=("#",), block=(('"""', '"""'), ("'''", "'''"))),
    "hash": CommentSyntax(line=("#",), block=()),
    "ruby": CommentSyntax(line=("#",), block=(("=begin", "=end"),)),
    "sql": CommentSyntax(line=("--",), block=(("/*", "*/"),)),
    "lua": CommentSyntax(line=("--",), block=(("--[[", "]]"),)),
    "markup": CommentSyntax(line=(), block=(("<!--", "-->"),)),
    "css": CommentSyntax(line=(), block=(("/*", "*/"),)),
    "php": CommentSyntax(line=("//", "#"), block=(("/*", "*/"),)),
    "text": CommentSyntax(line=(), block=()),
}

LANGUAGE_BY_EXTENSION = {
    ".py": "python", ".pyi": "python",
    ".js": "c", ".jsx": "c", ".mjs": "c", ".cjs": "c", ".ts": "c", ".tsx": "c",
    ".java": "c", ".c": "c", ".cc": "c", ".cpp": "c", ".h": "c", ".hpp": "c",
    ".cs": "c", ".go": "c", ".rs": "c", ".swift": "c", ".kt": "c", ".scala": "c",
    ".dart": "c", ".scss": "c", ".less": "c",
    ".sh": "hash", ".bash": "hash", ".zsh": "hash", ".r": "hash", ".pl": "hash",
    ".yaml": "hash", ".yml": "hash", ".toml": "hash",
    ".rb": "ruby",
    ".sql": "sql", ".hs": "sql",
    ".lua": "lua",
    ".html": "markup", ".htm": "markup", ".xml": "markup", ".vue": "markup", ".svg": "markup",
    ".css": "css",
    ".php": "php",
}


def language_for_path(path: Union[str, PurePath]) -> str:
    """Language family used to pick comment delimiters."""
    return LANGUAGE_BY_EXTENSION.get(PurePath(path).suffix.lower(), "text")


def decode_source(data: Union[str, bytes], path: str = "") -> str:
    """Decode raw file content, rejecting binary data."""
    if isinstance(data, str):
        text = data
    else:
        if b"\x00" in data:
            raise UnsupportedContent(path)
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise UnreadableInput(path, f"not valid UTF-8 text ({e.reason})") from e
    if "\x00" in text:
        raise UnsupportedContent(path)
    return text


def _scan_blocks(text: str, syntax: CommentSyntax, closer: Optional[str]) -> Optional[str]:
    """Walk one line and return the block-comment closer still pending at its end."""
    pos = 0
    while True:
        if closer is not None:
            idx = text.find(closer, pos)
            if idx < 0:
                return closer
            pos = idx + len(closer)
            closer = None
            continue
        rest = mask_strings(text[pos:])
        hits = [(rest.find(o), o, c) for o, c in syntax.block]
        hits = [h for h in hits if h[0] >= 0]
        if not hits:
            return None
        idx, opener, closer = min(hits, key=lambda h: h[0])
        pos += idx + len(opener)


def preprocess(text: str, language: str = "text") -> List[LineRecord]:
    """Tag every line of ``text`` as blank, comment or code."""
    syntax = COMMENT_SYNTAX.get(language, COMMENT_SYNTAX["text"])
    records = []
    pending = None  # closer of the block comment we are inside, if any

    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if pending is not None:
            kind = LineKind.COMMENT if stripped else LineKind.BLANK
            pending = _scan_blocks(stripped, syntax, pending)
        elif not stripped:
            kind = LineKind.BLANK
        elif any(stripped.startswith(o) for o, _ in syntax.block):
            kind = LineKind.COMMENT
            pending = _scan_blocks(stripped, syntax, None)
        elif syntax.line and stripped.startswith(syntax.line):
            kind = LineKind.COMMENT
        else:
            kind = LineKind.CODE
            code = mask_strings(stripped)
            for prefix in syntax.line:
                code = code.split(prefix, 1)[0]
            pending = _scan_blocks(code, syntax, None)
        records.append(LineRecord(number=number, text=raw.rstrip("\r\n"), kind=kind))

    return records


def line_counts(lines: List[LineRecord]) -> Tuple[int, int, int]:
    """Return (empty, comment, code) counts."""
    empty = sum(1 for l in lines if l.kind is LineKind.BLANK)
    comment = sum(1 for l in lines if l.kind is LineKind.COMMENT)
    return empty, comment, len(lines) - empty - comment

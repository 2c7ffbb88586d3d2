"""Lexing helpers shared by the detectors. Regex based, language agnostic."""

import re
from typing import List

_STRING = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'|`(?:\\.|[^`\\])*`')
_NUMBER = re.compile(r'\b\d+(?:\.\d+)?(?:[eE][+-]?\d+)?\b|\b0[xX][0-9a-fA-F]+\b')
_IDENT = re.compile(r'\b[A-Za-z_][A-Za-z0-9_]*\b')
_TOKEN = re.compile(r'[A-Za-z_][A-Za-z0-9_]*|\d+(?:\.\d+)?|==|!=|<=|>=|=>|->|&&|\|\||[^\sA-Za-z0-9_]')
_CAMEL_SPLIT = re.compile(r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+')
_COMMENT_MARKERS = re.compile(r'^\s*(?:///?|#+|--|/\*+|\*+/?|"""|\'\'\'|<!--|=begin)\s*|\s*(?:\*/|-->|"""|\'\'\')\s*$')

KEYWORDS = frozenset("""
    if else elif for while do return break continue switch case default try
    catch except finally raise throw throws new delete def function fn func
    class struct enum interface trait impl public private protected static
    final const let var val import from export package using namespace as in
    is not and or true false null none nil self this super void async await
    yield lambda with pass type extends implements int float double bool
    boolean string char long short unsigned byte end then local elseif of
    typeof instanceof match mut pub use mod where go defer chan select range
    print println
""".split())


def strip_strings(text: str) -> str:
    """Replace string literals with empty quotes."""
    return _STRING.sub('""', text)


def mask_strings(text: str) -> str:
    """Blank out string contents, keeping quotes and column positions."""
    return _STRING.sub(lambda m: m.group()[0] + " " * (len(m.group()) - 2) + m.group()[-1], text)


def identifiers(text: str) -> List[str]:
    """Identifiers on a code line, ignoring keywords and string contents."""
    return [i for i in _IDENT.findall(strip_strings(text)) if i.lower() not in KEYWORDS]


def split_words(identifier: str) -> List[str]:
    """Split snake_case / camelCase / PascalCase into lowercase words."""
    words = []
    for part in identifier.split('_'):
        words.extend(w.lower() for w in _CAMEL_SPLIT.findall(part))
    return words


def naming_style(identifier: str) -> str:
    """One of 'snake_case', 'camelCase', 'PascalCase', 'UPPER_CASE' or 'simple'."""
    core = identifier.strip('_')
    if not core or len(split_words(core)) < 2:
        return 'simple'
    if core.isupper():
        return 'UPPER_CASE'
    if '_' in core and core.islower():
        return 'snake_case'
    if '_' not in core and core[0].islower():
        return 'camelCase'
    if '_' not in core and core[0].isupper():
        return 'PascalCase'
    return 'mixed'


def skeleton(text: str) -> List[str]:
    """Token skeleton: keywords and punctuation kept, names and literals abstracted."""
    out = []
    for tok in _TOKEN.findall(_STRING.sub(' \x01 ', text)):
        if tok == '\x01':
            out.append('S')
        elif tok[0].isdigit():
            out.append('N')
        elif tok[0].isalpha() or tok[0] == '_':
            out.append(tok if tok.lower() in KEYWORDS else 'I')
        else:
            out.append(tok)
    return out


def comment_text(line: str) -> str:
    """Strip comment delimiters from a comment line."""
    return _COMMENT_MARKERS.sub('', line).strip()


def words(text: str) -> List[str]:
    return re.findall(r"[a-z][a-z']*", text.lower())


def indent_width(line: str, tab_size: int = 4) -> int:
    expanded = line.expandtabs(tab_size)
    return len(expanded) - len(expanded.lstrip(' '))

"""
PartiQL statement model and read-only detection.
"""

import re
from dataclasses import dataclass
from typing import Any, Tuple

# Keywords whose statements never mutate the ledger
READ_ONLY_KEYWORDS = frozenset({"select"})

_KEYWORD_RE = re.compile(r"[A-Za-z_]+")


@dataclass(frozen=True)
class Statement:
    """
    A statement to execute inside a ledger transaction.

    Fields:
        text: PartiQL text
        params: Positional parameters bound to '?' placeholders
    """
    text: str
    params: Tuple[Any, ...] = ()


def leading_keyword(text: str) -> str:
    """
    Return the first keyword of a statement, lower-cased.

    Leading and trailing whitespace is ignored. Returns "" when the
    statement does not start with a word.
    """
    match = _KEYWORD_RE.match(text.strip())
    if match is None:
        return ""
    return match.group(0).lower()


def is_read_only(text: str) -> bool:
    """True when the statement's leading keyword is a read-only keyword."""
    return leading_keyword(text) in READ_ONLY_KEYWORDS

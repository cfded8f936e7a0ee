"""Lightweight SQL statement classification.

Only the leading keyword of the normalized statement is inspected. This is
a lexical check, not a parser: a keyword appearing later in the statement,
for example inside a string literal, never changes the result.
"""

from enum import Enum
from typing import Optional


COMMENT_MARKER = "--"


class QueryType(Enum):
    """Category a statement is dispatched on."""
    READ = "read"
    WRITE = "write"
    UNSUPPORTED = "unsupported"


class WriteKind(Enum):
    """Which DML keyword a write statement starts with."""
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


def clean_query(query: str) -> str:
    """Normalize a statement for classification.

    Strips every line, drops lines starting with ``--`` and joins the
    rest with single spaces. Blank lines are dropped too. Case is preserved.

    Args:
        query: Raw SQL text

    Returns:
        The normalized statement ("" for empty or all-comment input)
    """
    lines = (line.strip() for line in query.splitlines())
    return " ".join(line for line in lines if line and not line.startswith(COMMENT_MARKER))


def _normalized(query: str) -> str:
    return clean_query(query).lower()


def write_kind(query: str) -> Optional[WriteKind]:
    """Return the WriteKind of a DML statement, or None."""
    normalized = _normalized(query)
    for kind in WriteKind:
        if normalized.startswith(kind.value):
            return kind
    return None


def is_select_query(query: str) -> bool:
    """True if the normalized statement starts with ``select``."""
    return _normalized(query).startswith("select")


def is_dml_query(query: str) -> bool:
    """True if the normalized statement starts with insert/update/delete."""
    return write_kind(query) is not None


def classify(query: str) -> QueryType:
    """Classify a statement as READ, WRITE or UNSUPPORTED.

    Args:
        query: Raw SQL text

    Returns:
        QueryType for the statement
    """
    if is_select_query(query):
        return QueryType.READ
    if is_dml_query(query):
        return QueryType.WRITE
    return QueryType.UNSUPPORTED

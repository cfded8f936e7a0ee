"""Statement fingerprinting.

Fingerprints identify a statement in logs and in the divergence ledger
without repeating the full SQL text. They are computed over the normalized
statement, so whitespace and comment-only differences hash the same.
Speed matters here, not cryptographic strength.
"""

import xxhash

from dual_db_sync.classifier import clean_query


def statement_fingerprint(statement: str) -> str:
    """Compute the xxhash64 hex digest of a normalized statement.

    Args:
        statement: Raw SQL text (lone surrogates are hashed as-is)

    Returns:
        16-character hex digest
    """
    return xxhash.xxh64(clean_query(statement).encode("utf-8", "surrogatepass")).hexdigest()


from typing import Optional


# -----------------------------------------------------------------------------
# ADMISSION GATE
# Purpose: decide whether a raw query string may be sent to the database
# How: case-insensitive substring match against a fixed denylist
#
# This is advisory only. It rejects identifiers that merely contain a keyword
# (UPDATED_AT contains UPDATE) and it misses mutating statements that use
# keywords outside the list. READ_ONLY_QUERIES in the executor is the real
# guard against writes.
# -----------------------------------------------------------------------------

DENIED_KEYWORDS = (
    "DROP",
    "DELETE",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "INSERT",
    "UPDATE",
    "GRANT",
    "REVOKE",
)


def find_denied_keyword(query: str) -> Optional[str]:
    """Return the first denylisted keyword found anywhere in the query, or None."""
    upper_query = query.upper()
    for keyword in DENIED_KEYWORDS:
        if keyword in upper_query:
            return keyword
    return None


def is_admissible(query: str) -> bool:
    return find_denied_keyword(query) is None

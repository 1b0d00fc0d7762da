from typing import NamedTuple, Optional

import asyncpg
from sqlalchemy.exc import SQLAlchemyError

# Failures a query or catalog call can end with. Connection-time errors from
# asyncpg are not always wrapped by SQLAlchemy.
ENGINE_ERRORS = (SQLAlchemyError, OSError, asyncpg.PostgresError, asyncpg.InterfaceError)


class EngineDiagnostics(NamedTuple):
    message: str
    detail: Optional[str] = None
    position: Optional[int] = None


def describe_engine_error(error: BaseException) -> EngineDiagnostics:
    """
    Pull the server message, detail and character position out of a failure.

    SQLAlchemy wraps the DBAPI exception in ``DBAPIError.orig``; the asyncpg
    adapter in turn raises its DBAPI error from the native asyncpg exception,
    which carries ``message``, ``detail`` and ``position``. psycopg exposes the
    same fields through ``diag``. Anything else (connection refused, pool
    timeout) only has its string form.
    """
    orig = getattr(error, "orig", None) or error
    source = orig.__cause__ or orig

    diag = getattr(source, "diag", None)
    if diag is not None:
        message = diag.message_primary
        detail = diag.message_detail
        position = diag.statement_position
    else:
        message = getattr(source, "message", None)
        detail = getattr(source, "detail", None)
        position = getattr(source, "position", None)

    return EngineDiagnostics(
        message=message or str(source),
        detail=detail or None,
        position=_to_int(position),
    )


def _to_int(value) -> Optional[int]:
    # PostgreSQL reports the position as a string
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

import base64
import logging
import time
from typing import Any, Dict, List

import asyncpg
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncEngine

from sqlgateway.core import schemas
from sqlgateway.core.exceptions import QueryExecutionError
from sqlgateway.core.sql.diagnostics import ENGINE_ERRORS, describe_engine_error

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# EXECUTOR
# Purpose: run an admitted query with a server-side timeout and shape the result
# Expects: the query already passed the admission gate
# -----------------------------------------------------------------------------

DEFAULT_TIMEOUT_MS = 10000


async def execute_query(
    engine: AsyncEngine,
    query: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    read_only: bool = True,
) -> schemas.QueryResult:
    """
    Execute raw SQL text and package rows, row count, fields and timing.

    The text goes through ``exec_driver_sql`` so it reaches the server exactly
    as the client wrote it (no ``:name`` bind parsing). The statement runs in
    its own transaction with ``statement_timeout`` set locally; with
    ``read_only`` the transaction is also READ ONLY, so writes that slip past
    the keyword gate are refused by the server.

    Raises:
        QueryExecutionError: syntax error, runtime error, timeout or lost
            connection, with the server's message, detail and position.
    """
    try:
        async with engine.begin() as conn:
            if read_only:
                await conn.exec_driver_sql("SET TRANSACTION READ ONLY")
            await conn.exec_driver_sql(
                f"SET LOCAL statement_timeout = {int(timeout_ms)}"
            )

            start_time = time.perf_counter()
            result = await conn.exec_driver_sql(query)
            execution_time = int((time.perf_counter() - start_time) * 1000)

            if result.returns_rows:
                # Read the description before the rows are consumed
                fields = _describe_fields(result.cursor.description)
                rows: List[Dict[str, Any]] = [
                    _encode_row(row) for row in result.mappings()
                ]
                row_count = len(rows)
            else:
                fields = []
                rows = []
                row_count = max(result.rowcount, 0)
    except ENGINE_ERRORS as error:
        logger.error(f"Error executing query: {error}")
        diagnostics = describe_engine_error(error)
        raise QueryExecutionError(
            diagnostics.message,
            detail=diagnostics.detail,
            position=diagnostics.position,
        )

    return schemas.QueryResult(
        success=True,
        rows=rows,
        rowCount=row_count,
        fields=fields,
        executionTime=execution_time,
        message=f"Query executed successfully. Returned {row_count} rows.",
    )


def _describe_fields(description) -> List[schemas.QueryField]:
    # DBAPI description entries are (name, type_code, ...); asyncpg reports the type OID
    fields = []
    for column in description or []:
        type_code = column[1]
        fields.append(
            schemas.QueryField(
                name=column[0],
                dataType=type_code if isinstance(type_code, int) else None,
            )
        )
    return fields


# -----------------------------------------------------------------------------
# VALUE ENCODING
# Rows leave the executor as plain JSON types. The driver hands back bytes,
# ranges, decimals, timestamps and other objects the response cannot carry.
# -----------------------------------------------------------------------------


def _encode_bytes(value) -> str:
    return base64.b64encode(bytes(value)).decode("ascii")


def _encode_range(value: asyncpg.Range) -> Dict[str, Any]:
    return {
        "lower": _encode_value(value.lower),
        "upper": _encode_value(value.upper),
        "lower_inc": value.lower_inc,
        "upper_inc": value.upper_inc,
        "isempty": value.isempty,
    }


VALUE_ENCODERS = {
    bytes: _encode_bytes,
    bytearray: _encode_bytes,
    memoryview: _encode_bytes,
    asyncpg.Range: _encode_range,
}


def _encode_value(value: Any) -> Any:
    try:
        return jsonable_encoder(value, custom_encoder=VALUE_ENCODERS)
    except (TypeError, ValueError):
        # Unknown driver types fall back to their text form
        return str(value)


def _encode_row(row) -> Dict[str, Any]:
    return {key: _encode_value(value) for key, value in row.items()}

import logging
from typing import Dict, List

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from sqlgateway.core import schemas
from sqlgateway.core.exceptions import CatalogError
from sqlgateway.core.sql.diagnostics import ENGINE_ERRORS, describe_engine_error

logger = logging.getLogger(__name__)


# Table order is whatever the engine returns, callers must not rely on it
TABLES_QUERY = text(
    "SELECT table_name FROM information_schema.tables WHERE table_schema = :schema"
)

COLUMNS_QUERY = text(
    """
    SELECT column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = :schema AND table_name = :table_name
    ORDER BY ordinal_position
    """
)


async def get_metadata(engine: AsyncEngine, schema: str) -> schemas.MetadataResponse:
    """
    List the tables of one schema and the columns of each table.

    One round trip for the table list, then one per table. Everything is read
    live from information_schema on every call.

    Args:
        engine: Pooled engine to borrow a connection from.
        schema: Schema to introspect (``public`` by default).

    Raises:
        CatalogError: any catalog query failed. Tables already processed are
            discarded, partial results are never returned.
    """
    try:
        async with engine.connect() as conn:
            result = await conn.execute(TABLES_QUERY, {"schema": schema})
            tables: List[str] = list(result.scalars().all())

            columns: Dict[str, List[schemas.ColumnDescriptor]] = {}
            for table in tables:
                result = await conn.execute(
                    COLUMNS_QUERY, {"schema": schema, "table_name": table}
                )
                # A table dropped since the first query just has no columns
                columns[table] = [
                    schemas.ColumnDescriptor(
                        name=row["column_name"],
                        type=row["data_type"],
                        nullable=row["is_nullable"] == "YES",
                    )
                    for row in result.mappings()
                ]
    except ENGINE_ERRORS as error:
        logger.error(f"Error fetching metadata: {error}")
        raise CatalogError(describe_engine_error(error).message)

    return schemas.MetadataResponse(tables=tables, columns=columns)


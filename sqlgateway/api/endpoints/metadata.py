from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncEngine

from sqlgateway.core import schemas
from sqlgateway.core.config import settings
from sqlgateway.core.database import get_engine
from sqlgateway.core.sql import catalog

router = APIRouter(prefix="/api", tags=["Metadata"])

engine_dep = Annotated[AsyncEngine, Depends(get_engine)]


@router.get(
    "/sql-metadata",
    response_model=schemas.MetadataResponse,
    status_code=status.HTTP_200_OK,
    responses={500: {"model": schemas.ErrorResponse}},
)
async def get_sql_metadata(engine: engine_dep):
    """Return the tables of the configured schema and the columns of each table."""
    return await catalog.get_metadata(engine, settings.METADATA_SCHEMA)

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncEngine

from sqlgateway.core import schemas
from sqlgateway.core.config import settings
from sqlgateway.core.database import get_engine
from sqlgateway.core.exceptions import BadRequestError, ForbiddenQueryError
from sqlgateway.core.sql import admission, executor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Query"])

engine_dep = Annotated[AsyncEngine, Depends(get_engine)]


@router.post(
    "/execute-query",
    response_model=schemas.QueryResult,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": schemas.ErrorResponse},
        403: {"model": schemas.ErrorResponse},
    },
)
async def execute_query(
    engine: engine_dep,
    payload: Optional[schemas.ExecuteQueryRequest] = None,
):
    """
    Run a read-only query.
    The query must be non-empty and free of denylisted keywords.
    """
    query = payload.query if payload else None
    if not query or not query.strip():
        raise BadRequestError("Query is required")

    denied = admission.find_denied_keyword(query)
    if denied:
        logger.warning(f"Rejected query containing {denied}")
        raise ForbiddenQueryError("Only SELECT queries are allowed")

    return await executor.execute_query(
        engine,
        query,
        timeout_ms=settings.QUERY_TIMEOUT_MS,
        read_only=settings.READ_ONLY_QUERIES,
    )

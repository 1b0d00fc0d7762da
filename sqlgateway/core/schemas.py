from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# =========================
# METADATA
# =========================
class ColumnDescriptor(BaseModel):
    name: str
    type: str
    nullable: bool


class MetadataResponse(BaseModel):
    tables: List[str] = []
    columns: Dict[str, List[ColumnDescriptor]] = {}


# =========================
# QUERY EXECUTION
# =========================
class ExecuteQueryRequest(BaseModel):
    query: Optional[str] = None


class QueryField(BaseModel):
    name: str
    # Engine type identifier, the type OID on PostgreSQL
    dataType: Optional[int] = None


class QueryResult(BaseModel):
    success: bool = True
    rows: List[Dict[str, Any]] = []
    rowCount: int = Field(default=0, ge=0)
    fields: List[QueryField] = []
    executionTime: int = Field(default=0, ge=0)
    message: str = ""


# =========================
# HEALTH / ERRORS
# =========================
class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: datetime


class ErrorResponse(BaseModel):
    error: str
    message: str
    position: Optional[int] = None
    detail: Optional[str] = None

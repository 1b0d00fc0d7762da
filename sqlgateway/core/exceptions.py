"""
Error taxonomy of the gateway.

Every error a request can end with inherits from GatewayError, so a single
exception handler in main.py turns all of them into the JSON envelope.
"""

from typing import Any, Dict, Optional

from fastapi import status


class GatewayError(Exception):
    """Base exception for all request-level errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"

    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        position: Optional[int] = None,
    ):
        self.message = message
        self.detail = detail
        self.position = position
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        payload = {"error": self.error, "message": self.message}
        if self.position is not None:
            payload["position"] = self.position
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


class BadRequestError(GatewayError):
    """The request carried no usable query."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class ForbiddenQueryError(GatewayError):
    """The admission gate rejected the query text."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"


class QueryExecutionError(GatewayError):
    """The database rejected or failed an admitted query (syntax, runtime, timeout)."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Query Error"


class CatalogError(GatewayError):
    """Catalog introspection failed."""

from datetime import datetime, timezone

from fastapi import APIRouter

from sqlgateway.core import schemas

router = APIRouter(prefix="/api", tags=["Health"])


# Liveness only, the database is not checked
@router.get("/health", response_model=schemas.HealthResponse)
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc)}

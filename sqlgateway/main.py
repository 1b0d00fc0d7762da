import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sqlgateway.api.router import api_router
from sqlgateway.core.config import settings
from sqlgateway.core.database import build_engine
from sqlgateway.core.exceptions import BadRequestError, GatewayError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# Create the pool once and close all the connections when the app stops
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.engine = build_engine()
    logger.info(
        f"Connection pool ready for {settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
    )

    yield
    await app.state.engine.dispose()
    logger.info("Connection pool closed")


app = FastAPI(title="SQL Gateway API", lifespan=lifespan)

# Any origin may call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# Bodies that are not a JSON object with a string query count as a missing query
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return await gateway_error_handler(request, BadRequestError("Query is required"))


# Include the master router containing all our endpoints
app.include_router(api_router)


@app.get("/")
async def root():
    return {
        "message": "Welcome to the SQL Gateway API",
        "endpoints": {
            "metadata": "/api/sql-metadata",
            "execute": "/api/execute-query",
            "health": "/api/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sqlgateway.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )

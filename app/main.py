"""
FastAPI main application
"""

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.exceptions import AppError
from app.api.router import api_router
from app.db.database import SessionLocal

# Import all ORM models to ensure relationships are resolved
import app.infrastructure.orm  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With, Accept"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Schema is managed by Alembic migrations
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    yield
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.DESCRIPTION,
    version=settings.VERSION,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials="*" not in settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def answer_preflight(request: Request, call_next):
    """Answer every bare OPTIONS request with 200 and permissive CORS headers"""
    if request.method == "OPTIONS":
        headers = {
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        }
        origin = "*" if "*" in settings.ALLOWED_ORIGINS else request.headers.get("origin")
        if origin:
            headers["Access-Control-Allow-Origin"] = origin
        return Response(status_code=status.HTTP_200_OK, headers=headers)
    return await call_next(request)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def jsonable_errors(errors):
    return [{"loc": list(error.get("loc", ())), "msg": error.get("msg", "")} for error in errors]


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message, "errors": jsonable_errors(errors)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Include API routes
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": settings.PROJECT_NAME, "version": settings.VERSION}


@app.get("/health")
async def health_check():
    """Health check endpoint that verifies database and Redis connectivity"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1")).fetchone()
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"
    finally:
        db.close()

    # Redis is only needed for email delivery, so it does not degrade the status
    try:
        import redis
        redis.from_url(settings.REDIS_URL, socket_connect_timeout=1).ping()
        redis_status = "healthy"
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        redis_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "database": db_status,
        "redis": redis_status,
        "version": settings.VERSION,
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )

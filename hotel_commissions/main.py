"""
Hotel Commissions - commission agreements and calculation service

Main FastAPI application with:
- Hotel, booking and commission agreement management
- Commission calculation for completed bookings
- Monthly commission summary and export (JSON/CSV)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from hotel_commissions.api import api_router
from hotel_commissions.config import settings
from hotel_commissions.errors import CommissionServiceError
from hotel_commissions.middleware import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Hotel Commissions...")
    yield
    logger.info("Shutting down Hotel Commissions...")


# Create FastAPI application
app = FastAPI(
    title="Hotel Commissions",
    description="Manages hotel commission agreements and calculates commissions for completed bookings",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


@app.exception_handler(CommissionServiceError)
async def service_error_handler(request: Request, exc: CommissionServiceError):
    """Business errors: stable code, client-safe message."""
    logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.code, "message": exc.message}},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Storage failures: logged in full, opaque to the client."""
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": {
                "code": "SERVICE_UNAVAILABLE",
                "message": "Service temporarily unavailable",
            }
        },
    )


# Include routers
app.include_router(api_router)  # /api/* endpoints


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hotel_commissions.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )

"""
FastAPI application entry point.
Main application instance with middleware and route configuration.
"""
from fastapi import FastAPI, Request, status, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import logging
import asyncio

from studio.config import settings
from studio.database import get_db, init_db, close_db
from studio.exceptions import StudioError
from studio.services.cloudinary_service import validate_cloudinary_config
from studio.routes import site, cms, cms_projects, cms_portfolio
from studio.utils.rate_limit import limiter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Credentials are allowed so the httpOnly cms_token cookie reaches the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight requests for 1 hour
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with its response status."""
    method = request.method
    path = request.url.path
    logger.debug(f"Incoming {method} request to {path} from origin: {request.headers.get('origin', 'No origin header')}")

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"Error processing {method} {path}: {str(e)}\n"
            f"  Error type: {type(e).__name__}",
            exc_info=True
        )
        raise

    logger.info(f"Response status: {response.status_code} for {method} {path}")
    return response


app.include_router(site.router, prefix="/api", tags=["site"])
app.include_router(cms.router, prefix="/api")
app.include_router(cms_projects.router, prefix="/api")
app.include_router(cms_portfolio.router, prefix="/api")


def add_cors_headers(response: JSONResponse, request: Request) -> JSONResponse:
    """
    Add CORS headers to error responses raised before CORSMiddleware can act.
    Only allowed origins are echoed back.
    """
    origin = request.headers.get("origin")
    if origin and origin in settings.CORS_ORIGINS:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"

    return response


# Exception Handlers
@app.exception_handler(StudioError)
async def studio_exception_handler(request: Request, exc: StudioError):
    """Render domain errors (not found, no neighbor, write/upload failures)."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{type(exc).__name__} on {request.method} {request.url.path}:\n"
        f"  Status: {exc.status_code}\n"
        f"  Detail: {exc.message}\n"
        f"  Details: {exc.details}"
    )
    response = JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.to_dict())
    )
    return add_cors_headers(response, request)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions (401, 403, 404, etc.) with CORS headers."""
    logger.error(
        f"HTTPException on {request.method} {request.url.path}:\n"
        f"  Status: {exc.status_code}\n"
        f"  Detail: {exc.detail}"
    )

    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail, "detail": str(exc.detail)}

    response = JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None)
    )

    return add_cors_headers(response, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Handle request validation errors."""
    logger.error(
        f"Validation error on {request.method} {request.url.path}:\n"
        f"  Errors: {exc.errors()}"
    )
    response = JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
            "detail": jsonable_encoder(exc.errors())
        }
    )
    return add_cors_headers(response, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}:\n"
        f"  Error: {str(exc)}\n"
        f"  Error type: {type(exc).__name__}",
        exc_info=True
    )
    response = JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )
    return add_cors_headers(response, request)


# Root Endpoints
@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """
    Database health check endpoint.
    Tests database connection and returns status.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        return {
            "database": "connected",
            "status": "healthy",
            "result": result.scalar()
        }
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "database": "error",
                "status": "unhealthy",
                "error": "Database connection failed"
            }
        )


@app.get("/health/cloudinary")
async def health_check_cloudinary():
    """
    Cloudinary health check endpoint.
    Validates Cloudinary configuration.
    """
    if validate_cloudinary_config():
        return {
            "cloudinary": "configured",
            "status": "healthy",
            "cloud_name": settings.CLOUDINARY_CLOUD_NAME
        }
    return {
        "cloudinary": "not_configured",
        "status": "warning",
        "message": "Cloudinary credentials not set in environment variables"
    }


@app.on_event("startup")
async def startup_event():
    """
    Initialize database connection on application startup.
    Non-blocking: app will start even if database connection fails.
    """
    logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")

    if not settings.DATABASE_URL:
        logger.info("DATABASE_URL not configured - using an in-memory SQLite database")

    try:
        await init_db()
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(
            f"Failed to initialize database on startup: {str(e)}\n"
            f"The application will continue to run, but database-dependent endpoints will fail.\n"
            f"Please check your DATABASE_URL configuration and network connectivity."
        )


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on application shutdown."""
    try:
        await close_db()
    except Exception as e:
        # Cancellation during shutdown is expected
        if not isinstance(e, (KeyboardInterrupt, asyncio.CancelledError)):
            logger.warning(f"Error during database shutdown: {str(e)}")

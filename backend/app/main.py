"""
Service Directory - FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import get_db, init_db
from .exceptions import DirectoryError, InternalError
from .routers import (
    auth_router,
    profiles_router,
    social_networks_router,
    follow_router,
    my_router,
    notifications_router,
    map_router,
    categories_router,
)
from .schemas.common import ApiResponse, ok
from .services.analytics_service import AnalyticsService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.app_name} API...")
    init_db()
    yield
    logger.info(f"Shutting down {settings.app_name} API...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Directory of local businesses with map search, follows and update notifications",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
if settings.cors_origins:
    cors_origins.extend(origin.strip() for origin in settings.cors_origins.split(",") if origin.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = ApiResponse(success=False, message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


@app.exception_handler(DirectoryError)
async def directory_error_handler(request: Request, exc: DirectoryError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        # Drop the "body"/"query" prefix; the model root becomes "__root__"
        location = [str(part) for part in error["loc"][1:]] or ["__root__"]
        errors.setdefault(".".join(location), []).append(error["msg"])
    return error_response(422, "Validation failed", errors)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError("Internal server error")
    return error_response(error.status_code, error.message)


# Include routers
app.include_router(auth_router)
app.include_router(profiles_router)
app.include_router(social_networks_router)
app.include_router(follow_router)
app.include_router(my_router)
app.include_router(notifications_router)
app.include_router(map_router)
app.include_router(categories_router)


@app.get("/api")
def api_root():
    """API root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/stats", response_model=ApiResponse[dict])
def get_global_stats(db: Session = Depends(get_db)):
    """System-wide statistics, cached for a few minutes."""
    return ok(AnalyticsService(db).system_stats())

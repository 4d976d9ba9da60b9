"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database.connection import DatabaseConnection
from api.routes import articles_router, stats_router, users_router
from scheduler.jobs import build_scheduler
from shared.config import settings
from shared.errors import AppError

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    db = await DatabaseConnection.init_mongo()

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = build_scheduler(db)
        scheduler.start()
        logger.info("Stats scheduler started")

    yield

    # Shutdown
    if scheduler:
        await scheduler.stop()

    await DatabaseConnection.close_connections()


# Create FastAPI app
app = FastAPI(
    title="News Aggregator",
    description="Personalized news feed with trending articles and recommendations",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Map service errors onto their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.error})")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, "error": exc.error}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed or missing parameters as 400."""
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request", "error": str(exc.errors())}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "error": str(exc)}
    )


# Include routers
app.include_router(stats_router, prefix="/api")
app.include_router(articles_router, prefix="/api")
app.include_router(users_router, prefix="/api")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "News Aggregator",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug
    )

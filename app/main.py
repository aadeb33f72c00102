from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.routers import candidates, resumes

# Import logging and middleware
from app.utils import config
from app.utils.logging_config import configure_for_environment, get_logger
from app.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Applicant Tracker API starting up...")

    try:
        from app.services.db import init_indexes
        await init_indexes()
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")
        logger.info("Application will continue - duplicate lookups may be slower without indexes")

    logger.info("Applicant Tracker API startup completed")

    yield

    logger.info("Applicant Tracker API shutting down...")


app = FastAPI(title="Applicant Tracker API", version=VERSION, lifespan=lifespan)

# Last added runs outermost
app.add_middleware(PerformanceMiddleware, slow_request_threshold=config.SLOW_REQUEST_THRESHOLD)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    return {"message": "Welcome to the Applicant Tracker API", "version": VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


app.include_router(resumes.router, prefix="/api/upload", tags=["resumes"])
app.include_router(candidates.router, prefix="/api/candidates", tags=["candidates"])

logger.info("Applicant Tracker API initialized successfully")

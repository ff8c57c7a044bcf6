"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskmarket.config import settings
from taskmarket.core.errors import WorkflowError
from taskmarket.database import init_models
from taskmarket.api import admin, company, events, tasks, users, worker

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown tasks."""
    await init_models()
    logger.info(f"TaskMarket API starting (environment: {settings.ENVIRONMENT})")
    yield
    logger.info("TaskMarket API shutting down")


# Create FastAPI app
app = FastAPI(
    title="TaskMarket API",
    version="1.0.0",
    description="A micro-task marketplace where companies post short paid tasks and workers apply, deliver and get paid",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(
    users.router,
    prefix=f"{settings.API_V1_PREFIX}/users",
    tags=["users"]
)
app.include_router(
    tasks.router,
    prefix=f"{settings.API_V1_PREFIX}/tasks",
    tags=["tasks"]
)
app.include_router(
    company.router,
    prefix=f"{settings.API_V1_PREFIX}/company",
    tags=["company"]
)
app.include_router(
    worker.router,
    prefix=f"{settings.API_V1_PREFIX}/worker",
    tags=["worker"]
)
app.include_router(
    admin.router,
    prefix=f"{settings.API_V1_PREFIX}/admin",
    tags=["admin"]
)
app.include_router(
    events.router,
    prefix=f"{settings.API_V1_PREFIX}",
    tags=["events"]
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "TaskMarket API",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
    }


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    """Render workflow failures with their stable error code."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_detail()}
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )

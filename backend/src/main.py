"""Main FastAPI Application

CareerPal API: job application tracking, AI job analysis and cover
letters, CV storage, and GitHub/LinkedIn account connection. This module
wires middleware, global exception handlers, and includes API routers
from `presentation`.

Run locally for development with:

    uvicorn main:app --reload

Keep application logic in `application`, `core`, and
`infrastructure` to preserve a clean architecture.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.database import init_db, close_db, health_check
from core.logging_config import configure_logging
from core.exceptions import DomainException, status_for
from presentation.api.endpoints.ai import router as ai_router
from presentation.api.endpoints.applications import router as applications_router
from presentation.api.endpoints.auth import router as auth_router
from presentation.api.endpoints.cv import router as cv_router
from presentation.api.endpoints.trpc import router as trpc_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    configure_logging(settings)
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    await close_db()
    logger.info("Database connections closed")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Job application tracking with AI analysis and cover letters",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global Exception Handlers
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Map domain errors to HTTP status through their error kind"""
    status_code = status_for(exc.kind)

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {str(exc)}")
    else:
        logger.warning(f"Domain exception: {str(exc)}")

    return JSONResponse(
        status_code=status_code,
        content={"error": exc.public_message}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body/query validation failures"""
    logger.warning(f"Validation failed on {request.method} {request.url.path}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "issues": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


# Include API routes
app.include_router(
    auth_router,
    prefix="/api/auth",
    tags=["Authentication"]
)

app.include_router(
    applications_router,
    prefix="/api",
    tags=["Applications"]
)

app.include_router(
    ai_router,
    prefix="/api",
    tags=["AI"]
)

app.include_router(
    cv_router,
    prefix="/api",
    tags=["CV"]
)

app.include_router(
    trpc_router,
    prefix="/api",
    tags=["RPC"]
)


@app.get("/health", tags=["Health"])
async def health():
    """Liveness check with a database ping"""
    database_ok = await health_check()
    return {"status": "ok" if database_ok else "degraded", "database": database_ok}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )

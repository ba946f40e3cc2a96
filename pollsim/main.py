"""Main FastAPI application for the poll simulation service."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .config import settings
from .core.errors import PollSimError
from .db.database import init_db
from .providers.factory import get_available_providers
from .services.rate_limiter import get_rate_limiter
from .api.routes import polls
from .api.websocket import progress_handler

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting poll simulation service...")

    # Initialize database
    await init_db()
    logger.info("Database initialized")

    available = [p.value for p in get_available_providers()]
    if settings.llm_provider not in available:
        logger.warning(
            f"LLM provider '{settings.llm_provider}' has no API key configured; "
            "poll generation will fail"
        )
    logger.info(f"LLM call budget: {get_rate_limiter().limit} calls")

    yield

    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Poll Simulation Service",
    description="Simulated public-opinion surveys on political topics, generated by an LLM",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PollSimError)
async def poll_sim_exception_handler(request: Request, exc: PollSimError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"message": "; ".join(problems) or "Invalid request"},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error"},
    )


# Include routers
app.include_router(polls.router, prefix="/api/polls", tags=["polls"])

# WebSocket endpoint
app.include_router(progress_handler.router, tags=["websocket"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Poll Simulation Service",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "llm_provider": settings.llm_provider,
        "providers_available": [p.value for p in get_available_providers()],
        "api_calls": get_rate_limiter().get_status(),
        "websocket_connections": len(progress_handler.manager.subscribers),
    }


def start():
    """Start the server."""
    uvicorn.run(
        "pollsim.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    start()

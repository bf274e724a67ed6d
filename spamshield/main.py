"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spamshield import __version__
from spamshield.api.errors import register_exception_handlers
from spamshield.api.middleware import RequestContextMiddleware
from spamshield.api.routes import api_router
from spamshield.logging_config import setup_logging
from spamshield.persistence.database import create_tables, dispose_engine
from spamshield.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(f"Starting SpamShield API - environment={settings.environment}")
    if settings.create_tables_on_startup:
        await create_tables()
    yield
    # Shutdown
    await dispose_engine()
    logger.info("SpamShield API shut down")


# Create FastAPI app
app = FastAPI(
    title="SpamShield API",
    description="Contact list, spam reporting and caller lookup",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID for log correlation
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def run() -> None:
    """Run the API with uvicorn."""
    uvicorn.run(
        "spamshield.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()

"""EquityLedger main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from equityledger.api import router
from equityledger.api.deps import validate_auth_config
from equityledger.config import settings
from equityledger.db.base import close_db, get_session, init_db
from equityledger.engine import EquityLedgerEngine

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("equityledger")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting EquityLedger server...")
    logger.info("Environment: %s", settings.env.value)

    # Validate authentication configuration (fail fast if insecure)
    validate_auth_config()

    await init_db()
    logger.info("Database initialized")

    async with get_session() as session:
        seeded = await EquityLedgerEngine(session).ensure_default_templates()
    if seeded:
        logger.info("Seeded %d default document templates", len(seeded))

    yield

    logger.info("Shutting down EquityLedger server...")
    await close_db()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="EquityLedger",
    description="Equity accounting and legal-document lifecycle service",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)

app.include_router(router)


def main():
    """Entry point for the application."""
    uvicorn.run(
        "equityledger.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

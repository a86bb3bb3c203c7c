"""API dependencies."""

import logging
import secrets
from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from equityledger.config import Environment, settings
from equityledger.db.base import async_session_factory
from equityledger.engine import EquityLedgerEngine

logger = logging.getLogger("equityledger.api")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session; the request's intents commit together."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_engine(session: AsyncSession = Depends(get_db_session)) -> EquityLedgerEngine:
    return EquityLedgerEngine(session)


async def verify_api_key(
    authorization: str | None = Header(None),
    x_api_key: str | None = Header(None, alias="X-API-Key"),
) -> str:
    """
    Verify the shared API key.

    Accepts ``Authorization: Bearer <key>`` or ``X-API-Key``. Fails closed:
    without a configured key every request is rejected unless insecure dev
    mode is explicitly enabled in development. Returns the auth mode.
    """
    if settings.allow_insecure_dev and settings.env == Environment.DEVELOPMENT:
        return "insecure_dev"

    api_key = None
    if authorization and authorization.startswith("Bearer "):
        api_key = authorization[7:]
    elif x_api_key:
        api_key = x_api_key

    if not api_key:
        raise HTTPException(
            status_code=401,
            detail="Missing authorization. Use Authorization: Bearer <key> or X-API-Key header",
        )

    if not settings.api_key:
        logger.error("No EQUITYLEDGER_API_KEY configured; rejecting request")
        raise HTTPException(
            status_code=503,
            detail="Server misconfigured: authentication not properly initialized",
        )

    if not secrets.compare_digest(api_key, settings.api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")
    return "api_key"


def validate_auth_config() -> None:
    """
    Validate authentication configuration at startup.

    Raises:
        RuntimeError: If insecure dev mode is enabled outside development,
            or no API key is configured while authentication is required.
    """
    if settings.allow_insecure_dev and settings.env != Environment.DEVELOPMENT:
        raise RuntimeError(
            f"SECURITY ERROR: allow_insecure_dev=true is only permitted in development. "
            f"Current environment: {settings.env.value}. "
            f"Set EQUITYLEDGER_ALLOW_INSECURE_DEV=false for {settings.env.value}."
        )

    if settings.allow_insecure_dev:
        logger.warning(
            "Running in INSECURE DEV MODE: API authentication is disabled. "
            "Set EQUITYLEDGER_ALLOW_INSECURE_DEV=false for any deployment."
        )
    elif not settings.api_key:
        raise RuntimeError("EQUITYLEDGER_API_KEY must be set when authentication is required")
    else:
        logger.info("Authentication enabled: shared API key for %s", settings.env.value)

"""Process-level setup: logging, environment validation, session lifespan."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from pokedex.controller import Renderer
from pokedex.session import PokedexSession
from pokedex.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(active_settings: AppSettings | None = None) -> None:
    """Configure root logging from ``LOG_LEVEL``."""

    resolved = active_settings or get_settings()
    logging.basicConfig(level=resolved.log_level_numeric, format=LOG_FORMAT)
    # httpx logs every request at INFO; keep that behind DEBUG.
    logging.getLogger("httpx").setLevel(
        max(resolved.log_level_numeric, logging.WARNING)
    )


def _validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration that was left unset."""

    resolved = active_settings or get_settings()
    warnings = resolved.optional_config_warnings()

    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")
        logger.warning("=" * 60)


def validate_environment(active_settings: AppSettings | None = None) -> None:
    """Public wrapper so CLI commands can trigger configuration validation."""

    _validate_environment(active_settings=active_settings)


@asynccontextmanager
async def lifespan(
    active_settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    renderer: Renderer | None = None,
) -> AsyncIterator[PokedexSession]:
    """Yield a started :class:`PokedexSession` and dispose of it on exit."""

    resolved = active_settings or get_settings()
    validate_environment(resolved)

    logger.info(f"Pokédex client starting against {resolved.api_base_url}")
    session = PokedexSession.create(resolved, transport=transport, renderer=renderer)
    try:
        await session.start()
        yield session
    finally:
        logger.info("Shutting down Pokédex session")
        await session.aclose()


__all__ = ["LOG_FORMAT", "configure_logging", "lifespan", "validate_environment"]

"""Utilities for tagging outbound service calls with a request identifier.

Each call made by :class:`pokedex.api.client.PokemonApiClient` generates a fresh
identifier, sends it as ``X-Request-ID`` and stores it in a ``ContextVar`` so
log records and error reports raised further up the same task can quote it.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "REQUEST_ID_HEADER",
    "clear_request_id",
    "get_request_id",
    "new_request_id",
    "set_request_id",
]

REQUEST_ID_HEADER = "X-Request-ID"

# Each asyncio task gets its own copy of the context, so concurrent fetches
# started through ``asyncio.gather`` never see each other's identifiers.
REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Return a fresh identifier suitable for the ``X-Request-ID`` header."""

    return uuid.uuid4().hex


def set_request_id(request_id: str) -> Token[str]:
    """Persist the provided request identifier in the context variable.

    The returned token lets tests restore the previous value afterwards.
    """

    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Retrieve the identifier of the most recent call made by this task."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Reset the request identifier, via ``token`` when one is supplied."""

    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")

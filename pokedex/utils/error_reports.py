"""Helpers for turning client exceptions into user-facing error reports.

Banners and notifications share one payload shape. Building them here keeps
the request id, timestamp and error category consistent no matter which
intent produced the failure.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pokedex.errors import MutationError, NetworkError, PokedexError, ServiceError
from pokedex.schemas.error import ErrorReport, ErrorType
from pokedex.utils.request_context import get_request_id

__all__ = [
    "LOAD_FAILURE_MESSAGE",
    "MUTATION_FAILURE_MESSAGE",
    "build_error_report",
    "classify_error",
]

LOAD_FAILURE_MESSAGE = "Could not load Pokémon data. Please try refreshing."
MUTATION_FAILURE_MESSAGE = "Failed to update favorites. Please try again."


def _current_timestamp() -> datetime:
    """Return a timezone-aware timestamp; tests monkeypatch this for determinism."""

    return datetime.now(UTC)


def classify_error(exc: BaseException) -> ErrorType:
    """Map an exception onto the :class:`ErrorType` shown to the user."""

    if isinstance(exc, MutationError):
        return ErrorType.MUTATION_ERROR
    if isinstance(exc, NetworkError):
        return ErrorType.NETWORK_ERROR
    if isinstance(exc, ServiceError):
        return ErrorType.SERVICE_ERROR
    return ErrorType.INTERNAL_ERROR


def build_error_report(
    exc: BaseException,
    *,
    message: str,
    dismissable: bool = True,
) -> ErrorReport:
    """Construct an :class:`ErrorReport` enriched with request metadata.

    ``detail`` carries the normalized service message while ``message`` stays
    the friendly text chosen by the caller.
    """

    detail = exc.message if isinstance(exc, PokedexError) else str(exc) or None
    request_id = getattr(exc, "request_id", None) or get_request_id() or None
    operation = exc.operation if isinstance(exc, MutationError) else None
    pokemon_id = exc.pokemon_id if isinstance(exc, MutationError) else None

    return ErrorReport(
        error_type=classify_error(exc),
        message=message,
        detail=detail,
        timestamp=_current_timestamp(),
        request_id=request_id,
        operation=operation,
        pokemon_id=pokemon_id,
        dismissable=dismissable,
    )

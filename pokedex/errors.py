"""Exception taxonomy for the remote boundary and favorite mutations."""

from __future__ import annotations

from typing import Literal

MutationOperation = Literal["add", "remove"]


class PokedexError(Exception):
    """Base class for every failure the client reports upward."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RemoteError(PokedexError):
    """A call to the catalog/favorites service did not produce usable data."""

    def __init__(self, message: str, *, request_id: str | None = None) -> None:
        super().__init__(message)
        self.request_id = request_id


class NetworkError(RemoteError):
    """Transport-level failure: no response was received."""


class ServiceError(RemoteError):
    """A response arrived but the envelope signalled failure or was malformed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message, request_id=request_id)
        self.status_code = status_code


class MutationError(PokedexError):
    """A favorite toggle failed; local state has been restored."""

    def __init__(
        self,
        *,
        operation: MutationOperation,
        pokemon_id: int,
        message: str,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.pokemon_id = pokemon_id
        self.request_id = request_id

    def __str__(self) -> str:
        return f"{self.operation} favorite {self.pokemon_id} failed: {self.message}"


__all__ = [
    "MutationError",
    "MutationOperation",
    "NetworkError",
    "PokedexError",
    "RemoteError",
    "ServiceError",
]

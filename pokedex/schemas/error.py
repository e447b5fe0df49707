"""Error report schemas shared by banners and notifications."""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class ErrorType(str, Enum):
    """Types of errors that can reach the view."""

    NETWORK_ERROR = "network_error"
    SERVICE_ERROR = "service_error"
    MUTATION_ERROR = "mutation_error"
    INTERNAL_ERROR = "internal_error"


class ErrorReport(BaseModel):
    """Standardized error payload surfaced to the user."""

    error_type: ErrorType = Field(..., description="Category of error")
    message: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(None, description="Underlying failure reported by the service")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the error occurred"
    )
    request_id: str | None = Field(None, description="Identifier sent with the failing request")
    operation: Literal["add", "remove"] | None = Field(
        None, description="Favorite mutation that failed, if any"
    )
    pokemon_id: int | None = Field(None, description="Pokémon targeted by the failed call")
    dismissable: bool = Field(
        True, description="False for global load failures that block rendering"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "error_type": "mutation_error",
                "message": "Failed to update favorites. Please try again.",
                "detail": "Pokemon already in favorites",
                "timestamp": "2025-11-03T10:30:00Z",
                "request_id": "5f0c6a3e9b7d4c1f8e2a0b9c7d6e5f4a",
                "operation": "add",
                "pokemon_id": 25,
                "dismissable": True,
            }
        },
    }

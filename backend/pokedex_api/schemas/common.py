"""
Pokedex API — Shared Schemas
=============================

What:  The camelCase base model plus error, delete and health payloads.
Why:   Key casing is configured here, on the serializer, instead of through
       process-wide state: a schema opts in by inheriting from CamelModel.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every response schema.

    alias_generator:  image_url → imageUrl on the way out (FastAPI
                      serializes response models by alias)
    populate_by_name: services build schemas with the snake_case names
    from_attributes:  ORM rows can be validated directly
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DeletedResponse(CamelModel):
    """Returned by every DELETE: the id of the row that is gone."""
    id: int = Field(description="Identifier of the deleted record")


class ErrorResponse(CamelModel):
    """
    Standardized error body for all API errors.

    Example (422):
        {
            "error": "validation_error",
            "message": "Validation failed: number",
            "errors": {"number": ["'25' is already in use"]},
            "requestId": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: Optional[Dict[str, List[str]]] = Field(
        default=None,
        description="Field → messages map (validation errors only)",
    )
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

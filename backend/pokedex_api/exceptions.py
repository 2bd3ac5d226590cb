"""
Pokedex API — Custom Exception Hierarchy
=========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    PokedexError (base)
    ├── ValidationFailed     → 422 Unprocessable Entity (field → messages)
    ├── NotFoundError        → 404 Not Found
    ├── IntegrityViolation   → 409 Conflict (row still referenced)
    └── DatabaseError        → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class PokedexError(Exception):
    """
    Base exception for all Pokedex application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationFailed(PokedexError):
    """
    Raised when a write fails one or more field constraints.

    What:    Carries every violation found, keyed by internal field name.
    When:    Create/update of a Pokemon, Item or PokeMove.
    HTTP:    422 Unprocessable Entity

    The errors mapping uses internal (snake_case) field names; the exception
    handler translates them to the external contract (`type`, `imageUrl`).

    Example response:
        {
            "error": "validation_error",
            "message": "Validation failed: name, type",
            "errors": {
                "name": ["'Bulbasaur' is already in use"],
                "type": ["'plasma' is not a valid Pokemon type"]
            }
        }
    """

    def __init__(
        self,
        errors: Dict[str, List[str]],
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        message = "Validation failed"
        if self.errors:
            message = f"Validation failed: {', '.join(sorted(self.errors))}"
        super().__init__(message=message, context=context)


class NotFoundError(PokedexError):
    """
    Raised when a requested resource does not exist.

    When:    show/update/destroy on an id with no matching row.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class IntegrityViolation(PokedexError):
    """
    Raised when a delete would orphan rows that still reference the target.

    When:    Deleting a Move that some Pokemon still knows.
    HTTP:    409 Conflict

    Pokemon deletes never raise this: their Items and PokeMoves are removed
    first, in dependency order.
    """

    def __init__(
        self,
        message: str = "The resource is still referenced and cannot be deleted",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PokedexError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL, constraint name) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

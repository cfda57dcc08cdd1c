"""Standardized error handling utilities for API routes.

Provides consistent error response formatting across all endpoints and
maps domain errors raised by the game model to HTTP responses.
"""
from __future__ import annotations

from fastapi import HTTPException

from gametree.models.errors import GameError, InvalidReferenceError


def not_found(resource_type: str, resource_id: object) -> HTTPException:
    """Create a 404 Not Found exception with consistent formatting.

    Args:
        resource_type: Type of resource (e.g., "Game", "Node", "Outcome")
        resource_id: The identifier that was not found

    Returns:
        HTTPException with status 404
    """
    return HTTPException(
        status_code=404,
        detail=f"{resource_type} not found: {resource_id}",
    )


def bad_request(message: str) -> HTTPException:
    """Create a 400 Bad Request exception.

    Args:
        message: Description of what was wrong with the request

    Returns:
        HTTPException with status 400
    """
    return HTTPException(status_code=400, detail=message)


def too_many_profiles(count: int, limit: int) -> HTTPException:
    """Create a 400 Bad Request exception for oversized enumerations.

    Args:
        count: Number of contingencies the request would produce
        limit: The configured maximum

    Returns:
        HTTPException with status 400
    """
    return HTTPException(
        status_code=400,
        detail=f"Too many strategy profiles ({count:,}); limit is {limit:,}",
    )


def from_game_error(error: GameError) -> HTTPException:
    """Translate a domain error into an HTTP error.

    Unknown handles become 404s; everything else the model rejected is the
    caller's fault and becomes a 400.
    """
    if isinstance(error, InvalidReferenceError):
        return not_found(error.kind, error.handle)
    return bad_request(safe_error_message(error))


def safe_error_message(error: Exception) -> str:
    """Extract a safe error message from an exception.

    Avoids leaking internal details while preserving useful information.

    Args:
        error: The exception to extract message from

    Returns:
        A safe string representation of the error
    """
    # For ValueError, the message is usually safe to show
    if isinstance(error, ValueError):
        return str(error)
    # For other exceptions, just show the type
    return type(error).__name__

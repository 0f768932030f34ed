"""Shared enums for the URL shortener application.

This module defines all status enums used across the codebase.
Using enums instead of string literals provides type safety and prevents typos.
"""

from enum import StrEnum

__all__ = ["HealthStatus", "RequestStatus"]


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class RequestStatus(StrEnum):
    """Request status values for metrics labels."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ALLOCATION_ERROR = "allocation_error"
    PERSISTENCE_ERROR = "persistence_error"
    QUERY_ERROR = "query_error"

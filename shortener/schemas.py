"""Pydantic schemas for request/response validation in the URL shortener.

Schema Hierarchy
=================
::
    ShortenRequest (Input)
    └─ long_url: str

    ShortenResponse (Output)
    ├─ short_url: str
    └─ long_url: str

    HealthResponse (Output)
    ├─ status: HealthStatus
    ├─ database: HealthStatus
    └─ cache: HealthStatus

Key Behaviours
===============
- long_url is stored verbatim; no URL validation or normalization is applied.
- short_url in responses is the bare code, not an absolute URL.
"""

from pydantic import BaseModel, Field

from shortener.enums import HealthStatus

__all__ = ["HealthResponse", "ShortenRequest", "ShortenResponse"]


class ShortenRequest(BaseModel):
    long_url: str = Field(..., description="URL to shorten, stored as given")


class ShortenResponse(BaseModel):
    short_url: str
    long_url: str


class HealthResponse(BaseModel):
    status: HealthStatus
    database: HealthStatus
    cache: HealthStatus

"""Error kinds raised by the shortening core.

``AllocationFailure``, ``PersistenceFailure`` and ``QueryFailure`` wrap
failures of the external stores and are surfaced as server errors.
``NotFound`` is a normal lookup miss and is surfaced to clients as 404.
None of them is retried inside the core.
"""

__all__ = [
    "AllocationFailure",
    "NotFound",
    "PersistenceFailure",
    "QueryFailure",
    "ShortenerError",
]


class ShortenerError(Exception):
    """Base class for shortening core errors."""


class AllocationFailure(ShortenerError):
    """The counter store could not hand out a new identifier."""


class PersistenceFailure(ShortenerError):
    """The durable store rejected or could not receive a new record."""


class QueryFailure(ShortenerError):
    """The durable store could not answer a lookup."""


class NotFound(ShortenerError):
    """No record exists for the requested short code."""

    def __init__(self, short_url: str):
        super().__init__(f"Short URL not found: {short_url}")
        self.short_url = short_url

"""URL Shortener Service Layer - Core Business Logic

This module orchestrates identifier allocation, short code encoding and
durable persistence for URL creation, and key lookups for resolution.

Architecture Overview
=====================
::
    ┌─────────────────────────────────────────────────────────┐
    │                   ShorteningService                     │
    │  ┌──────────────┐  ┌──────────────┐  ┌───────────────┐  │
    │  │ IdAllocator  │  │   encode()   │  │   URLStore    │  │
    │  │ • next()     │  │ • permuted   │  │ • put()       │  │
    │  │              │  │   base62     │  │ • get()       │  │
    │  └──────┬───────┘  └──────────────┘  └───────┬───────┘  │
    └─────────┼────────────────────────────────────┼──────────┘
              ▼                                    ▼
    ┌─────────────────┐                  ┌─────────────────┐
    │     Redis       │                  │   SQL database  │
    │  (INCR url_id)  │                  │  (urls table)   │
    └─────────────────┘                  └─────────────────┘

URL Creation Flow
-----------------
::
    ┌─────────────┐
    │ POST        │
    │ /shorten    │
    └──────┬──────┘
           ▼
    ┌─────────────┐   fails   ┌───────────────────┐
    │ allocate id │──────────▶│ AllocationFailure │
    └──────┬──────┘           │ (nothing written) │
           ▼                  └───────────────────┘
    ┌─────────────┐
    │ id + offset │
    │ → encode()  │
    └──────┬──────┘
           ▼
    ┌─────────────┐   fails   ┌───────────────────┐
    │ store.put() │──────────▶│ PersistenceFailure│
    └──────┬──────┘           │ (id abandoned)    │
           ▼                  └───────────────────┘
    ┌─────────────┐
    │ URLRecord   │
    └─────────────┘

Key Behaviours
===============
- The two stores share no transaction. An id allocated before a failed write
  is skipped forever; codes stay unique, the id sequence just has a gap.
- Nothing is retried. Callers see every store failure immediately.
- Resolution is a plain key lookup. Codes are never decoded back to ids.
- No in-process locks: all shared state lives in the external stores.
"""

import datetime
import logging
import time
from typing import Optional

from prometheus_client import Counter, Histogram

from shortener.allocator import IdAllocator
from shortener.config import Settings
from shortener.encoder import encode
from shortener.enums import RequestStatus
from shortener.errors import AllocationFailure, NotFound, PersistenceFailure, QueryFailure
from shortener.store import URLRecord, URLStore

__all__ = ["ShorteningService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

CREATE_REQUESTS_TOTAL = Counter(
    "shortener_create_requests_total",
    "Total short URL creation requests",
    ["status"],
)
RESOLVE_REQUESTS_TOTAL = Counter(
    "shortener_resolve_requests_total",
    "Total short URL resolution requests",
    ["status"],
)
CREATE_DURATION = Histogram(
    "shortener_create_duration_seconds",
    "Time taken to create short URLs",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
RESOLVE_DURATION = Histogram(
    "shortener_resolve_duration_seconds",
    "Time taken to resolve short URLs",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25],
)
ABANDONED_IDS_TOTAL = Counter(
    "shortener_abandoned_ids_total",
    "Identifiers allocated but never persisted",
)


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================


class ShorteningService:
    """Creates and resolves short URLs.

    Example:
        >>> service = ShorteningService(allocator, store, secret_key="s3cret")
        >>> record = await service.create("https://example.com")
        >>> await service.resolve(record.short_url)
        'https://example.com'
    """

    def __init__(
        self,
        allocator: IdAllocator,
        store: URLStore,
        secret_key: str,
        id_offset: int = 14_000_000,
        logger: Optional[logging.Logger | logging.LoggerAdapter] = None,
    ):
        self._allocator = allocator
        self._store = store
        self._secret_key = secret_key
        self._id_offset = id_offset
        self._logger = logger or logging.getLogger("shortener")

    @classmethod
    def from_settings(
        cls,
        allocator: IdAllocator,
        store: URLStore,
        settings: Settings,
        logger: Optional[logging.Logger | logging.LoggerAdapter] = None,
    ) -> "ShorteningService":
        return cls(
            allocator,
            store,
            secret_key=settings.SECRET_KEY,
            id_offset=settings.ID_OFFSET,
            logger=logger,
        )

    # ========================================================================
    # PUBLIC API METHODS
    # ========================================================================

    async def create(self, long_url: str) -> URLRecord:
        """Allocate an identifier, encode it and persist the mapping.

        Args:
            long_url: Target URL, stored verbatim

        Returns:
            URLRecord: The persisted record

        Raises:
            AllocationFailure: If no identifier could be allocated. Nothing
                was written.
            PersistenceFailure: If the record could not be written. The
                allocated identifier is abandoned.
        """
        start_time = time.perf_counter()

        try:
            identifier = await self._allocator.next()
        except AllocationFailure as exc:
            CREATE_REQUESTS_TOTAL.labels(status=RequestStatus.ALLOCATION_ERROR).inc()
            self._logger.error(f"Identifier allocation failed: {exc}")
            raise

        short_url = self._encode(identifier)
        record = URLRecord(
            short_url=short_url,
            long_url=long_url,
            created_at=datetime.datetime.now(datetime.timezone.utc),
        )

        try:
            await self._store.put(record)
        except PersistenceFailure as exc:
            CREATE_REQUESTS_TOTAL.labels(status=RequestStatus.PERSISTENCE_ERROR).inc()
            ABANDONED_IDS_TOTAL.inc()
            self._logger.warning(f"Identifier {identifier} abandoned, write of '{short_url}' failed: {exc}")
            raise

        duration = time.perf_counter() - start_time
        CREATE_DURATION.observe(duration)
        CREATE_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"Short URL created: {short_url} -> {long_url} in {duration:.3f}s")
        return record

    async def resolve(self, short_url: str) -> str:
        """Return the long URL stored for ``short_url``.

        Raises:
            NotFound: If no record exists for the code
            QueryFailure: If the store could not be queried
        """
        start_time = time.perf_counter()

        try:
            record = await self._store.get(short_url)
        except QueryFailure as exc:
            RESOLVE_REQUESTS_TOTAL.labels(status=RequestStatus.QUERY_ERROR).inc()
            self._logger.error(f"Lookup failed for {short_url}: {exc}")
            raise

        RESOLVE_DURATION.observe(time.perf_counter() - start_time)

        if record is None:
            RESOLVE_REQUESTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            self._logger.info(f"Short URL not found: {short_url}")
            raise NotFound(short_url)

        RESOLVE_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.debug(f"Resolved {short_url} -> {record.long_url}")
        return record.long_url

    # ========================================================================
    # PRIVATE HELPER METHODS
    # ========================================================================

    def _encode(self, identifier: int) -> str:
        """Offset and encode an allocated identifier.

        Raises:
            AllocationFailure: If the offset identifier leaves the 64-bit range
        """
        try:
            return encode(self._secret_key, identifier + self._id_offset)
        except ValueError as exc:
            CREATE_REQUESTS_TOTAL.labels(status=RequestStatus.ALLOCATION_ERROR).inc()
            raise AllocationFailure(f"Identifier {identifier} cannot be encoded: {exc}") from exc

"""Durable short code to long URL mapping store.

Flow Diagram — put() / get()
============================
::
    put(record)                      get(short_url)
    ┌─────────────┐                  ┌─────────────┐
    │ new session │                  │ new session │
    └──────┬──────┘                  └──────┬──────┘
           ▼                                ▼
    ┌─────────────┐                  ┌─────────────┐
    │ INSERT urls │                  │ SELECT ...  │
    │ + COMMIT    │                  │ WHERE pk = ?│
    └──────┬──────┘                  └──────┬──────┘
    OK?    │                         OK?    │
    ┌──────┴────┐                    ┌──────┴────┐
    │ NO        │ YES                │ NO        │ YES
    ▼           ▼                    ▼           ▼
┌──────────┐ ┌──────┐          ┌──────────┐ ┌───────────┐
│ rollback │ │ done │          │  Query   │ │ record or │
│Persistence│ └──────┘         │  Failure │ │ None      │
│ Failure  │                   └──────────┘ └───────────┘
└──────────┘

Key Behaviours
===============
- Writes are plain inserts keyed by short_url, never upserts. Two writers
  never target the same key because each code comes from a fresh identifier.
- Each call uses its own session; nothing is shared between requests.
- Store errors are wrapped in core error kinds and never retried here.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shortener.errors import PersistenceFailure, QueryFailure
from shortener.models import URL

__all__ = ["SQLAlchemyURLStore", "URLRecord", "URLStore"]

logger = logging.getLogger("shortener")


@dataclass(frozen=True)
class URLRecord:
    """An immutable short code to long URL association."""

    short_url: str
    long_url: str
    created_at: datetime.datetime


class URLStore(Protocol):
    """Key-value table of short_url to long_url."""

    async def put(self, record: URLRecord) -> None: ...

    async def get(self, short_url: str) -> Optional[URLRecord]: ...


class SQLAlchemyURLStore:
    """``URLStore`` over the ``urls`` table using SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def put(self, record: URLRecord) -> None:
        """Insert a new record.

        Raises:
            PersistenceFailure: If the insert or commit fails
        """
        async with self._session_factory() as session:
            try:
                session.add(
                    URL(
                        short_url=record.short_url,
                        long_url=record.long_url,
                        created_at=record.created_at,
                    )
                )
                await session.commit()
            except (SQLAlchemyError, OSError) as exc:
                try:
                    await session.rollback()
                except (SQLAlchemyError, OSError) as rollback_exc:
                    logger.warning(f"Rollback after failed write of '{record.short_url}' failed: {rollback_exc}")
                raise PersistenceFailure(f"Failed to store '{record.short_url}': {exc}") from exc

    async def get(self, short_url: str) -> Optional[URLRecord]:
        """Look up a record by short code.

        Raises:
            QueryFailure: If the select fails
        """
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(URL).where(URL.short_url == short_url))
            except (SQLAlchemyError, OSError) as exc:
                raise QueryFailure(f"Failed to look up '{short_url}': {exc}") from exc

            row = result.scalar_one_or_none()
            if row is None:
                return None
            return URLRecord(short_url=row.short_url, long_url=row.long_url, created_at=row.created_at)

"""SQLAlchemy ORM models for the URL shortener application.

Data Model Layout
=================
::
    urls table
    ├─ short_url (VARCHAR(16) PRIMARY KEY)
    ├─ long_url (TEXT NOT NULL)
    └─ created_at (TIMESTAMPTZ NOT NULL)

Key Behaviours
===============
- short_url is the primary key; lookups are point reads by key.
- Rows are inserted once and never updated.
- created_at is set by the application at creation time.

Classes:
    URL:  Persisted short code to long URL mapping.
"""

import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shortener.database import Base

__all__ = ["URL"]


class URL(Base):
    __tablename__ = "urls"

    # 2**64 - 1 encodes to 11 base62 symbols.
    short_url: Mapped[str] = mapped_column(String(16), primary_key=True)
    long_url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<URL(short_url='{self.short_url}', long_url='{self.long_url}')>"

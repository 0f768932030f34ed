"""Dependency injection with a singleton service manager.

Shared resources (settings, logger, Redis client, allocator, store) are built
once at startup and handed to request handlers through FastAPI dependencies.
Tests swap the whole shortening service out with ``app.dependency_overrides``.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from fastapi import Depends
from sqlalchemy import text

from shortener.allocator import IdAllocator, RedisCounter
from shortener.config import Settings, get_settings
from shortener.database import async_session
from shortener.service import ShorteningService
from shortener.store import SQLAlchemyURLStore

__all__ = ["ServiceManager", "get_service_manager", "get_shortening_service"]


# ============================================================================
# SINGLETON SERVICE MANAGER
# ============================================================================


class ServiceManager:
    """Singleton service manager for shared resources."""

    _instance: Optional["ServiceManager"] = None
    _initialized: bool = False

    settings: Settings
    logger: logging.Logger
    cache: redis.Redis
    allocator: IdAllocator
    store: SQLAlchemyURLStore

    def __new__(cls) -> "ServiceManager":
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def initialize(self) -> None:
        """Initialize shared resources once at startup."""
        if not self._initialized:
            self.settings = get_settings()
            self.logger = self._setup_logger()
            self.cache = redis.from_url(self.settings.REDIS_URL, encoding="utf-8", decode_responses=True)
            self.allocator = IdAllocator(RedisCounter(self.cache), key=self.settings.ID_COUNTER_KEY)
            self.store = SQLAlchemyURLStore(async_session)
            if self.settings.uses_default_secret:
                self.logger.warning(
                    "SECRET_KEY is not set; using the public default. "
                    "Issued codes follow a predictable alphabet permutation."
                )
            self._initialized = True

    def _setup_logger(self) -> logging.Logger:
        """Setup logger once."""
        logger = logging.getLogger("shortener")
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(self.settings.LOG_LEVEL)
        return logger

    def build_service(self) -> ShorteningService:
        return ShorteningService.from_settings(self.allocator, self.store, self.settings, logger=self.logger)

    async def ping_cache(self) -> None:
        await self.cache.ping()

    async def ping_database(self) -> None:
        async with async_session() as session:
            await session.execute(text("SELECT 1"))

    async def cleanup(self) -> None:
        """Cleanup shared resources at shutdown."""
        if hasattr(self, "cache"):
            await self.cache.aclose()
        self._initialized = False


# Global singleton instance
_service_manager = ServiceManager()


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


async def get_service_manager() -> ServiceManager:
    if not _service_manager._initialized:
        await _service_manager.initialize()
    return _service_manager


def get_shortening_service(manager: ServiceManager = Depends(get_service_manager)) -> ShorteningService:
    return manager.build_service()

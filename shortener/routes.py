"""FastAPI route definitions for the URL shortener REST API.

API Endpoint Overview
=====================
::
    GET  /_health
        └─ HealthResponse (200)

    POST /shorten
        ├─ ShortenRequest (request body)
        └─ ShortenResponse (201) or 422/500

    GET  /:short_url
        └─ 307 Redirect, 404 or 500

Key Behaviours
===============
- Allocation, persistence and query failures map to 500.
- Unknown codes map to 404 and are logged at info level, not as errors.
- Fixed paths start with "_", which is outside the code alphabet, so no
  issued code can ever be shadowed by them.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from shortener.dependencies import ServiceManager, get_service_manager, get_shortening_service
from shortener.enums import HealthStatus
from shortener.errors import AllocationFailure, NotFound, PersistenceFailure, QueryFailure
from shortener.schemas import HealthResponse, ShortenRequest, ShortenResponse
from shortener.service import ShorteningService

__all__ = ["router"]

router = APIRouter()


@router.get("/_health", response_model=HealthResponse, tags=["health"])
async def health_check(manager: ServiceManager = Depends(get_service_manager)) -> HealthResponse:
    db_status = HealthStatus.HEALTHY
    cache_status = HealthStatus.HEALTHY

    try:
        await manager.ping_database()
    except Exception as e:
        manager.logger.error(f"Database health check failed: {e}")
        db_status = HealthStatus.UNHEALTHY

    try:
        await manager.ping_cache()
    except Exception as e:
        manager.logger.error(f"Cache health check failed: {e}")
        cache_status = HealthStatus.UNHEALTHY

    status = (
        HealthStatus.HEALTHY
        if db_status is HealthStatus.HEALTHY and cache_status is HealthStatus.HEALTHY
        else HealthStatus.UNHEALTHY
    )
    return HealthResponse(status=status, database=db_status, cache=cache_status)


@router.post("/shorten", response_model=ShortenResponse, status_code=201, tags=["urls"])
async def shorten_url(
    payload: ShortenRequest,
    service: ShorteningService = Depends(get_shortening_service),
) -> ShortenResponse:
    try:
        record = await service.create(payload.long_url)
    except AllocationFailure as exc:
        raise HTTPException(status_code=500, detail="Counter store error") from exc
    except PersistenceFailure as exc:
        raise HTTPException(status_code=500, detail="Database error") from exc

    return ShortenResponse(short_url=record.short_url, long_url=record.long_url)


@router.get("/{short_url}", tags=["redirect"])
async def redirect_to_long_url(
    short_url: str,
    service: ShorteningService = Depends(get_shortening_service),
) -> RedirectResponse:
    try:
        long_url = await service.resolve(short_url)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="URL not found") from exc
    except QueryFailure as exc:
        raise HTTPException(status_code=500, detail="Database error") from exc

    return RedirectResponse(url=long_url, status_code=307)

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from antiptrn_core.api.models import CountResponse
from antiptrn_core.counter import CounterService
from antiptrn_core.errors import StoreNotConfigured

router = APIRouter(prefix="/api", tags=["counter"])

NO_STORE = "no-store"


def _counter_service(request: Request) -> CounterService:
    service = getattr(request.app.state, "counter_service", None)
    if service is None:
        raise StoreNotConfigured("Counter store URL is not configured (set REDIS_URL)")
    return service


@router.get("/count", response_model=CountResponse)
async def read_count(request: Request, response: Response) -> CountResponse:
    service = _counter_service(request)
    response.headers["Cache-Control"] = NO_STORE
    return CountResponse(count=await service.display_count())


@router.get("/track", response_model=CountResponse)
async def track_install(request: Request, response: Response) -> CountResponse:
    service = _counter_service(request)
    # Store errors propagate to the app's exception handlers.
    response.headers["Cache-Control"] = NO_STORE
    return CountResponse(count=await service.increment())

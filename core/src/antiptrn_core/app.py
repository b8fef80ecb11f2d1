from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from antiptrn_core import __version__
from antiptrn_core.api.counter import NO_STORE
from antiptrn_core.api.counter import router as counter_router
from antiptrn_core.api.models import fail
from antiptrn_core.config import load_core_config
from antiptrn_core.counter import CounterService
from antiptrn_core.errors import InvalidStoredValue, StoreNotConfigured, StoreUnavailable
from antiptrn_core.logging_setup import configure_logging
from antiptrn_core.store import build_counter_store

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {404: "not_found", 405: "method_not_allowed"}


def _error_response(status_code: int, *, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=fail(code=code, message=message).model_dump(mode="json"),
        headers={"Cache-Control": NO_STORE},
    )


def create_app(*, counter_service: CounterService | None = None) -> FastAPI:
    """Build the API app.

    `counter_service` bypasses store construction from config (used by tests and the
    in-process dev server).
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        config = load_core_config()
        configure_logging(config.logging)

        logger.info("antiptrn API starting up")

        service = counter_service
        if service is None:
            try:
                store = build_counter_store(config)
            except StoreNotConfigured:
                logger.error("REDIS_URL is not set; counter endpoints will fail")
            else:
                service = CounterService(store, key=config.store.counter_key)

        if service is not None:
            logger.info(
                "Counter store: %s (key %r)", service.store.provider_name, service.key
            )

        app.state.antiptrn_config = config
        app.state.counter_service = service

        yield

    app = FastAPI(title="antiptrn API", version=__version__, lifespan=_lifespan)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    @app.exception_handler(StoreUnavailable)
    async def _store_unavailable_handler(
        request: Request, exc: StoreUnavailable
    ) -> JSONResponse:
        logger.error("Counter store unavailable on %s: %s", request.url.path, exc)
        return _error_response(
            503, code="store_unavailable", message="Counter store unavailable"
        )

    @app.exception_handler(InvalidStoredValue)
    async def _invalid_value_handler(
        request: Request, exc: InvalidStoredValue
    ) -> JSONResponse:
        logger.error("Counter value rejected on %s: %s", request.url.path, exc)
        return _error_response(
            500, code="invalid_stored_value", message="Stored counter value is invalid"
        )

    @app.exception_handler(StoreNotConfigured)
    async def _not_configured_handler(
        request: Request, exc: StoreNotConfigured
    ) -> JSONResponse:
        return _error_response(500, code="config_error", message=str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(
                code=HTTP_ERROR_CODES.get(exc.status_code, "client_error"),
                message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
            ).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content=fail(code="internal_error", message="Internal server error").model_dump(
                mode="json"
            ),
        )

    app.include_router(counter_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/readyz", response_model=None)
    async def readyz(request: Request) -> dict[str, str] | JSONResponse:
        service = getattr(request.app.state, "counter_service", None)
        if service is None:
            return _error_response(
                503, code="config_error", message="Counter store is not configured"
            )
        if not await service.store.ping():
            return _error_response(
                503, code="store_unavailable", message="Counter store unavailable"
            )
        return {"status": "ok"}

    return app

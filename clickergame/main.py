import time
import uuid

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from clickergame.core.config import get_settings
from clickergame.core.exceptions import (
    AppError,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from clickergame.core.logging import bind_request_id, configure_logging, get_logger
from clickergame.db.init import init_db
from clickergame.routers import auth, game, prices, stocks
from clickergame.services.broadcast import PushGateway
from clickergame.storage.base import DocumentStore, get_storage
from clickergame.worker.ticker import PriceTicker

settings = get_settings()
configure_logging(debug=settings.debug)
log = get_logger(__name__)


def create_app(store: DocumentStore | None = None, gateway: PushGateway | None = None) -> FastAPI:
    app = FastAPI(
        title="Clicker Game API",
        version="1.0.0",
    )
    app.state.store = store or get_storage()
    app.state.gateway = gateway or PushGateway()
    app.state.ticker = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_id_middleware(request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_request_id(request_id)
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        log.info(
            "request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        response.headers["X-Request-ID"] = request_id
        return response

    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # Routers
    app.include_router(auth.router, tags=["auth"])
    app.include_router(game.router, prefix="/api", tags=["game"])
    app.include_router(stocks.router, prefix="/api", tags=["stocks"])
    app.include_router(prices.router, tags=["prices"])

    @app.on_event("startup")
    async def startup():
        await init_db(app.state.store)
        if settings.price_ticker_enabled:
            app.state.ticker = PriceTicker(app.state.store, app.state.gateway, settings.price_tick_seconds)
            app.state.ticker.start()
        log.info("startup", storage=settings.storage_backend, ticker=settings.price_ticker_enabled)

    @app.on_event("shutdown")
    async def shutdown():
        if app.state.ticker is not None:
            await app.state.ticker.stop()
        await app.state.gateway.close()

    @app.get("/health")
    async def health():
        """Health check for load balancers and monitoring."""
        return {"status": "ok"}

    return app


app = create_app()

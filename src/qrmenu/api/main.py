from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from qrmenu.api.error_handling import register_exception_handlers
from qrmenu.api.middleware.request_id import RequestIDMiddleware
from qrmenu.api.routes.auth import router as auth_router
from qrmenu.api.routes.categories import router as categories_router
from qrmenu.api.routes.health import router as health_router
from qrmenu.api.routes.items import router as items_router
from qrmenu.api.routes.metrics import router as metrics_router
from qrmenu.api.routes.public_menu import router as public_menu_router
from qrmenu.api.routes.restaurants import router as restaurants_router
from qrmenu.api.routes.upload import router as upload_router
from qrmenu.infrastructure.observability.logging_config import configure_logging
from qrmenu.infrastructure.observability.otel import configure_otel

logger = logging.getLogger("qrmenu.api.access")

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "route", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
)

_LOCAL_FRONTEND_ORIGINS = "http://localhost:3000,http://localhost:5173"


def _cors_allow_origins() -> list[str]:
    env = os.getenv("APP_ENV", "dev").lower()
    default_value = _LOCAL_FRONTEND_ORIGINS if env in {"dev", "test"} else ""
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", default_value)
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def _route_label(request: Request) -> str:
    # templated path keeps slugs and ids out of metric labels
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        path = request.url.path
        method = request.method
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - started) * 1000
            route = _route_label(request)
            REQUEST_COUNT.labels(method=method, route=route, status_code="500").inc()
            REQUEST_LATENCY.labels(method=method, route=route).observe(duration_ms / 1000)
            logger.exception(
                "request_error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": 500,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        route = _route_label(request)
        REQUEST_COUNT.labels(
            method=method, route=route, status_code=str(response.status_code)
        ).inc()
        REQUEST_LATENCY.labels(method=method, route=route).observe(duration_ms / 1000)
        logger.info(
            "request_complete",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="QR Menu Backend", version="0.1.0")
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(auth_router)
    app.include_router(restaurants_router)
    app.include_router(categories_router)
    app.include_router(items_router)
    app.include_router(upload_router)
    app.include_router(public_menu_router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id", "X-Menu-Url", "Content-Disposition"],
    )

    configure_otel(app)
    return app


app = create_app()

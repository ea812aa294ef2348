"""Entry-point for a demo host → FastAPI ASGI app with the explorer mounted.

This module constructs a host FastAPI instance, wires global middleware,
registers a sample model, mounts the explorer and the REST API, and exposes
the `app` variable ASGI servers expect (``uvicorn api_explorer.main:app``).
"""

from __future__ import annotations

import logging
import os
import traceback
from contextvars import ContextVar
from time import perf_counter
from typing import Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, Request, Response
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware

from api_explorer.explorer import explorer
from api_explorer.routers.rest_routes import rest
from api_explorer.schemas import ApiInfo, ExplorerOptions
from api_explorer.settings import (
    APP_ENV,
    EXPLORER_MOUNT_PATH,
    EXPLORER_SWAGGER_UI,
    EXPLORER_UI_DIRS,
    REMOTING_CORS,
    REST_API_ROOT,
)
from api_explorer.utils.host import configure_host
from api_explorer.utils.logger import configure_logging, logger


class Product(BaseModel):
    """Sample model remoted by the demo host."""

    name: str = Field(..., examples=["pen"])
    price: float = Field(0, ge=0, examples=[1.5])


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach request-level context vars for structured logging."""

    _request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:  # type: ignore[override]
        start = perf_counter()
        request_id = request.headers.get("X-Request-Id", os.urandom(4).hex())
        token = self._request_id_ctx.set(request_id)
        response: Optional[Response] = None
        try:
            response = await call_next(request)
        finally:
            duration_ms = (perf_counter() - start) * 1000
            logger.info(
                "request.complete",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code if response is not None else 500,
                    "duration_ms": round(duration_ms, 2),
                    "request_id": request_id,
                },
            )
            self._request_id_ctx.reset(token)
        return response


def create_app(options: Optional[ExplorerOptions] = None, *, with_sample_model: bool = True) -> FastAPI:
    """Build the demo host.

    The explorer is skipped when ``APP_ENV`` is ``production`` unless explicit
    ``options`` are passed.
    """
    configure_logging()

    app = FastAPI(
        title="API Explorer Demo Host",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    registry = configure_host(
        app,
        rest_api_root=REST_API_ROOT,
        remoting={} if REMOTING_CORS else {"cors": False},
        api_info=ApiInfo(title="API Explorer Demo", version="0.1.0"),
    )
    if with_sample_model:
        registry.register(Product)

    # Global middleware
    app.add_middleware(RequestContextMiddleware)

    # Global exception handler - logs full tracebacks for any unhandled 500s
    @app.exception_handler(Exception)
    async def log_unhandled_exceptions(request: Request, exc: Exception):
        """Log full traceback for any unhandled exception that would become a 500."""
        error_logger = logging.getLogger("uvicorn.error")
        error_logger.error(
            "UNHANDLED %s at %s %s\n%s",
            type(exc).__name__,
            request.method,
            request.url.path,
            "".join(traceback.format_tb(exc.__traceback__)),
        )
        # Re-raise so the server still returns the appropriate status code
        raise exc

    # Health check
    @app.get("/")
    async def root() -> Dict[str, str]:  # pylint: disable=unused-variable
        return {"status": "ok"}

    # Explorer before REST: a REST root of "/" would otherwise shadow it.
    if options is not None or APP_ENV != "production":
        explorer(
            app,
            options
            or ExplorerOptions(
                mount_path=EXPLORER_MOUNT_PATH,
                ui_dirs=EXPLORER_UI_DIRS,
                swagger_ui=EXPLORER_SWAGGER_UI,
            ),
        )
    rest(app)

    return app


# The object ASGI servers import
app = create_app()

"""CORS wiring shared by the explorer and REST sub-apps."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from api_explorer.utils.host import get_remoting

ALL_METHODS: List[str] = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Echo any origin and allow credentials unless the host supplies its own options.
DEFAULT_CORS_OPTIONS: Dict[str, Any] = {
    "allow_origin_regex": ".*",
    "allow_credentials": True,
    "allow_methods": ALL_METHODS,
    "allow_headers": ["*"],
    "max_age": 600,
}


class BareOptionsMiddleware(BaseHTTPMiddleware):
    """Answer ``OPTIONS`` requests that lack ``Access-Control-Request-Method``.

    ``CORSMiddleware`` only treats an ``OPTIONS`` carrying that header as a
    pre-flight; a bare one would otherwise reach the router and get a 405
    without the allowed methods.
    """

    def __init__(self, app, allow_methods: Sequence[str]) -> None:  # noqa: ANN001
        super().__init__(app)
        methods = ALL_METHODS if "*" in allow_methods else allow_methods
        self.allow_methods = ", ".join(methods)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:  # type: ignore[override]
        if request.method == "OPTIONS" and "access-control-request-method" not in request.headers:
            return Response(
                status_code=204,
                headers={"Access-Control-Allow-Methods": self.allow_methods, "Allow": self.allow_methods},
            )
        return await call_next(request)


def cors_options(host: FastAPI) -> Optional[Dict[str, Any]]:
    """Return CORSMiddleware kwargs for ``host`` or ``None`` when disabled."""
    cors = get_remoting(host).get("cors", True)
    if cors is False:
        return None
    if isinstance(cors, dict):
        return dict(cors)
    return dict(DEFAULT_CORS_OPTIONS)


def install_cors(sub_app: FastAPI, host: FastAPI) -> bool:
    options = cors_options(host)
    if options is None:
        return False
    # Added first so CORSMiddleware wraps it and still stamps the origin headers.
    sub_app.add_middleware(BareOptionsMiddleware, allow_methods=options.get("allow_methods", ("GET",)))
    sub_app.add_middleware(CORSMiddleware, **options)
    return True

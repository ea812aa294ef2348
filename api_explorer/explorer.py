"""Mount the API explorer into a host FastAPI application.

Usage::

    from fastapi import FastAPI
    from api_explorer import configure_host, explorer, rest

    app = FastAPI()
    registry = configure_host(app, rest_api_root="/api")
    registry.register(Product)
    explorer(app, mount_path="/explorer")  # GET /explorer/ → UI
    rest(app)                              # GET /api/products → records
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from api_explorer.routers.explorer_routes import build_explorer_router
from api_explorer.schemas import ExplorerOptions
from api_explorer.utils.cors import install_cors
from api_explorer.utils.host import get_registry
from api_explorer.utils.logger import logger
from api_explorer.utils.static import LayeredStaticFiles

__all__ = ["explorer", "explorer_routes", "resolve_options"]

OptionsLike = Union[ExplorerOptions, Dict[str, Any], None]


def resolve_options(options: OptionsLike = None, **overrides: Any) -> ExplorerOptions:
    """Merge ``overrides`` over ``options`` and validate the result."""
    if isinstance(options, ExplorerOptions):
        base: Dict[str, Any] = options.model_dump(exclude_unset=True)
    else:
        base = dict(options or {})
    return ExplorerOptions(**{**base, **overrides})


def explorer_routes(app: FastAPI, options: OptionsLike = None, **overrides: Any) -> FastAPI:
    """Build the explorer sub-application without mounting it.

    The caller picks the mount point, e.g.
    ``app.mount("/explorer", explorer_routes(app))``.
    """
    resolved = resolve_options(options, **overrides)
    get_registry(app)

    sub_app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
    install_cors(sub_app, app)
    sub_app.include_router(build_explorer_router(app, resolved))

    if resolved.swagger_ui:
        # Route table wins over the static mount, so override dirs cannot shadow config.json.
        sub_app.mount("/", LayeredStaticFiles.for_ui(resolved.ui_dirs), name="ui")
    return sub_app


def explorer(app: FastAPI, options: OptionsLike = None, **overrides: Any) -> ExplorerOptions:
    """Mount the explorer at ``options.mount_path`` and record it on ``app.state``."""
    resolved = resolve_options(options, **overrides)
    mount_path = resolved.mount_path

    async def redirect_to_slash(request: Request) -> RedirectResponse:  # noqa: WPS430
        target = request.url.path + "/"
        if request.url.query:
            target += "?" + request.url.query
        return RedirectResponse(target, status_code=301)

    app.add_api_route(mount_path, redirect_to_slash, methods=["GET", "HEAD"], include_in_schema=False)
    app.mount(mount_path, explorer_routes(app, resolved), name="api_explorer")
    app.state.api_explorer = resolved

    logger.info(
        "explorer.mounted",
        extra={
            "mount_path": mount_path,
            "swagger_ui": resolved.swagger_ui,
            "ui_dirs": resolved.ui_dirs,
        },
    )
    return resolved

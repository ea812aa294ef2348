from __future__ import annotations

"""OpenAPI generation for the explorer – reads the host registry on each call."""

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from api_explorer.routers.rest_routes import build_rest_router
from api_explorer.schemas import ExplorerOptions
from api_explorer.utils.host import get_api_info, get_registry, get_rest_api_root
from api_explorer.utils.logger import logger
from api_explorer.utils.url_join import strip_trailing_slash, url_join

__all__ = ["build_swagger_object", "base_path"]


def base_path(host: FastAPI) -> str:
    """REST root without a trailing slash (``/apis/`` → ``/apis``, ``/`` → ``""``).

    Swagger UI builds operation URLs by concatenating the server URL and the
    path, and every path already starts with a slash.
    """
    return strip_trailing_slash(url_join("/", get_rest_api_root(host)))


def build_swagger_object(host: FastAPI, options: Optional[ExplorerOptions] = None) -> Dict[str, Any]:
    """Generate the description of ``host``'s REST API from its registry."""
    options = options or ExplorerOptions()
    registry = get_registry(host)
    info = options.api_info or get_api_info(host)
    root = base_path(host)

    spec = get_openapi(
        title=info.title,
        version=info.version,
        description=info.description,
        routes=build_rest_router(registry).routes,
        servers=[{"url": root}] if root else None,
        separate_input_output_schemas=False,
    )
    logger.debug(
        "explorer.swagger_built",
        extra={"models": len(registry), "paths": len(spec.get("paths", {})), "registry_version": registry.version},
    )
    return spec

"""Explorer endpoints – ``config.json`` plus the generated description."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from urllib.parse import urlsplit

import yaml
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from api_explorer.openapi import build_swagger_object
from api_explorer.schemas import ExplorerConfig, ExplorerOptions
from api_explorer.utils.url_join import url_join

__all__ = ["build_explorer_router", "resolve_source_path"]

_INDEX_SUFFIX = re.compile(r"/index\.html$")
_CONFIG_SUFFIX = re.compile(r"/config\.json$")


def resolve_source_path(request: Request) -> str:
    """Path the explorer is served from, as seen by the browser.

    The ``Referer`` is preferred so the explorer keeps working behind a
    proxy that mounts it at a deeper path; otherwise the request path is used.
    """
    source = ""
    referer = request.headers.get("referer")
    if referer:
        source = _INDEX_SUFFIX.sub("", urlsplit(referer).path)
    if not source:
        source = _CONFIG_SUFFIX.sub("", request.url.path)
    return source


def _yaml_path(resource_path: str) -> str:
    stem = resource_path.rsplit(".", 1)[0] if "." in resource_path else resource_path
    return f"/{stem}.yaml"


def build_explorer_router(host: FastAPI, options: ExplorerOptions) -> APIRouter:
    router = APIRouter()

    @router.get("/config.json", response_model=ExplorerConfig, response_model_exclude_none=True)
    async def config_json(request: Request) -> ExplorerConfig:  # noqa: WPS430
        """Bootstrap document read by the front-end to locate the description."""
        return ExplorerConfig(
            url=url_join(resolve_source_path(request), "/" + options.resource_path),
            auth=options.auth,
        )

    @router.get("/" + options.resource_path)
    async def swagger_json() -> JSONResponse:  # noqa: WPS430
        return JSONResponse(build_swagger_object(host, options))

    @router.get(_yaml_path(options.resource_path))
    async def swagger_yaml() -> Response:  # noqa: WPS430
        spec = build_swagger_object(host, options)
        yaml_str = yaml.safe_dump(spec, sort_keys=False)
        date_comment = f"# generated: {datetime.now(timezone.utc).date().isoformat()}\n"
        return Response(
            content=date_comment + yaml_str,
            media_type="application/x-yaml",
            headers={"Cache-Control": "public, max-age=60"},
        )

    return router

"""REST exposure of the model registry.

``build_rest_router`` is also what the explorer feeds to the OpenAPI
generator, so the description always matches what ``RestApi`` serves.
"""

# No ``from __future__ import annotations`` here: endpoint annotations refer to
# per-model classes bound in local scopes and must be evaluated eagerly.

import json
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException, Query, status
from starlette.types import Receive, Scope, Send

from api_explorer.models import ModelDefinition, ModelRegistry, RemoteMethod
from api_explorer.schemas import CountResponse, ExistsResponse
from api_explorer.utils.cors import install_cors
from api_explorer.utils.host import get_registry, get_rest_api_root
from api_explorer.utils.logger import logger
from api_explorer.utils.url_join import strip_trailing_slash, url_join

__all__ = ["build_rest_router", "RestApi", "rest"]

FILTER_DESCRIPTION = 'JSON filter, e.g. {"where": {"name": "pen"}, "limit": 10, "skip": 0}'
WHERE_DESCRIPTION = 'JSON criteria, e.g. {"name": "pen"}'


# ---------------------------------------------------------------------------
# Filter parsing
# ---------------------------------------------------------------------------


def _load_json(raw: Optional[str], param: str) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Invalid JSON in '{param}': {exc.msg}") from exc
    if not isinstance(value, dict):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"'{param}' must be a JSON object")
    return value


def _non_negative(value: Any, key: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"filter.{key} must be a non-negative integer")
    return value


def parse_filter(raw: Optional[str]) -> Dict[str, Any]:
    """Turn the ``filter`` query parameter into ``find`` keyword arguments."""
    spec = _load_json(raw, "filter")
    where = spec.get("where") or {}
    if not isinstance(where, dict):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "filter.where must be a JSON object")
    skip = _non_negative(spec.get("skip", spec.get("offset")), "skip") or 0
    return {"where": where, "limit": _non_negative(spec.get("limit"), "limit"), "skip": skip}


# ---------------------------------------------------------------------------
# Built-in persisted-model endpoints
# ---------------------------------------------------------------------------


def _not_found(definition: ModelDefinition, record_id: int) -> HTTPException:
    return HTTPException(status.HTTP_404_NOT_FOUND, f'Unknown "{definition.name}" id "{record_id}".')


def _create(definition: ModelDefinition) -> Callable[..., Any]:
    record_model = definition.record_model

    async def create(data: record_model = Body(...)):  # type: ignore[valid-type]
        return definition.datasource.create(definition.name, data.model_dump(exclude={"id"}))

    return create


def _find(definition: ModelDefinition) -> Callable[..., Any]:
    async def find(filter_: Optional[str] = Query(None, alias="filter", description=FILTER_DESCRIPTION)):
        return definition.datasource.find(definition.name, **parse_filter(filter_))

    return find


def _find_one(definition: ModelDefinition) -> Callable[..., Any]:
    async def find_one(filter_: Optional[str] = Query(None, alias="filter", description=FILTER_DESCRIPTION)):
        criteria = parse_filter(filter_)
        criteria["limit"] = 1
        rows = definition.datasource.find(definition.name, **criteria)
        if not rows:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f'No "{definition.name}" instance matches the filter.')
        return rows[0]

    return find_one


def _count(definition: ModelDefinition) -> Callable[..., Any]:
    async def count(where: Optional[str] = Query(None, description=WHERE_DESCRIPTION)):
        return {"count": definition.datasource.count(definition.name, _load_json(where, "where"))}

    return count


def _find_by_id(definition: ModelDefinition) -> Callable[..., Any]:
    async def find_by_id(id: int):  # noqa: A002
        row = definition.datasource.find_by_id(definition.name, id)
        if row is None:
            raise _not_found(definition, id)
        return row

    return find_by_id


def _exists(definition: ModelDefinition) -> Callable[..., Any]:
    async def exists(id: int):  # noqa: A002
        return {"exists": definition.datasource.find_by_id(definition.name, id) is not None}

    return exists


def _replace_by_id(definition: ModelDefinition) -> Callable[..., Any]:
    record_model = definition.record_model

    async def replace_by_id(id: int, data: record_model = Body(...)):  # type: ignore[valid-type]  # noqa: A002
        row = definition.datasource.replace(definition.name, id, data.model_dump(exclude={"id"}))
        if row is None:
            raise _not_found(definition, id)
        return row

    return replace_by_id


def _delete_by_id(definition: ModelDefinition) -> Callable[..., Any]:
    async def delete_by_id(id: int):  # noqa: A002
        return {"count": int(definition.datasource.delete(definition.name, id))}

    return delete_by_id


_FACTORIES: Dict[str, Callable[[ModelDefinition], Callable[..., Any]]] = {
    "create": _create,
    "find": _find,
    "findOne": _find_one,
    "count": _count,
    "findById": _find_by_id,
    "exists": _exists,
    "replaceById": _replace_by_id,
    "deleteById": _delete_by_id,
}


def _response_model(definition: ModelDefinition, method: RemoteMethod) -> Any:
    if method.handler is not None:
        return None
    if method.name == "find":
        return List[definition.record_model]  # type: ignore[name-defined]
    if method.name in {"count", "deleteById"}:
        return CountResponse
    if method.name == "exists":
        return ExistsResponse
    return definition.record_model


def _endpoint(definition: ModelDefinition, method: RemoteMethod) -> Callable[..., Any]:
    if method.handler is not None:
        return method.handler
    try:
        factory = _FACTORIES[method.name]
    except KeyError:
        raise LookupError(f"Remote method {definition.name}.{method.name} has no handler") from None
    return factory(definition)


# ---------------------------------------------------------------------------
# Router assembly
# ---------------------------------------------------------------------------


def build_rest_router(registry: ModelRegistry) -> APIRouter:
    """Return a fresh router exposing every enabled remote method."""
    router = APIRouter()
    for definition in registry:
        # Static paths first so ``/findOne`` never matches ``/{id}``.
        methods = sorted(definition.enabled_methods(), key=lambda method: not method.is_static)
        for method in methods:
            path = f"/{definition.plural}" + ("" if method.path == "/" else method.path)
            router.add_api_route(
                path,
                _endpoint(definition, method),
                methods=[method.verb],
                response_model=_response_model(definition, method),
                operation_id=f"{definition.name}.{method.name}",
                summary=method.description or None,
                tags=[definition.name],
                name=f"{definition.name}.{method.name}",
            )
    return router


class RestApi:
    """ASGI app serving the registry; rebuilt whenever the registry changes."""

    def __init__(self, host: FastAPI) -> None:
        self.host = host
        self._app: Optional[FastAPI] = None
        self._registry: Optional[ModelRegistry] = None
        self._version = -1

    def current_app(self) -> FastAPI:
        registry = get_registry(self.host)
        if self._app is None or registry is not self._registry or registry.version != self._version:
            self._app = self._build(registry)
            self._registry = registry
            self._version = registry.version
        return self._app

    def _build(self, registry: ModelRegistry) -> FastAPI:
        sub_app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
        install_cors(sub_app, self.host)
        sub_app.include_router(build_rest_router(registry))
        logger.debug("rest.rebuilt", extra={"models": len(registry), "registry_version": registry.version})
        return sub_app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.current_app()(scope, receive, send)


def rest(app: FastAPI, rest_api_root: Optional[str] = None) -> RestApi:
    """Mount the REST API of ``app``'s registry at its REST root.

    A root of ``/`` catches every path, so mount the explorer first.
    """
    if rest_api_root is not None:
        app.state.rest_api_root = rest_api_root
    mount_at = strip_trailing_slash(url_join("/", get_rest_api_root(app)))
    rest_api = RestApi(app)
    app.mount(mount_at, rest_api, name="rest")
    logger.info("rest.mounted", extra={"mount_path": mount_at or "/"})
    return rest_api

"""Accessors for the host application state the explorer reads.

The host keeps its configuration on ``app.state``; every accessor falls back
to the environment-driven defaults from :mod:`api_explorer.settings` so a
bare ``FastAPI()`` instance works out of the box.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI

from api_explorer.models import ModelRegistry
from api_explorer.schemas import ApiInfo
from api_explorer.settings import REMOTING_CORS, REST_API_ROOT

__all__ = [
    "configure_host",
    "get_registry",
    "get_rest_api_root",
    "get_remoting",
    "get_api_info",
]


def configure_host(
    app: FastAPI,
    *,
    rest_api_root: Optional[str] = None,
    remoting: Optional[Dict[str, Any]] = None,
    api_info: Optional[ApiInfo] = None,
    registry: Optional[ModelRegistry] = None,
) -> ModelRegistry:
    """Seed ``app.state`` with host settings and return the model registry."""
    if rest_api_root is not None:
        app.state.rest_api_root = rest_api_root
    if remoting is not None:
        app.state.remoting = remoting
    if api_info is not None:
        app.state.api_info = api_info
    if registry is not None:
        app.state.models = registry
    return get_registry(app)


def get_registry(app: FastAPI) -> ModelRegistry:
    registry = getattr(app.state, "models", None)
    if registry is None:
        registry = app.state.models = ModelRegistry()
    return registry


def get_rest_api_root(app: FastAPI) -> str:
    return getattr(app.state, "rest_api_root", None) or REST_API_ROOT


def get_remoting(app: FastAPI) -> Dict[str, Any]:
    remoting = getattr(app.state, "remoting", None)
    if remoting is None:
        return {} if REMOTING_CORS else {"cors": False}
    return remoting


def get_api_info(app: FastAPI) -> ApiInfo:
    info = getattr(app.state, "api_info", None)
    if info is None:
        return ApiInfo(title=app.title, version=app.version, description=app.description or None)
    if isinstance(info, dict):
        return ApiInfo(**info)
    return info

from __future__ import annotations

"""Pydantic models for explorer options and explorer response bodies."""

import os
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api_explorer.settings import DEFAULT_MOUNT_PATH
from api_explorer.utils.url_join import normalize_mount_path

# ---------------------------------------------------------------------------
# Host metadata
# ---------------------------------------------------------------------------


class ApiInfo(BaseModel):
    title: str = Field("API", examples=["Inventory API"])
    version: str = Field("1.0.0", examples=["1.0.0"])
    description: Optional[str] = None


# ---------------------------------------------------------------------------
# Explorer options
# ---------------------------------------------------------------------------


class ExplorerOptions(BaseModel):
    """Resolved explorer configuration.

    ``ui_dirs`` accepts a single directory or a list of directories; both are
    normalised to a list of absolute paths searched before the bundled UI.
    """

    model_config = ConfigDict(validate_assignment=True)

    mount_path: str = Field(DEFAULT_MOUNT_PATH, description="URL prefix of the explorer")
    ui_dirs: List[str] = Field(default_factory=list, description="Directories overriding bundled UI files")
    swagger_ui: bool = Field(True, description="Serve the bundled UI front-end")
    resource_path: str = Field("swagger.json", description="File name of the generated description")
    auth: Optional[Dict[str, Any]] = Field(None, description="Forwarded verbatim in config.json")
    api_info: Optional[ApiInfo] = None

    @field_validator("mount_path", mode="before")
    @classmethod
    def _normalize_mount_path(cls, value: Optional[str]) -> str:
        return normalize_mount_path(value)

    @field_validator("ui_dirs", mode="before")
    @classmethod
    def _coerce_ui_dirs(cls, value: Union[str, List[str], None]) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (str, os.PathLike)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise TypeError("ui_dirs must be a string or a list of strings")
        return [os.path.abspath(os.fspath(item)) for item in value]

    @field_validator("resource_path")
    @classmethod
    def _strip_resource_slashes(cls, value: str) -> str:
        value = value.strip("/")
        if not value:
            raise ValueError("resource_path must not be empty")
        return value


class ExplorerConfig(BaseModel):
    """Body of ``config.json`` as consumed by the bundled front-end."""

    url: str = Field(..., examples=["/explorer/swagger.json"])
    auth: Optional[Dict[str, Any]] = None


__all__ = [
    "ApiInfo",
    "ExplorerOptions",
    "ExplorerConfig",
]


# ---------------------------------------------------------------------------
# REST helper responses (count / exists / delete)
# ---------------------------------------------------------------------------


class CountResponse(BaseModel):
    count: int = Field(..., examples=[3])


class ExistsResponse(BaseModel):
    exists: bool


__all__ += ["CountResponse", "ExistsResponse"]

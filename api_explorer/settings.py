from __future__ import annotations

"""Application-level configuration helpers (env → constants).

Only generic utilities that may be imported *anywhere* in the code-base
should live in this module. Values are read once at import time; tests and
embedding applications pass explicit options instead of mutating these.
"""

# Standard library
import os

from api_explorer.utils.utils import get_env_bool

__all__ = [
    "APP_ENV",
    "EXPLORER_MOUNT_PATH",
    "EXPLORER_UI_DIRS",
    "EXPLORER_SWAGGER_UI",
    "REST_API_ROOT",
    "REMOTING_CORS",
    "LOG_LEVEL",
]

DEFAULT_MOUNT_PATH = "/explorer"
DEFAULT_REST_API_ROOT = "/api"


def _collect_ui_dirs() -> list[str]:
    """Split ``EXPLORER_UI_DIRS`` on the platform path separator.

    Empty segments are dropped so a trailing separator is harmless.
    """
    raw = os.getenv("EXPLORER_UI_DIRS", "")
    return [part for part in raw.split(os.pathsep) if part.strip()]


APP_ENV: str = os.getenv("APP_ENV", "development")
EXPLORER_MOUNT_PATH: str = os.getenv("EXPLORER_MOUNT_PATH", DEFAULT_MOUNT_PATH)
EXPLORER_UI_DIRS: list[str] = _collect_ui_dirs()
EXPLORER_SWAGGER_UI: bool = get_env_bool("EXPLORER_SWAGGER_UI", True)
REST_API_ROOT: str = os.getenv("REST_API_ROOT", DEFAULT_REST_API_ROOT)
REMOTING_CORS: bool = get_env_bool("REMOTING_CORS", True)
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

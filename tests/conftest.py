from __future__ import annotations

"""Pytest fixtures for explorer integration tests.

Every test builds its own host FastAPI app so registry mutations never leak
between tests; requests go through Starlette's ``TestClient`` end-to-end.
"""

import os
import sys
from pathlib import Path
from typing import Optional

import pytest
from fastapi import FastAPI
from pydantic import BaseModel
from starlette.testclient import TestClient

# ---------------------------------------------------------------------------
# Runtime env for the application
# ---------------------------------------------------------------------------

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Ensure project root on PYTHONPATH so `import api_explorer` works when pytest is run
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api_explorer import configure_host, explorer, rest  # noqa: E402, WPS433

FIXTURES = Path(__file__).resolve().parent / "fixtures"
DUMMY_UI = FIXTURES / "dummy-swagger-ui"


class Product(BaseModel):
    name: str
    price: float = 0


class Customer(BaseModel):
    email: str


class Tag(BaseModel):
    label: str


class Post(BaseModel):
    title: str
    tag: Optional[Tag] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_host(rest_api_root: str = "/api", cors: bool = False) -> FastAPI:
    """Bare host app; CORS off unless a test is about CORS."""
    app = FastAPI()
    configure_host(app, rest_api_root=rest_api_root, remoting={} if cors else {"cors": False})
    return app


def configure_rest_api_and_explorer(app: FastAPI, mount_path: Optional[str] = None, **options) -> FastAPI:
    """Register ``product``, mount the explorer, then the REST API."""
    configure_host(app).register(Product, name="product")
    explorer(app, mount_path=mount_path, **options)
    rest(app)
    return app


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def host() -> FastAPI:
    return make_host()


@pytest.fixture()
def api_client(host) -> TestClient:  # noqa: D401 – default explorer at /explorer
    configure_rest_api_and_explorer(host)
    return TestClient(host)

"""Top-level package for the API explorer add-on for FastAPI applications."""

__all__ = [
    "explorer",
    "explorer_routes",
    "rest",
    "ExplorerOptions",
    "ApiInfo",
    "ModelRegistry",
    "configure_host",
]

from dotenv import load_dotenv

load_dotenv()

from api_explorer.explorer import explorer, explorer_routes  # noqa: E402
from api_explorer.models import ModelRegistry  # noqa: E402
from api_explorer.routers.rest_routes import rest  # noqa: E402
from api_explorer.schemas import ApiInfo, ExplorerOptions  # noqa: E402
from api_explorer.utils.host import configure_host  # noqa: E402

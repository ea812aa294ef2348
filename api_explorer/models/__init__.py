from __future__ import annotations

"""Host-side model namespace: the registry the explorer documents.

Call-sites can simply::

    from api_explorer.models import ModelRegistry, MemoryDataSource
"""

from api_explorer.models.memory import MemoryDataSource
from api_explorer.models.registry import DEFAULT_METHODS, ModelDefinition, ModelRegistry, RemoteMethod

__all__ = [
    "MemoryDataSource",
    "ModelRegistry",
    "ModelDefinition",
    "RemoteMethod",
    "DEFAULT_METHODS",
]

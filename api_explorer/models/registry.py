"""Model registry – the remoted models a host application exposes over REST.

The explorer never owns this state; it reads the registry stored on
``app.state.models`` every time it generates a description so models added
or methods disabled at runtime show up immediately.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from types import UnionType
from typing import Annotated, Any, Callable, Dict, Iterator, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel, create_model

from api_explorer.models.memory import MemoryDataSource
from api_explorer.utils.logger import logger
from api_explorer.utils.utils import pluralize

__all__ = ["RemoteMethod", "ModelDefinition", "ModelRegistry", "DEFAULT_METHODS"]


@dataclass
class RemoteMethod:
    """One HTTP-exposed operation of a model.

    ``handler`` is ``None`` for the built-in persisted-model methods; the REST
    router supplies their endpoints. Custom methods carry their own
    FastAPI-compatible endpoint callable.
    """

    name: str
    verb: str
    path: str
    description: str = ""
    handler: Optional[Callable[..., Any]] = None
    enabled: bool = True

    @property
    def is_static(self) -> bool:
        return "{id}" not in self.path


# Declaration order; the REST router puts static paths ahead of ``/{id}``.
DEFAULT_METHODS: tuple[tuple[str, str, str, str], ...] = (
    ("create", "POST", "/", "Create a new instance of the model and persist it."),
    ("find", "GET", "/", "Find all instances of the model matched by filter."),
    ("findOne", "GET", "/findOne", "Find the first instance of the model matched by filter."),
    ("count", "GET", "/count", "Count instances of the model matched by where."),
    ("findById", "GET", "/{id}", "Find a model instance by id."),
    ("exists", "GET", "/{id}/exists", "Check whether a model instance exists."),
    ("replaceById", "PUT", "/{id}", "Replace attributes for a model instance."),
    ("deleteById", "DELETE", "/{id}", "Delete a model instance by id."),
)


@dataclass
class ModelDefinition:
    name: str
    plural: str
    schema: Type[BaseModel]
    datasource: MemoryDataSource
    record_model: Optional[Type[BaseModel]] = None
    methods: Dict[str, RemoteMethod] = field(default_factory=dict)
    _on_change: Optional[Callable[[], None]] = field(default=None, repr=False)

    def enabled_methods(self) -> List[RemoteMethod]:
        return [method for method in self.methods.values() if method.enabled]

    def disable_remote_method_by_name(self, name: str) -> None:
        """Hide ``name`` from REST routing and from the generated description."""
        if name not in self.methods:
            raise KeyError(f"Model {self.name!r} has no remote method {name!r}")
        self.methods[name].enabled = False
        logger.info("registry.method_disabled", extra={"model": self.name, "method": name})
        self._changed()

    def remote_method(
        self,
        name: str,
        handler: Callable[..., Any],
        *,
        verb: str = "GET",
        path: Optional[str] = None,
        description: str = "",
    ) -> RemoteMethod:
        """Expose a custom endpoint under ``/<plural><path>``."""
        method = RemoteMethod(
            name=name,
            verb=verb.upper(),
            path=path or f"/{name}",
            description=description,
            handler=handler,
        )
        self.methods[name] = method
        logger.info("registry.method_added", extra={"model": self.name, "method": name})
        self._changed()
        return method

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is UnionType


def _check_id_field(name: str, schema: Type[BaseModel]) -> None:
    """Reject an ``id`` field the store cannot fill (ids are integers)."""
    field_info = schema.model_fields.get("id")
    if field_info is None:
        return
    annotation = field_info.annotation
    if _is_union(get_origin(annotation)):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
    else:
        args = [annotation]
    if args != [int]:
        raise ValueError(f"Model {name!r} declares a non-integer 'id' field ({annotation!r}); ids are integers")


def _substitute(annotation: Any, resolve: Callable[[Type[BaseModel]], Any]) -> Any:
    """Swap registered schema classes nested in ``annotation`` for their record models."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return resolve(annotation)
    origin, args = get_origin(annotation), get_args(annotation)
    if origin is None or not args:
        return annotation
    new_args = tuple(_substitute(arg, resolve) for arg in args)
    if new_args == args:
        return annotation
    if _is_union(origin):
        return Union[new_args]
    if origin is Annotated:
        return Annotated[new_args]
    return origin[new_args]


def _build_record_models(definitions: List[ModelDefinition]) -> Dict[str, Type[BaseModel]]:
    """Derive one record model per definition, named after the model.

    Each record model carries an optional integer ``id`` and references the
    record models of any registered schemas it nests, so exactly one class per
    model name reaches the OpenAPI generator. Cyclic references keep the
    original schema class.
    """
    by_schema = {definition.schema: definition for definition in definitions}
    built: Dict[str, Type[BaseModel]] = {}
    building: set = set()

    def resolve(schema: Type[BaseModel]) -> Any:
        definition = by_schema.get(schema)
        if definition is None or definition.name in building:
            return schema
        return record_for(definition)

    def record_for(definition: ModelDefinition) -> Type[BaseModel]:
        if definition.name in built:
            return built[definition.name]
        building.add(definition.name)
        fields: Dict[str, Any] = {"id": (Optional[int], None)}
        for field_name, field_info in definition.schema.model_fields.items():
            if field_name == "id":
                continue
            annotation = _substitute(field_info.annotation, resolve)
            if annotation is not field_info.annotation:
                fields[field_name] = (annotation, deepcopy(field_info))
        building.discard(definition.name)
        built[definition.name] = create_model(definition.name, __base__=definition.schema, **fields)
        return built[definition.name]

    for definition in definitions:
        record_for(definition)
    return built


class ModelRegistry:
    """Ordered collection of remoted models.

    ``version`` increases on every change so consumers can cheaply detect
    when cached routing needs rebuilding.
    """

    def __init__(self, datasource: Optional[MemoryDataSource] = None) -> None:
        self._models: Dict[str, ModelDefinition] = {}
        self.datasource = datasource or MemoryDataSource()
        self.version = 0

    def register(
        self,
        schema: Type[BaseModel],
        name: Optional[str] = None,
        plural: Optional[str] = None,
        datasource: Optional[MemoryDataSource] = None,
    ) -> ModelDefinition:
        model_name = name or schema.__name__
        _check_id_field(model_name, schema)
        definition = ModelDefinition(
            name=model_name,
            plural=plural or pluralize(model_name),
            schema=schema,
            datasource=datasource or self.datasource,
            methods={
                method_name: RemoteMethod(name=method_name, verb=verb, path=path, description=doc)
                for method_name, verb, path, doc in DEFAULT_METHODS
            },
            _on_change=self._bump,
        )
        self._models[model_name] = definition
        self._relink()
        logger.info("registry.model_remoted", extra={"model": model_name, "plural": definition.plural})
        self._bump()
        return definition

    def unregister(self, name: str) -> None:
        del self._models[name]
        self._relink()
        self._bump()

    def get(self, name: str) -> ModelDefinition:
        return self._models[name]

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[ModelDefinition]:
        return iter(list(self._models.values()))

    def __len__(self) -> int:
        return len(self._models)

    def _relink(self) -> None:
        """Rebuild every record model so nested references follow the current set."""
        records = _build_record_models(list(self._models.values()))
        for definition in self._models.values():
            definition.record_model = records[definition.name]

    def _bump(self) -> None:
        self.version += 1

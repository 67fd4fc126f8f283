"""Data model for parsed API descriptions and translated routes.

The loader converts its input into SchemaDocument; the translator turns each
operation of it into a RouteDescriptor for the script templates.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PrimitiveNode(BaseModel):
    """A built-in schema type such as string, long or DateTime."""

    kind: Literal["primitive"] = "primitive"
    name: str


class NamedModelNode(BaseModel):
    """A reference to a model definition, resolved by name only."""

    kind: Literal["model"] = "model"
    name: str


class ArrayNode(BaseModel):
    kind: Literal["array"] = "array"
    items: "PropertyNode"


class MapNode(BaseModel):
    """A string-keyed map (`additionalProperties`)."""

    kind: Literal["map"] = "map"
    value_type: "PropertyNode"


PropertyNode = Annotated[
    Union[PrimitiveNode, NamedModelNode, ArrayNode, MapNode],
    Field(discriminator="kind"),
]

ArrayNode.model_rebuild()
MapNode.model_rebuild()


class Param(BaseModel):
    """A single operation parameter."""

    name: str
    location: str  # path / query / header / cookie / body / formData
    required: bool = False
    schema_node: PropertyNode
    description: str = ""


class ResponseSpec(BaseModel):
    status: str
    description: str = ""
    schema_node: PropertyNode | None = None


class OperationSpec(BaseModel):
    """One HTTP operation on a path."""

    method: str  # GET / POST / PUT / DELETE / PATCH / HEAD / OPTIONS
    operation_id: str | None = None
    summary: str = ""
    description: str = ""
    tags: list[str] = []
    parameters: list[Param] = []
    responses: list[ResponseSpec] = []


class PathItem(BaseModel):
    path: str  # /users/{id}/orders/{orderId}
    operations: dict[str, OperationSpec] = {}


class ModelDefinition(BaseModel):
    name: str
    description: str = ""
    properties: dict[str, PropertyNode] = {}
    required: list[str] = []


class SchemaDocument(BaseModel):
    """The whole API description."""

    title: str = ""
    version: str = "1.0.0"
    base_path: str = ""
    upstream_url: str = ""  # absolute URL of the upstream service, when the document names one
    paths: dict[str, PathItem] = {}
    models: dict[str, ModelDefinition] = {}

    def iter_operations(self):
        """Yield (path, method, operation) for every operation in the document."""
        for path, item in self.paths.items():
            for method, operation in item.operations.items():
                yield path, method, operation


class RouteParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    param_name: str  # shell-safe identifier
    location: str
    required: bool
    data_type: str
    description: str = ""


class RouteDescriptor(BaseModel):
    """Everything the script template needs to register one route."""

    model_config = ConfigDict(frozen=True)

    path: str
    route_path: str  # path with $(uri_captures.{name}) references
    route_regex: str
    x_path: str  # path with ${name} bash interpolations
    method: str
    nickname: str
    summary: str = ""
    notes: str = ""
    tags: tuple[str, ...] = ()
    params: tuple[RouteParam, ...] = ()
    body_type: str | None = None
    return_type: str | None = None

    @property
    def path_params(self) -> tuple[RouteParam, ...]:
        return tuple(p for p in self.params if p.location == "path")

    @property
    def query_params(self) -> tuple[RouteParam, ...]:
        return tuple(p for p in self.params if p.location == "query")

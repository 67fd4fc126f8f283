import pytest
from pydantic import TypeAdapter, ValidationError

from kong_codegen.parser.base import (
    ArrayNode,
    MapNode,
    NamedModelNode,
    OperationSpec,
    Param,
    PathItem,
    PrimitiveNode,
    PropertyNode,
    RouteDescriptor,
    RouteParam,
    SchemaDocument,
)


class TestPropertyNode:
    def test_discriminated_by_kind(self):
        node = TypeAdapter(PropertyNode).validate_python(
            {"kind": "array", "items": {"kind": "map", "value_type": {"kind": "primitive", "name": "string"}}}
        )
        assert isinstance(node, ArrayNode)
        assert isinstance(node.items, MapNode)
        assert node.items.value_type == PrimitiveNode(name="string")

    def test_array_requires_items(self):
        with pytest.raises(ValidationError):
            ArrayNode()

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(PropertyNode).validate_python({"kind": "tuple", "name": "x"})


class TestParam:
    def test_defaults(self):
        p = Param(name="id", location="path", schema_node=PrimitiveNode(name="long"))
        assert p.required is False
        assert p.description == ""


class TestSchemaDocument:
    def test_iter_operations(self):
        doc = SchemaDocument(
            paths={
                "/pets": PathItem(
                    path="/pets",
                    operations={
                        "GET": OperationSpec(method="GET"),
                        "POST": OperationSpec(method="POST"),
                    },
                ),
                "/pets/{id}": PathItem(path="/pets/{id}", operations={"GET": OperationSpec(method="GET")}),
            }
        )
        ops = [(path, method) for path, method, _ in doc.iter_operations()]
        assert ops == [("/pets", "GET"), ("/pets", "POST"), ("/pets/{id}", "GET")]

    def test_named_model_node_keeps_name(self):
        node = NamedModelNode(name="Pet")
        assert node.kind == "model"


class TestRouteDescriptor:
    def _route(self) -> RouteDescriptor:
        return RouteDescriptor(
            path="/pets/{id}",
            route_path="/pets/$(uri_captures.{id})",
            route_regex="~/pets/(?<id>[^/]+)$",
            x_path="/pets/${id}",
            method="GET",
            nickname="getPet",
            params=(
                RouteParam(name="id", param_name="id", location="path", required=True, data_type="Long"),
                RouteParam(name="fields", param_name="fields", location="query", required=False, data_type="String"),
            ),
        )

    def test_is_frozen(self):
        route = self._route()
        with pytest.raises(ValidationError):
            route.route_path = "/other"

    def test_param_views(self):
        route = self._route()
        assert [p.name for p in route.path_params] == ["id"]
        assert [p.name for p in route.query_params] == ["fields"]

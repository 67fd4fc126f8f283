import pytest

from kong_codegen.errors import UnresolvedTypeError
from kong_codegen.generator.types import TypeMapping, TypeResolver
from kong_codegen.parser.base import ArrayNode, MapNode, ModelDefinition, NamedModelNode, PrimitiveNode


class TestTypeMapping:
    def test_base_type_names(self):
        mapping = TypeMapping()
        assert mapping.base_type_name("array") == "List"
        assert mapping.base_type_name("map") == "Map"
        assert mapping.base_type_name("long") == "Long"
        assert mapping.base_type_name("DateTime") == "Date"

    def test_unmapped_type_is_capitalised(self):
        assert TypeMapping().base_type_name("money") == "Money"

    def test_prefix_suffix(self):
        mapping = TypeMapping(model_name_prefix="api", model_name_suffix="Dto")
        assert mapping.to_model_name("Pet") == "ApiPetDto"

    def test_override(self):
        assert TypeMapping({"array": "Array"}).base_type_name("array") == "Array"


class TestTypeResolver:
    def test_primitive(self):
        assert TypeResolver().resolve(PrimitiveNode(name="string")) == "String"

    def test_named_model(self):
        assert TypeResolver().resolve(NamedModelNode(name="pet")) == "Pet"

    def test_array_of_map(self):
        node = ArrayNode(items=MapNode(value_type=PrimitiveNode(name="string")))
        assert TypeResolver().resolve(node) == "List[Map[String, String]]"

    def test_deep_nesting(self):
        node = MapNode(value_type=ArrayNode(items=MapNode(value_type=ArrayNode(items=NamedModelNode(name="Order")))))
        assert TypeResolver().resolve(node) == "Map[String, List[Map[String, List[Order]]]]"

    def test_known_model(self):
        models = {"Order": ModelDefinition(name="Order")}
        assert TypeResolver().resolve(ArrayNode(items=NamedModelNode(name="Order")), models) == "List[Order]"

    def test_unknown_model(self):
        with pytest.raises(UnresolvedTypeError, match="Missing"):
            TypeResolver().resolve(ArrayNode(items=NamedModelNode(name="Missing")), {})

    def test_unknown_node(self):
        with pytest.raises(UnresolvedTypeError, match="unknown schema node"):
            TypeResolver().resolve({"kind": "array"})

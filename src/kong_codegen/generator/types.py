"""Type declarations for schema nodes.

Arrays and maps are written with their element types in brackets, e.g.
``List[Map[String, Pet]]``.
"""

from kong_codegen.errors import UnresolvedTypeError
from kong_codegen.parser.base import (
    ArrayNode,
    MapNode,
    ModelDefinition,
    NamedModelNode,
    PrimitiveNode,
)

DEFAULT_TYPE_MAPPING = {
    "array": "List",
    "map": "Map",
    "List": "List",
    "boolean": "Boolean",
    "string": "String",
    "int": "Integer",
    "float": "Float",
    "number": "BigDecimal",
    "date": "Date",
    "DateTime": "Date",
    "long": "Long",
    "short": "Short",
    "char": "String",
    "double": "Double",
    "object": "Object",
    "integer": "Integer",
    "ByteArray": "byte[]",
    "binary": "File",
    "file": "File",
    "UUID": "UUID",
    "BigDecimal": "BigDecimal",
}


class TypeMapping:
    """Naming convention for schema types and model names."""

    def __init__(
        self,
        type_mapping: dict[str, str] | None = None,
        model_name_prefix: str = "",
        model_name_suffix: str = "",
    ):
        self.type_mapping = dict(DEFAULT_TYPE_MAPPING)
        if type_mapping:
            self.type_mapping.update(type_mapping)
        self.model_name_prefix = model_name_prefix
        self.model_name_suffix = model_name_suffix

    def to_model_name(self, name: str) -> str:
        name = f"{self.model_name_prefix}{name}{self.model_name_suffix}"
        return name[:1].upper() + name[1:]

    def base_type_name(self, kind: str) -> str:
        return self.to_model_name(self.type_mapping.get(kind, kind))


class TypeResolver:
    """Resolves PropertyNodes into textual type declarations."""

    def __init__(self, type_mapping: TypeMapping | None = None):
        self.type_mapping = type_mapping or TypeMapping()

    def resolve(self, node, models: dict[str, ModelDefinition] | None = None) -> str:
        """Return the type declaration for `node`.

        When `models` is given, named model references must exist in it.
        """
        if isinstance(node, PrimitiveNode):
            return self.type_mapping.base_type_name(node.name)
        if isinstance(node, NamedModelNode):
            if models is not None and node.name not in models:
                raise UnresolvedTypeError(node, f"no model named {node.name!r}")
            return self.type_mapping.to_model_name(node.name)
        if isinstance(node, ArrayNode):
            inner = self.resolve(node.items, models)
            return f"{self.type_mapping.base_type_name('array')}[{inner}]"
        if isinstance(node, MapNode):
            inner = self.resolve(node.value_type, models)
            return f"{self.type_mapping.base_type_name('map')}[String, {inner}]"
        raise UnresolvedTypeError(node, "unknown schema node kind")

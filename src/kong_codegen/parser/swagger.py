"""OpenAPI / Swagger document loader.

Parses OpenAPI 3.x and Swagger 2.0 documents into a SchemaDocument.
"""

from pathlib import Path

import yaml

from kong_codegen.errors import SchemaLoadError, UnresolvedTypeError
from kong_codegen.log import get_logger

from .base import (
    ArrayNode,
    MapNode,
    ModelDefinition,
    NamedModelNode,
    OperationSpec,
    Param,
    PathItem,
    PrimitiveNode,
    ResponseSpec,
    SchemaDocument,
)
from .detect import detect_format

logger = get_logger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")

# (type, format) -> schema type name, as the original generator names them
FORMAT_TYPES = {
    ("integer", "int64"): "long",
    ("number", "float"): "float",
    ("number", "double"): "double",
    ("string", "date"): "date",
    ("string", "date-time"): "DateTime",
    ("string", "uuid"): "UUID",
    ("string", "byte"): "ByteArray",
    ("string", "binary"): "binary",
}

KNOWN_TYPES = {"string", "integer", "number", "boolean", "object", "file"}


def parse_openapi(file_path: Path) -> SchemaDocument:
    """Parse an OpenAPI/Swagger file (YAML or JSON) into a SchemaDocument."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read {file_path}: {e}") from e
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"{file_path} is not valid YAML/JSON: {e}") from e
    return load_document(doc)


def load_document(doc: dict) -> SchemaDocument:
    """Build a SchemaDocument from an already-loaded mapping."""
    fmt = detect_format(doc)
    info = doc.get("info") or {}

    if fmt == "swagger2":
        raw_models = doc.get("definitions") or {}
        base_path = (doc.get("basePath") or "").rstrip("/")
        upstream_url = _swagger2_upstream_url(doc, base_path)
    else:
        raw_models = (doc.get("components") or {}).get("schemas") or {}
        upstream_url, base_path = _server_url(doc.get("servers") or [])

    models = {name: _parse_model(name, schema) for name, schema in raw_models.items()}

    paths = {}
    for path, path_obj in (doc.get("paths") or {}).items():
        if not path:
            raise SchemaLoadError("Empty path key in 'paths'")
        paths[path] = _parse_path_item(doc, path, resolve_ref(doc, path_obj) or {}, fmt)

    document = SchemaDocument(
        title=info.get("title", ""),
        version=str(info.get("version", "1.0.0")),
        base_path=base_path,
        upstream_url=upstream_url,
        paths=paths,
        models=models,
    )
    logger.debug(
        "Loaded %s document: %d paths, %d models", fmt, len(document.paths), len(document.models)
    )
    return document


def resolve_ref(doc: dict, obj):
    """Follow local `$ref` pointers (#/components/..., #/parameters/...) until a plain object."""
    seen = set()
    while isinstance(obj, dict) and "$ref" in obj:
        ref = obj["$ref"]
        if ref in seen:
            raise SchemaLoadError(f"Circular reference: {ref}")
        seen.add(ref)
        if not isinstance(ref, str) or not ref.startswith("#/"):
            raise SchemaLoadError(f"Only local references are supported: {ref}")

        target = doc
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, dict) or part not in target:
                raise SchemaLoadError(f"Unresolvable reference: {ref}")
            target = target[part]
        obj = target
    return obj


def schema_to_node(schema: dict | None):
    """Convert a JSON-schema fragment into a PropertyNode.

    Schema references stay named model references; they are not inlined.
    """
    if not schema:
        return PrimitiveNode(name="object")

    if "$ref" in schema:
        return NamedModelNode(name=schema["$ref"].rsplit("/", 1)[-1])

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 style ["string", "null"]
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if non_null else "object"

    if schema_type == "array":
        if "items" not in schema or not schema["items"]:
            raise UnresolvedTypeError(schema, "array schema without 'items'")
        return ArrayNode(items=schema_to_node(schema["items"]))

    additional = schema.get("additionalProperties")
    if schema_type in (None, "object") and additional not in (None, False):
        if additional is True:
            return MapNode(value_type=PrimitiveNode(name="object"))
        return MapNode(value_type=schema_to_node(additional))

    if schema_type is None:
        return PrimitiveNode(name="object")
    if schema_type not in KNOWN_TYPES:
        raise UnresolvedTypeError(schema, f"unknown schema type {schema_type!r}")

    return PrimitiveNode(name=FORMAT_TYPES.get((schema_type, schema.get("format")), schema_type))


def _parse_model(name: str, schema: dict) -> ModelDefinition:
    schema = schema or {}
    return ModelDefinition(
        name=name,
        description=schema.get("description", ""),
        properties={
            prop: schema_to_node(prop_schema)
            for prop, prop_schema in (schema.get("properties") or {}).items()
        },
        required=schema.get("required", []),
    )


def _parse_path_item(doc: dict, path: str, path_obj: dict, fmt: str) -> PathItem:
    shared_params = [resolve_ref(doc, p) for p in path_obj.get("parameters", [])]
    operations = {}
    for method, operation in path_obj.items():
        if method.lower() not in HTTP_METHODS:
            continue
        operation = operation or {}
        own_params = [resolve_ref(doc, p) for p in operation.get("parameters", [])]
        parsed = [_parse_parameter(p, fmt) for p in _merge_parameters(shared_params, own_params)]
        if fmt == "openapi3" and operation.get("requestBody"):
            parsed.append(_parse_request_body(resolve_ref(doc, operation["requestBody"])))

        operations[method.upper()] = OperationSpec(
            method=method.upper(),
            operation_id=operation.get("operationId"),
            summary=operation.get("summary", ""),
            description=operation.get("description", ""),
            tags=operation.get("tags", []),
            parameters=parsed,
            responses=_parse_responses(doc, operation.get("responses", {}), fmt),
        )
    return PathItem(path=path, operations=operations)


def _merge_parameters(shared: list[dict], own: list[dict]) -> list[dict]:
    """Operation-level parameters override path-level ones with the same name and location."""
    merged = {(p.get("name"), p.get("in")): p for p in shared}
    for p in own:
        merged[(p.get("name"), p.get("in"))] = p
    return list(merged.values())


def _parse_parameter(p: dict, fmt: str) -> Param:
    if "name" not in p:
        raise SchemaLoadError(f"Parameter without a name: {p!r}")
    location = p.get("in", "query")
    if fmt == "swagger2" and location != "body":
        # Swagger 2 puts the type on the parameter itself
        schema = {k: v for k, v in p.items() if k in ("type", "format", "items", "$ref")}
    else:
        schema = p.get("schema", {})

    return Param(
        name=p["name"],
        location=location,
        required=p.get("required", location == "path"),
        schema_node=schema_to_node(schema),
        description=p.get("description", ""),
    )


def _parse_request_body(body: dict) -> Param:
    content = body.get("content", {})
    schema = None
    for content_type in ("application/json", "multipart/form-data"):
        if content_type in content:
            schema = content[content_type].get("schema")
            break
    else:
        for ct_data in content.values():
            schema = ct_data.get("schema")
            break
    return Param(
        name="body",
        location="body",
        required=body.get("required", False),
        schema_node=schema_to_node(schema),
        description=body.get("description", ""),
    )


def _parse_responses(doc: dict, responses: dict, fmt: str) -> list[ResponseSpec]:
    result = []
    for status_code, resp in responses.items():
        resp = resolve_ref(doc, resp) or {}
        if fmt == "swagger2":
            schema = resp.get("schema")
        else:
            schema = None
            for ct_data in (resp.get("content") or {}).values():
                schema = ct_data.get("schema")
                break
        result.append(
            ResponseSpec(
                status=str(status_code),
                description=resp.get("description", ""),
                schema_node=schema_to_node(schema) if schema else None,
            )
        )
    return result


def _server_url(servers: list[dict]) -> tuple[str, str]:
    """Return (absolute upstream URL or "", base path) of the first server."""
    if not servers:
        return "", ""
    url = (servers[0].get("url") or "").rstrip("/")
    if "://" not in url:
        return "", url
    host_and_path = url.split("://", 1)[1]
    base_path = host_and_path[host_and_path.find("/"):] if "/" in host_and_path else ""
    return url, base_path


def _swagger2_upstream_url(doc: dict, base_path: str) -> str:
    host = doc.get("host")
    if not host:
        return ""
    schemes = doc.get("schemes") or ["http"]
    scheme = "https" if "https" in schemes else schemes[0]
    return f"{scheme}://{host}{base_path}"

"""Detect which OpenAPI flavour a loaded document uses."""

from kong_codegen.errors import SchemaLoadError


def detect_format(doc) -> str:
    """Return 'swagger2' or 'openapi3' for a loaded document.

    Raises SchemaLoadError when the document is neither.
    """
    if not isinstance(doc, dict):
        raise SchemaLoadError(f"Expected a mapping at the document root, got {type(doc).__name__}")

    if str(doc.get("swagger", "")).startswith("2"):
        return "swagger2"
    if str(doc.get("openapi", "")).startswith("3"):
        return "openapi3"

    if "swagger" in doc or "openapi" in doc:
        version = doc.get("swagger", doc.get("openapi"))
        raise SchemaLoadError(f"Unsupported OpenAPI version: {version}")
    raise SchemaLoadError("Document has neither a 'swagger' nor an 'openapi' version field")

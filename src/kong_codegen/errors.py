"""Errors raised while loading a schema or translating it into Kong routes.

Every error is structural: it points at a malformed part of the input
document. Nothing here is retryable.
"""


class KongCodegenError(Exception):
    """Base class for all kong-codegen errors."""


class SchemaLoadError(KongCodegenError):
    """The input document could not be read as an OpenAPI/Swagger schema."""


class MalformedPathError(KongCodegenError):
    """A path template has unbalanced or empty `{...}` placeholders."""

    def __init__(self, path: str, position: int, reason: str):
        self.path = path
        self.position = position
        self.reason = reason
        super().__init__(f"Malformed path {path!r} at position {position}: {reason}")


class UnresolvedTypeError(KongCodegenError):
    """A schema node cannot be turned into a type declaration."""

    def __init__(self, node, reason: str):
        self.node = node
        self.reason = reason
        super().__init__(f"Cannot resolve type of {node!r}: {reason}")


class OperationTranslationError(KongCodegenError):
    """Translating a single (path, method) operation failed."""

    def __init__(self, path: str, method: str, cause: Exception):
        self.path = path
        self.method = method
        self.cause = cause
        super().__init__(f"{method} {path}: {cause}")

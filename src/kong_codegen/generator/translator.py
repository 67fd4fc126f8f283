"""Translation of API operations into Kong route descriptors.

``annotate_paths`` runs once over the whole document and builds the side
table of bash-interpolated paths; ``OperationTranslator.translate`` then turns
each (path, method, operation) into a RouteDescriptor.
"""

import re

from kong_codegen.errors import KongCodegenError, OperationTranslationError
from kong_codegen.generator.escaper import IdentifierEscaper
from kong_codegen.generator.paths import (
    check_shell_safe,
    dollar_escape_path,
    rewrite_path_params,
    route_regex,
)
from kong_codegen.generator.types import TypeResolver
from kong_codegen.log import get_logger
from kong_codegen.parser.base import (
    ModelDefinition,
    OperationSpec,
    RouteDescriptor,
    RouteParam,
    SchemaDocument,
)

logger = get_logger(__name__)

PathAnnotations = dict[tuple[str, str], str]


def annotate_paths(document: SchemaDocument) -> PathAnnotations:
    """Map every (path, METHOD) of the document to its `${`-escaped path."""
    annotations: PathAnnotations = {}
    for path, method, _ in document.iter_operations():
        annotations[(path, method.upper())] = dollar_escape_path(path)
    return annotations


class OperationTranslator:
    """Builds one RouteDescriptor per operation."""

    def __init__(
        self,
        type_resolver: TypeResolver | None = None,
        escaper: IdentifierEscaper | None = None,
    ):
        self.type_resolver = type_resolver or TypeResolver()
        self.escaper = escaper or IdentifierEscaper()

    def translate(
        self,
        path: str,
        method: str,
        operation: OperationSpec,
        models: dict[str, ModelDefinition],
        annotations: PathAnnotations,
    ) -> RouteDescriptor:
        """Translate one operation.

        Raises OperationTranslationError naming the path and method when the
        path is malformed or unsafe for the shell, or a type cannot be resolved.
        """
        method = method.upper()
        if (path, method) not in annotations:
            raise OperationTranslationError(
                path, method, KongCodegenError("no path annotation, run annotate_paths first")
            )
        try:
            check_shell_safe(path)
            route_path = rewrite_path_params(path)
            return RouteDescriptor(
                path=path,
                route_path=route_path,
                route_regex=route_regex(path),
                x_path=annotations[(path, method)],
                method=method,
                nickname=self._nickname(path, method, operation),
                summary=self.escaper.escape_text(operation.summary),
                notes=self.escaper.escape_text(operation.description),
                tags=tuple(operation.tags),
                params=tuple(self._params(operation, models)),
                body_type=self._body_type(operation, models),
                return_type=self._return_type(operation, models),
            )
        except KongCodegenError as e:
            raise OperationTranslationError(path, method, e) from e

    def _nickname(self, path: str, method: str, operation: OperationSpec) -> str:
        if operation.operation_id:
            return self.escaper.to_identifier(operation.operation_id)
        # GET /users/{id}/orders -> get_users_id_orders
        words = [w for w in re.split(r"[^A-Za-z0-9]+", path) if w]
        return self.escaper.to_identifier("_".join([method.lower()] + words))

    def _params(self, operation: OperationSpec, models) -> list[RouteParam]:
        params = []
        for p in operation.parameters:
            if p.location == "body":
                continue
            params.append(
                RouteParam(
                    name=p.name,
                    param_name=self.escaper.to_identifier(p.name),
                    location=p.location,
                    required=p.required,
                    data_type=self.type_resolver.resolve(p.schema_node, models),
                    description=self.escaper.escape_text(p.description),
                )
            )
        return params

    def _body_type(self, operation: OperationSpec, models) -> str | None:
        for p in operation.parameters:
            if p.location == "body":
                return self.type_resolver.resolve(p.schema_node, models)
        return None

    def _return_type(self, operation: OperationSpec, models) -> str | None:
        for response in operation.responses:
            if response.status.startswith("2") and response.schema_node is not None:
                return self.type_resolver.resolve(response.schema_node, models)
        return None


def translate_document(
    document: SchemaDocument,
    translator: OperationTranslator | None = None,
    skip_invalid: bool = False,
) -> list[RouteDescriptor]:
    """Annotate the document once, then translate every operation in it.

    With `skip_invalid`, operations that fail to translate are logged and
    left out instead of aborting the run. Nicknames clashing with an earlier
    route get a numeric suffix, since Kong route names must be unique.
    """
    translator = translator or OperationTranslator()
    annotations = annotate_paths(document)

    routes = []
    nicknames: set[str] = set()
    for path, method, operation in document.iter_operations():
        try:
            route = translator.translate(path, method, operation, document.models, annotations)
        except OperationTranslationError as e:
            if not skip_invalid:
                raise
            logger.warning("Skipping %s", e)
            continue
        if route.nickname in nicknames:
            route = route.model_copy(update={"nickname": _unique_nickname(route.nickname, nicknames)})
        nicknames.add(route.nickname)
        logger.debug("%s %s -> %s", route.method, route.path, route.route_path)
        routes.append(route)
    return routes


def _unique_nickname(nickname: str, taken: set[str]) -> str:
    """get_a_b -> get_a_b_2, get_a_b_3, ..."""
    n = 2
    while f"{nickname}_{n}" in taken:
        n += 1
    return f"{nickname}_{n}"

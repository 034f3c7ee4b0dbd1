"""Builds OpenAPI paths from WSDL port type operations."""

import structlog

from wsdl_openapi.config import OPENAPI_VERSION, Settings
from wsdl_openapi.openapi.models import (
    Components,
    Info,
    MediaType,
    OpenApiDocument,
    OperationObject,
    Parameter,
    PathItem,
    RequestBody,
    Response,
    Schema,
)
from wsdl_openapi.openapi.synthesizer import ComponentRegistry, SchemaSynthesizer, map_simple_type
from wsdl_openapi.wsdl.base import InterfaceDescription, MessagePart, Operation, PortType, SchemaType
from wsdl_openapi.wsdl.universe import SchemaUniverse, is_simple, sequence_elements, type_key

logger = structlog.get_logger(__name__)


def sanitize(name: str | None) -> str:
    """Keep letters, digits, '-' and '_'. Blank names become 'unnamed'."""
    if not name or not name.strip():
        return "unnamed"
    return "".join(ch for ch in name if ch.isalnum() or ch in "-_")


def structural_depth(universe: SchemaUniverse, schema_type: SchemaType | None, _path: frozenset = frozenset()) -> int:
    """Nesting depth of complex types: 0 for simple or unknown types, else
    1 + the deepest sequence or extension child. A type already on the
    current path counts as 1."""
    if is_simple(schema_type):
        return 0
    key = type_key(schema_type)
    if key in _path:
        return 1
    path = _path | {key}
    return 1 + max(
        (structural_depth(universe, universe.resolve_element_type(child), path) for child in sequence_elements(schema_type)),
        default=0,
    )


def query_parameter(name: str, schema: Schema) -> Parameter:
    return Parameter(name=name, location="query", required=False, schema_=schema)


def default_request_body() -> RequestBody:
    return RequestBody.for_schema(Schema(type="object"))


def json_response(schema: Schema) -> Response:
    return Response(description="Successful response", content={"application/json": MediaType(schema_=schema)})


class OperationBuilder:
    """Turns every operation of a merged WSDL into one OpenAPI path.

    One component registry is shared by all operations, so a type used by
    several operations becomes a single component.
    """

    def __init__(
        self,
        description: InterfaceDescription,
        universe: SchemaUniverse,
        registry: ComponentRegistry | None = None,
        settings: Settings | None = None,
    ):
        self.description = description
        self.universe = universe
        self.registry = registry if registry is not None else ComponentRegistry()
        self.settings = settings or Settings()
        self.synthesizer = SchemaSynthesizer(universe, self.registry)

    def build_document(self) -> OpenApiDocument:
        document = OpenApiDocument(
            openapi=OPENAPI_VERSION,
            info=Info(
                title=self.description.name or self.settings.default_title,
                version=self.settings.api_version,
            ),
        )

        for port_type in self.description.port_types:
            for operation in port_type.operations:
                path_key, method, operation_object = self.build_operation(port_type, operation)
                if path_key in document.paths:
                    logger.warning("Duplicate path replaced", path=path_key)
                document.paths[path_key] = PathItem(**{method: operation_object})

        document.components = Components(schemas=self.registry.schemas)
        logger.info("Built OpenAPI document", paths=len(document.paths), components=len(self.registry.schemas))
        return document

    def build_operation(self, port_type: PortType, operation: Operation) -> tuple[str, str, OperationObject]:
        """Return (path key, HTTP method, operation object) for one operation."""
        path_key = f"/{sanitize(port_type.name)}/{sanitize(operation.name)}"
        method = "get"
        parameters: list[Parameter] = []
        request_body = None
        requires_body = False

        input_message = self.description.find_message(operation.input)
        if input_message is not None:
            for part in input_message.parts:
                body_schema = self._place_input_part(part, parameters)
                if body_schema is not None:
                    requires_body = True
                    request_body = RequestBody.for_schema(body_schema)

        if requires_body:
            method = "post"
            request_body = request_body or default_request_body()

        if (operation.documentation or "").strip().upper() == "POST":
            method = "post"
            request_body = request_body or default_request_body()

        operation_object = OperationObject(
            summary=operation.documentation,
            parameters=parameters,
            request_body=request_body,
            responses={"200": self._build_response(operation)},
        )
        logger.debug("Built operation", path=path_key, method=method, parameters=len(parameters))
        return path_key, method, operation_object

    def _place_input_part(self, part: MessagePart, parameters: list[Parameter]) -> Schema | None:
        """Add query parameters for ``part``, or return its body schema if it
        is too deeply nested to flatten."""
        element = None
        if part.element is not None:
            element = self.universe.find_global_element(part.element)
            resolved = self.universe.resolve_element_type(element)
        else:
            resolved = self.universe.resolve_type(part.type_name)

        name = part.name or (element.name if element is not None else "")

        if element is not None and element.is_repeated:
            parameters.append(query_parameter(name, Schema.array_of(self.synthesizer.synthesize(resolved))))
            return None

        if is_simple(resolved):
            parameters.append(query_parameter(name, self.synthesizer.synthesize(resolved)))
            return None

        if structural_depth(self.universe, resolved) <= 1:
            for child in sequence_elements(resolved):
                parameters.append(query_parameter(child.name, map_simple_type(self.universe.resolve_element_type(child))))
            return None

        return self.synthesizer.synthesize(resolved)

    def _build_response(self, operation: Operation) -> Response:
        if operation.output is None:
            return Response(description="No output message")

        output_message = self.description.find_message(operation.output)
        if output_message is None or not output_message.parts:
            return Response(description="No content")

        return json_response(self._response_schema(output_message.parts[0]))

    def _response_schema(self, part: MessagePart) -> Schema:
        if part.element is not None:
            element = self.universe.find_global_element(part.element)
            if element is None:
                return Schema(type="string")
            schema = self.synthesizer.synthesize(self.universe.resolve_element_type(element))
            return Schema.array_of(schema) if element.is_repeated else schema
        return self.synthesizer.synthesize(self.universe.resolve_type(part.type_name))

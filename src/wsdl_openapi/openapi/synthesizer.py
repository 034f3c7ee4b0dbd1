"""Synthesis of OpenAPI schemas from resolved XSD types.

Rules, in order:

1. unknown type -> string
2. simple type -> fixed primitive table (unlisted types become strings)
3. wrapper (a sequence with a single element) -> array of the element's type
4. any other complex type -> a named component, referenced with $ref

Components are registered before their children are expanded, so
self-referencing and mutually-referencing types terminate.
"""

import structlog

from wsdl_openapi.openapi.models import Schema
from wsdl_openapi.wsdl.base import XS_NS, ComplexExtension, Element, SchemaType
from wsdl_openapi.wsdl.universe import (
    SchemaUniverse,
    child_elements,
    is_simple,
    item_count,
    sequence_elements,
    type_key,
)

logger = structlog.get_logger(__name__)

# XSD built-in name -> (OpenAPI type, format)
PRIMITIVE_SCHEMAS: dict[str, tuple[str, str | None]] = {
    "string": ("string", None),
    "normalizedString": ("string", None),
    "boolean": ("boolean", None),
    "int": ("integer", "int32"),
    "integer": ("integer", "int32"),
    "short": ("integer", "int32"),
    "byte": ("integer", "int32"),
    "long": ("integer", "int64"),
    "decimal": ("number", None),
    "double": ("number", None),
    "float": ("number", None),
    "dateTime": ("string", "date-time"),
    "date": ("string", "date"),
    "base64Binary": ("string", "byte"),
}


def map_simple_type(schema_type: SchemaType | None) -> Schema:
    """Map a simple type to a primitive schema. Everything unknown is a string."""
    qname = schema_type.qname if schema_type is not None else None
    if qname is None or qname.namespace != XS_NS:
        return Schema(type="string")
    openapi_type, fmt = PRIMITIVE_SCHEMAS.get(qname.name, ("string", None))
    return Schema(type=openapi_type, format=fmt)


def wrapped_child(schema_type: SchemaType | None) -> Element | None:
    """Return the only element of a wrapper type, or None if it is not one.

    A wrapper is a sequence (or complex-content extension sequence) whose
    single item is an element. A nested group or wildcard is not.
    """
    elements = sequence_elements(schema_type)
    if len(elements) == 1 and item_count(schema_type) == 1:
        return elements[0]
    return None


class ComponentRegistry:
    """Maps type identities to component names and holds the component schemas.

    Entries are never removed. Components are listed in registration order.
    """

    def __init__(self):
        self.names: dict = {}
        self.schemas: dict[str, Schema] = {}

    def __len__(self) -> int:
        return len(self.names)

    def get(self, key) -> str | None:
        return self.names.get(key)

    def register(self, key, preferred_name: str | None) -> str:
        """Reserve a component name for ``key`` with an empty object schema."""
        name = preferred_name or f"AnonType_{len(self.names) + 1}"
        if name in self.schemas:
            suffix = 2
            while f"{name}_{suffix}" in self.schemas:
                suffix += 1
            name = f"{name}_{suffix}"

        self.names[key] = name
        self.schemas[name] = Schema(type="object", properties={})
        return name


class SchemaSynthesizer:
    """Builds schemas for resolved types, registering components as it goes."""

    def __init__(self, universe: SchemaUniverse, registry: ComponentRegistry):
        self.universe = universe
        self.registry = registry
        self._unwrapping: set = set()

    def synthesize(self, schema_type: SchemaType | None) -> Schema:
        if schema_type is None:
            return Schema(type="string")
        if is_simple(schema_type):
            return map_simple_type(schema_type)

        key = type_key(schema_type)
        child = wrapped_child(schema_type)
        if child is not None and key not in self._unwrapping:
            child_type = self.universe.resolve_element_type(child)
            if child_type is not None:
                self._unwrapping.add(key)
                try:
                    return Schema.array_of(self.synthesize(child_type))
                finally:
                    self._unwrapping.discard(key)

        return Schema.reference(self.ensure_component(schema_type))

    def ensure_component(self, schema_type: SchemaType) -> str:
        """Return the component name for a complex type, building it once."""
        key = type_key(schema_type)
        existing = self.registry.get(key)
        if existing is not None:
            return existing

        qname = schema_type.qname
        name = self.registry.register(key, qname.name if qname is not None else None)
        properties = self.registry.schemas[name].properties

        if isinstance(schema_type, ComplexExtension) and not schema_type.simple_content and schema_type.base:
            base_type = self.universe.resolve_type(schema_type.base)
            if base_type is not None and not is_simple(base_type):
                base_name = self.ensure_component(base_type)
                properties[f"_extends_{schema_type.base.name}"] = Schema.reference(base_name)

        for child in child_elements(schema_type):
            self._add_property(child, properties)

        logger.debug("Registered component", component=name, properties=len(properties))
        return name

    def _add_property(self, child: Element, properties: dict[str, Schema]) -> None:
        child_type = self.universe.resolve_element_type(child)
        if is_simple(child_type):
            properties[child.name] = map_simple_type(child_type)
        else:
            properties[child.name] = Schema.reference(self.ensure_component(child_type))

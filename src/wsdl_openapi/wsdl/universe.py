"""The merged schema universe and type resolution over it."""

from wsdl_openapi.wsdl.base import (
    XS_NS,
    ComplexExtension,
    Element,
    Primitive,
    QName,
    SchemaFragment,
    SchemaType,
    Sequence,
    SimpleNamed,
)

# Built-in XSD types the converter maps to specific OpenAPI types.
BUILTIN_PRIMITIVES = frozenset({
    "string",
    "normalizedString",
    "boolean",
    "int",
    "integer",
    "short",
    "byte",
    "long",
    "decimal",
    "double",
    "float",
    "dateTime",
    "date",
    "base64Binary",
})


def is_simple(schema_type: SchemaType | None) -> bool:
    """Primitives and declared simple types are simple. So is an unknown type."""
    if schema_type is None:
        return True
    return isinstance(schema_type, (Primitive, SimpleNamed))


def child_elements(schema_type: SchemaType | None) -> list[Element]:
    """The element particles of a complex type (none for simple types)."""
    if is_simple(schema_type):
        return []
    return list(schema_type.particles)


def sequence_elements(schema_type: SchemaType | None) -> list[Element]:
    """The direct elements of a sequence, or of a complex-content extension's
    sequence. Choices, simple content and nested groups contribute none."""
    if isinstance(schema_type, Sequence) or (
        isinstance(schema_type, ComplexExtension) and not schema_type.simple_content
    ):
        return [child for child in schema_type.particles if not child.nested]
    return []


def item_count(schema_type: SchemaType | None) -> int:
    """Number of direct items in the content group of a complex type."""
    if is_simple(schema_type):
        return 0
    if schema_type.item_count is not None:
        return schema_type.item_count
    return sum(1 for child in schema_type.particles if not child.nested)


def type_key(schema_type: SchemaType) -> QName | tuple[str, int]:
    """Identity of a type: its qualified name, or the object itself if anonymous."""
    if schema_type.qname is not None:
        return schema_type.qname
    return ("anonymous", id(schema_type))


class SchemaUniverse:
    """All schema fragments of one conversion, keyed by location."""

    def __init__(self):
        self.fragments: dict[str, SchemaFragment] = {}

    def add(self, fragment: SchemaFragment) -> bool:
        """Add ``fragment`` unless its key is already present."""
        if fragment.key in self.fragments:
            return False
        self.fragments[fragment.key] = fragment
        return True

    def __contains__(self, key: str) -> bool:
        return key in self.fragments

    def __len__(self) -> int:
        return len(self.fragments)

    def find_global_element(self, qname: QName | None) -> Element | None:
        if qname is None:
            return None
        for fragment in self.fragments.values():
            if fragment.target_namespace == qname.namespace and qname.name in fragment.elements:
                return fragment.elements[qname.name]
        return None

    def resolve_type(self, qname: QName | None) -> SchemaType | None:
        """Find a global type by name, falling back to the built-in table."""
        if qname is None:
            return None
        for fragment in self.fragments.values():
            if fragment.target_namespace == qname.namespace and qname.name in fragment.types:
                return fragment.types[qname.name]
        if qname.namespace == XS_NS and qname.name in BUILTIN_PRIMITIVES:
            return Primitive(qname=qname)
        return None

    def resolve_element_type(self, element: Element | None) -> SchemaType | None:
        """Type of ``element``: its anonymous type, the type of the element it
        refers to, or its named type."""
        seen = set()
        while element is not None:
            if element.inline_type is not None:
                return element.inline_type
            if element.ref is None:
                return self.resolve_type(element.type_name)
            if element.ref in seen:
                return None
            seen.add(element.ref)
            element = self.find_global_element(element.ref)
        return None

"""Data models for parsed WSDL documents and XSD schemas.

The WSDL and XSD parsers turn XML into these models; everything downstream
(type resolution, schema synthesis, operation building) works on them only.

Structural types form a closed set distinguished by ``kind``:
``primitive``, ``simple``, ``sequence``, ``choice`` and ``extension``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

XS_NS = "http://www.w3.org/2001/XMLSchema"
WSDL_NS = "http://schemas.xmlsoap.org/wsdl/"


class QName(BaseModel):
    """A namespace-qualified name. Hashable, usable as a dict key."""

    model_config = ConfigDict(frozen=True)

    namespace: str = ""
    name: str

    def __str__(self) -> str:
        return f"{{{self.namespace}}}{self.name}" if self.namespace else self.name


class Element(BaseModel):
    """An element declaration: global, or a particle inside a content model."""

    name: str
    type_name: QName | None = None
    ref: QName | None = None
    inline_type: "SchemaType | None" = None
    min_occurs: int = 1
    max_occurs: int | None = 1  # None = unbounded
    nested: bool = False  # declared inside a nested sequence/choice group

    @property
    def is_repeated(self) -> bool:
        return self.max_occurs is None or self.max_occurs > 1


class Primitive(BaseModel):
    """A built-in XSD simple type such as xs:string or xs:int."""

    kind: Literal["primitive"] = "primitive"
    qname: QName


class SimpleNamed(BaseModel):
    """A simple type declared in a schema (usually a restriction)."""

    kind: Literal["simple"] = "simple"
    qname: QName | None = None
    base: QName | None = None


class Sequence(BaseModel):
    """A complex type whose content is an xs:sequence.

    ``particles`` lists every element of the group, elements of nested
    groups included (flagged ``nested``). ``item_count`` is the number of
    direct items of the group (elements, nested groups, wildcards); None
    means the direct elements are all there is.
    """

    kind: Literal["sequence"] = "sequence"
    qname: QName | None = None
    particles: list[Element] = []
    item_count: int | None = None


class Choice(BaseModel):
    """A complex type whose content is an xs:choice of elements."""

    kind: Literal["choice"] = "choice"
    qname: QName | None = None
    particles: list[Element] = []
    item_count: int | None = None


class ComplexExtension(BaseModel):
    """A complex type extending a base type.

    For complex content, ``particles`` holds the elements of the extension's
    own group. Elements of a choice group are flagged ``nested``.
    For simple content, ``particles`` holds one synthetic ``value`` element
    typed with the base.
    """

    kind: Literal["extension"] = "extension"
    qname: QName | None = None
    base: QName | None = None
    particles: list[Element] = []
    item_count: int | None = None
    simple_content: bool = False


SchemaType = Annotated[
    Union[Primitive, SimpleNamed, Sequence, Choice, ComplexExtension],
    Field(discriminator="kind"),
]

Element.model_rebuild()


class SchemaReference(BaseModel):
    """An xs:include or xs:import pointing at another schema document."""

    kind: str  # include / import
    location: str
    namespace: str | None = None


class SchemaFragment(BaseModel):
    """One schema document, or one inline schema of a WSDL types section."""

    key: str
    base: str
    target_namespace: str = ""
    elements: dict[str, Element] = {}
    types: dict[str, SchemaType] = {}
    references: list[SchemaReference] = []


class MessagePart(BaseModel):
    """A message part referencing either a global element or a type."""

    name: str
    element: QName | None = None
    type_name: QName | None = None


class Message(BaseModel):
    name: str
    parts: list[MessagePart] = []


class Operation(BaseModel):
    """A port type operation with optional input and output messages."""

    name: str
    documentation: str | None = None
    input: QName | None = None
    output: QName | None = None


class PortType(BaseModel):
    name: str
    operations: list[Operation] = []


class Binding(BaseModel):
    name: str
    port_type: QName | None = None
    style: str | None = None
    transport: str | None = None


class Port(BaseModel):
    name: str
    binding: QName | None = None
    address: str | None = None


class Service(BaseModel):
    name: str
    ports: list[Port] = []


class InterfaceDescription(BaseModel):
    """A WSDL document, or several merged into one logical definition."""

    location: str
    name: str | None = None
    target_namespace: str = ""
    imports: list[str] = []
    messages: list[Message] = []
    port_types: list[PortType] = []
    bindings: list[Binding] = []
    services: list[Service] = []
    schemas: list[SchemaFragment] = []

    def find_message(self, qname: QName | None) -> Message | None:
        """Find a message by local name."""
        if qname is None:
            return None
        for message in self.messages:
            if message.name == qname.name:
                return message
        return None

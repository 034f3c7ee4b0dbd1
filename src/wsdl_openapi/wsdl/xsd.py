"""XSD schema parser.

Reads an ``xs:schema`` element into a :class:`SchemaFragment`. Only the
content models the converter understands are kept: ``sequence``, ``choice``,
``complexContent/extension`` and ``simpleContent/extension``. Anything else
becomes an empty sequence. Elements of nested groups are flattened into the
enclosing content model.
"""

import xml.etree.ElementTree as ET

from wsdl_openapi.errors import DocumentLoadError
from wsdl_openapi.wsdl.base import (
    XS_NS,
    Choice,
    ComplexExtension,
    Element,
    QName,
    SchemaFragment,
    SchemaReference,
    Sequence,
    SimpleNamed,
)
from wsdl_openapi.wsdl.xml import XmlDocument, parse_xml, tag


def xs(name: str) -> str:
    return tag(XS_NS, name)


# children of a model group that count as one of its items
PARTICLE_TAGS = frozenset(xs(name) for name in ("element", "sequence", "choice", "group", "any"))


def parse_schema_document(content: bytes, location: str, default_namespace: str | None = None) -> SchemaFragment:
    """Parse a standalone schema document fetched from ``location``."""
    try:
        document = parse_xml(content)
    except ET.ParseError as e:
        raise DocumentLoadError(location, f"malformed XML: {e}") from e

    if document.root.tag != xs("schema"):
        raise DocumentLoadError(location, f"root element is {document.root.tag}, expected xs:schema")

    return parse_schema(document, document.root, key=location, base=location, default_namespace=default_namespace)


def parse_schema(
    document: XmlDocument,
    schema: ET.Element,
    key: str,
    base: str,
    default_namespace: str | None = None,
) -> SchemaFragment:
    """Parse one ``xs:schema`` element.

    ``default_namespace`` applies when the schema declares no
    targetNamespace (a schema included into another namespace).
    """
    target_namespace = schema.get("targetNamespace") or default_namespace or ""
    parser = _SchemaParser(document, target_namespace)
    fragment = SchemaFragment(key=key, base=base, target_namespace=target_namespace)

    for child in schema:
        name = child.get("name")
        if child.tag == xs("element") and name:
            fragment.elements[name] = parser.element(child)
        elif child.tag == xs("complexType") and name:
            fragment.types[name] = parser.complex_type(child, QName(namespace=target_namespace, name=name))
        elif child.tag == xs("simpleType") and name:
            fragment.types[name] = parser.simple_type(child, QName(namespace=target_namespace, name=name))
        elif child.tag in (xs("include"), xs("import")):
            location = child.get("schemaLocation")
            if location and location.strip():
                fragment.references.append(
                    SchemaReference(
                        kind="include" if child.tag == xs("include") else "import",
                        location=location.strip(),
                        namespace=child.get("namespace"),
                    )
                )

    return fragment


def _item_count(group: ET.Element) -> int:
    return sum(1 for child in group if child.tag in PARTICLE_TAGS)


def _parse_occurs(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


class _SchemaParser:
    def __init__(self, document: XmlDocument, target_namespace: str):
        self.document = document
        self.target_namespace = target_namespace

    def qname(self, node: ET.Element, attribute: str) -> QName | None:
        return self.document.resolve_qname(node, node.get(attribute))

    def element(self, node: ET.Element, nested: bool = False) -> Element:
        ref = self.qname(node, "ref")
        inline_type = None
        for child in node:
            if child.tag == xs("complexType"):
                inline_type = self.complex_type(child, None)
            elif child.tag == xs("simpleType"):
                inline_type = self.simple_type(child, None)

        max_occurs = node.get("maxOccurs")
        return Element(
            name=node.get("name") or (ref.name if ref else ""),
            type_name=self.qname(node, "type"),
            ref=ref,
            inline_type=inline_type,
            min_occurs=_parse_occurs(node.get("minOccurs"), 1),
            max_occurs=None if max_occurs == "unbounded" else _parse_occurs(max_occurs, 1),
            nested=nested,
        )

    def particles(self, group: ET.Element, nested: bool = False) -> list[Element]:
        """Elements of ``group`` in document order, with the elements of
        nested sequence/choice groups flattened in."""
        found = []
        for child in group:
            if child.tag == xs("element"):
                found.append(self.element(child, nested=nested))
            elif child.tag in (xs("sequence"), xs("choice")):
                found.extend(self.particles(child, nested=True))
        return found

    def complex_type(self, node: ET.Element, qname: QName | None):
        for child in node:
            if child.tag == xs("sequence"):
                return Sequence(qname=qname, particles=self.particles(child), item_count=_item_count(child))
            if child.tag == xs("choice"):
                return Choice(qname=qname, particles=self.particles(child), item_count=_item_count(child))
            if child.tag == xs("complexContent"):
                return self._complex_content(child, qname)
            if child.tag == xs("simpleContent"):
                return self._simple_content(child, qname)
        # empty or unmodeled content (xs:all, groups, attributes only)
        return Sequence(qname=qname)

    def _complex_content(self, node: ET.Element, qname: QName | None):
        for child in node:
            if child.tag == xs("extension"):
                particles, item_count = self._first_group(child)
                return ComplexExtension(
                    qname=qname,
                    base=self.qname(child, "base"),
                    particles=particles,
                    item_count=item_count,
                )
            if child.tag == xs("restriction"):
                # a restriction restates the content it keeps
                return self.complex_type(child, qname)
        return Sequence(qname=qname)

    def _simple_content(self, node: ET.Element, qname: QName | None):
        for child in node:
            if child.tag in (xs("extension"), xs("restriction")):
                base = self.qname(child, "base")
                return ComplexExtension(
                    qname=qname,
                    base=base,
                    particles=[Element(name="value", type_name=base)],
                    simple_content=True,
                )
        return Sequence(qname=qname)

    def _first_group(self, node: ET.Element) -> tuple[list[Element], int]:
        """Elements and direct item count of an extension's content group.

        A choice group is one item whose options are all nested.
        """
        for child in node:
            if child.tag == xs("sequence"):
                return self.particles(child), _item_count(child)
            if child.tag == xs("choice"):
                return self.particles(child, nested=True), 1
        return [], 0

    def simple_type(self, node: ET.Element, qname: QName | None) -> SimpleNamed:
        base = None
        for child in node:
            if child.tag == xs("restriction"):
                base = self.qname(child, "base")
        return SimpleNamed(qname=qname, base=base)

"""WSDL 1.1 document parser.

Parses ``wsdl:definitions`` into an :class:`InterfaceDescription` holding
messages, port types, bindings, services, import locations and the inline
schemas of the ``wsdl:types`` section.
"""

import xml.etree.ElementTree as ET

from wsdl_openapi.errors import DocumentLoadError
from wsdl_openapi.wsdl.base import (
    WSDL_NS,
    XS_NS,
    Binding,
    InterfaceDescription,
    Message,
    MessagePart,
    Operation,
    Port,
    PortType,
    Service,
)
from wsdl_openapi.wsdl.xml import XmlDocument, element_text, local_name, parse_xml, tag
from wsdl_openapi.wsdl.xsd import parse_schema


def wsdl(name: str) -> str:
    return tag(WSDL_NS, name)


def parse_wsdl(content: bytes, location: str) -> InterfaceDescription:
    """Parse WSDL ``content`` loaded from ``location``.

    Raises DocumentLoadError if the content is not well-formed XML or not a
    WSDL 1.1 definitions document.
    """
    try:
        document = parse_xml(content)
    except ET.ParseError as e:
        raise DocumentLoadError(location, f"malformed XML: {e}") from e

    root = document.root
    if root.tag != wsdl("definitions"):
        raise DocumentLoadError(location, f"root element is {root.tag}, expected wsdl:definitions")

    description = InterfaceDescription(
        location=location,
        name=root.get("name"),
        target_namespace=root.get("targetNamespace") or "",
    )

    for imp in root.iter(wsdl("import")):
        imported = imp.get("location")
        if imported and imported.strip():
            description.imports.append(imported.strip())

    for types in root.findall(wsdl("types")):
        for schema in types.findall(tag(XS_NS, "schema")):
            description.schemas.append(
                parse_schema(document, schema, key=f"{location}#types[{len(description.schemas)}]", base=location)
            )

    description.messages = [_parse_message(document, m) for m in root.findall(wsdl("message"))]
    description.port_types = [_parse_port_type(document, p) for p in root.findall(wsdl("portType"))]
    description.bindings = [_parse_binding(document, b) for b in root.findall(wsdl("binding"))]
    description.services = [_parse_service(document, s) for s in root.findall(wsdl("service"))]
    return description


def _parse_message(document: XmlDocument, node: ET.Element) -> Message:
    parts = []
    for part in node.findall(wsdl("part")):
        element = document.resolve_qname(part, part.get("element"))
        parts.append(
            MessagePart(
                name=part.get("name") or "",
                element=element,
                type_name=None if element else document.resolve_qname(part, part.get("type")),
            )
        )
    return Message(name=node.get("name") or "", parts=parts)


def _parse_port_type(document: XmlDocument, node: ET.Element) -> PortType:
    operations = []
    for op in node.findall(wsdl("operation")):
        input_node = op.find(wsdl("input"))
        output_node = op.find(wsdl("output"))
        operations.append(
            Operation(
                name=op.get("name") or "",
                documentation=element_text(op.find(wsdl("documentation"))),
                input=document.resolve_qname(input_node, input_node.get("message")) if input_node is not None else None,
                output=document.resolve_qname(output_node, output_node.get("message")) if output_node is not None else None,
            )
        )
    return PortType(name=node.get("name") or "", operations=operations)


def _parse_binding(document: XmlDocument, node: ET.Element) -> Binding:
    style = None
    transport = None
    for child in node:
        # soap:binding or soap12:binding, whichever namespace version is used
        if local_name(child.tag) == "binding":
            style = child.get("style")
            transport = child.get("transport")
    return Binding(
        name=node.get("name") or "",
        port_type=document.resolve_qname(node, node.get("type")),
        style=style,
        transport=transport,
    )


def _parse_service(document: XmlDocument, node: ET.Element) -> Service:
    ports = []
    for port in node.findall(wsdl("port")):
        address = None
        for child in port:
            if local_name(child.tag) == "address":
                address = child.get("location")
        ports.append(
            Port(
                name=port.get("name") or "",
                binding=document.resolve_qname(port, port.get("binding")),
                address=address,
            )
        )
    return Service(name=node.get("name") or "", ports=ports)

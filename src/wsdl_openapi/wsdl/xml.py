"""XML parsing helpers that keep track of in-scope namespace prefixes.

ElementTree drops prefix declarations after parsing, but WSDL and XSD store
qualified names in attribute values (``type="tns:Foo"``). :func:`parse_xml`
records the prefix map in scope at every element so those values can be
resolved later.
"""

import io
import xml.etree.ElementTree as ET

from wsdl_openapi.wsdl.base import QName

XML_NS = "http://www.w3.org/XML/1998/namespace"


class XmlDocument:
    """A parsed XML tree plus the namespace scope of each element."""

    def __init__(self, root: ET.Element, scopes: dict[ET.Element, dict[str, str]]):
        self.root = root
        self._scopes = scopes

    def nsmap(self, element: ET.Element) -> dict[str, str]:
        return self._scopes.get(element, {})

    def resolve_qname(self, element: ET.Element, value: str | None) -> QName | None:
        """Resolve a ``prefix:local`` attribute value in the scope of ``element``.

        Unprefixed values use the default namespace in scope. Unknown prefixes
        resolve to the empty namespace.
        """
        if not value or not value.strip():
            return None
        value = value.strip()
        prefix, _, local = value.rpartition(":")
        namespace = self.nsmap(element).get(prefix, "")
        return QName(namespace=namespace, name=local)


def parse_xml(content: bytes) -> XmlDocument:
    """Parse ``content`` and return the tree with per-element namespace scopes.

    Raises ``xml.etree.ElementTree.ParseError`` for malformed input.
    """
    scopes: dict[ET.Element, dict[str, str]] = {}
    stack: list[dict[str, str]] = [{"xml": XML_NS}]
    pending: dict[str, str] = {}
    root = None

    for event, item in ET.iterparse(io.BytesIO(content), events=("start-ns", "start", "end")):
        if event == "start-ns":
            prefix, uri = item
            pending[prefix or ""] = uri
        elif event == "start":
            scope = stack[-1]
            if pending:
                scope = {**scope, **pending}
                pending = {}
            stack.append(scope)
            scopes[item] = scope
            if root is None:
                root = item
        else:
            stack.pop()

    return XmlDocument(root, scopes)


def local_name(tag: str) -> str:
    if "}" in tag:
        return tag.rsplit("}", 1)[1]
    return tag


def tag(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}"


def element_text(element: ET.Element | None) -> str | None:
    """Return all text inside ``element`` (including children), or None."""
    if element is None:
        return None
    return "".join(element.itertext())

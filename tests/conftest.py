from pathlib import Path

import pytest

from wsdl_openapi.wsdl.document import parse_wsdl
from wsdl_openapi.wsdl.universe import SchemaUniverse
from wsdl_openapi.wsdl.xsd import parse_schema_document

FIXTURES = Path(__file__).parent / "fixtures"

XS = "http://www.w3.org/2001/XMLSchema"
TNS = "http://example.com/svc"


def schema_xml(body: str, target_namespace: str = TNS) -> bytes:
    return (
        f'<xs:schema xmlns:xs="{XS}" xmlns:tns="{target_namespace}" '
        f'targetNamespace="{target_namespace}">{body}</xs:schema>'
    ).encode("utf-8")


def wsdl_xml(types: str = "", messages: str = "", port_types: str = "", name: str | None = "TestService", imports: str = "") -> bytes:
    name_attr = f' name="{name}"' if name else ""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<wsdl:definitions{name_attr} xmlns:wsdl="http://schemas.xmlsoap.org/wsdl/"
    xmlns:xs="{XS}" xmlns:tns="{TNS}" targetNamespace="{TNS}">
  {imports}
  <wsdl:types>
    <xs:schema targetNamespace="{TNS}">{types}</xs:schema>
  </wsdl:types>
  {messages}
  {port_types}
</wsdl:definitions>""".encode("utf-8")


@pytest.fixture
def make_universe():
    """Build a SchemaUniverse from the body of one xs:schema."""
    def _make(body: str) -> SchemaUniverse:
        universe = SchemaUniverse()
        universe.add(parse_schema_document(schema_xml(body), "file:///test/schema.xsd"))
        return universe
    return _make


@pytest.fixture
def make_service():
    """Parse a WSDL built from parts; returns (description, universe)."""
    def _make(types: str = "", messages: str = "", port_types: str = "", name: str | None = "TestService"):
        description = parse_wsdl(wsdl_xml(types, messages, port_types, name), "file:///test/service.wsdl")
        universe = SchemaUniverse()
        for fragment in description.schemas:
            universe.add(fragment)
        return description, universe
    return _make


@pytest.fixture
def write_wsdl(tmp_path):
    """Write WSDL text to tmp_path/<filename> and return its path."""
    def _write(filename: str, content: bytes) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _write

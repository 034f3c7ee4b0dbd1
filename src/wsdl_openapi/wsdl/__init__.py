"""WSDL and XSD parsing, import resolution and type lookup."""

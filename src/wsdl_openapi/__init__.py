"""wsdl-openapi: convert WSDL service descriptions into OpenAPI documents."""

__version__ = "0.1.0"

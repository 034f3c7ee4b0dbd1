"""WSDL to OpenAPI conversion pipeline.

load WSDL + imports -> resolve schema includes -> build operations -> render
"""

import structlog

from wsdl_openapi.config import Settings
from wsdl_openapi.context import ConversionContext
from wsdl_openapi.fetch import Fetcher
from wsdl_openapi.openapi.builder import OperationBuilder
from wsdl_openapi.openapi.models import OpenApiDocument
from wsdl_openapi.openapi.serializer import render_document
from wsdl_openapi.wsdl.imports import merge_interface_documents, resolve_schema_includes_and_imports

logger = structlog.get_logger(__name__)


class WsdlConverter:
    """Converts WSDL documents into OpenAPI documents.

    Each call works on a fresh ConversionContext; nothing is shared between
    conversions except the optional caller-supplied fetcher.
    """

    def __init__(self, settings: Settings | None = None, fetcher: Fetcher | None = None):
        self.settings = settings or Settings()
        self.fetcher = fetcher

    def convert(self, location: str) -> OpenApiDocument:
        """Convert the WSDL at ``location`` (path or URL).

        Raises DocumentLoadError if any WSDL document cannot be loaded.
        """
        logger.info("Converting WSDL", location=location)
        with ConversionContext(fetcher=self.fetcher, timeout=self.settings.timeout_seconds) as context:
            description, schemas_by_base = merge_interface_documents(location, context)
            universe = resolve_schema_includes_and_imports(schemas_by_base, context)
            builder = OperationBuilder(description, universe, registry=context.registry, settings=self.settings)
            return builder.build_document()

    def generate(self, location: str, fmt: str | None = None) -> str:
        """Convert and render as text ('json' or 'yaml', default from settings)."""
        return render_document(self.convert(location), fmt or self.settings.output_format)


def generate_openapi(location: str, settings: Settings | None = None, fmt: str | None = None) -> str:
    """Shortcut for ``WsdlConverter(settings).generate(location, fmt)``."""
    return WsdlConverter(settings).generate(location, fmt)

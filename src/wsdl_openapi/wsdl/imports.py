"""Recursive loading of imported WSDL documents and included schemas.

WSDL imports are followed depth-first from the root document; every document
is loaded at most once, so cyclic imports terminate. The documents are merged
into the first one by name (first occurrence wins).

Schema includes and imports are followed the same way, each location resolved
against the base of the schema that references it. A schema that cannot be
fetched or parsed is logged and skipped; a WSDL document that cannot be loaded
aborts the conversion.
"""

import structlog

from wsdl_openapi.context import ConversionContext
from wsdl_openapi.errors import DocumentLoadError
from wsdl_openapi.fetch import normalize_location
from wsdl_openapi.wsdl.base import InterfaceDescription, SchemaFragment
from wsdl_openapi.wsdl.document import parse_wsdl
from wsdl_openapi.wsdl.universe import SchemaUniverse
from wsdl_openapi.wsdl.xsd import parse_schema_document

logger = structlog.get_logger(__name__)


def merge_interface_documents(
    root_location: str, context: ConversionContext
) -> tuple[InterfaceDescription, dict[str, list[SchemaFragment]]]:
    """Load the root WSDL and everything it imports, and merge them.

    Returns the merged description and its inline schemas grouped by the
    location of the document that declared them.
    """
    descriptions: list[InterfaceDescription] = []
    _load_recursive(normalize_location(root_location), context, descriptions)

    merged = descriptions[0]
    schemas_by_base: dict[str, list[SchemaFragment]] = {}
    schema_keys: set[str] = set()

    for description in descriptions:
        for fragment in description.schemas:
            if fragment.key in schema_keys:
                continue
            schema_keys.add(fragment.key)
            schemas_by_base.setdefault(description.location, []).append(fragment)
            if description is not merged:
                merged.schemas.append(fragment)

        if description is not merged:
            _merge_by_name(merged.messages, description.messages)
            _merge_by_name(merged.port_types, description.port_types)
            _merge_by_name(merged.bindings, description.bindings)
            _merge_by_name(merged.services, description.services)

    logger.info(
        "Merged WSDL documents",
        root=merged.location,
        documents=len(descriptions),
        port_types=len(merged.port_types),
        schemas=len(schema_keys),
    )
    return merged, schemas_by_base


def _load_recursive(location: str, context: ConversionContext, descriptions: list[InterfaceDescription]) -> None:
    if location in context.visited_documents:
        return
    context.visited_documents.add(location)

    content = context.fetcher.read(location)
    description = parse_wsdl(content, location)
    descriptions.append(description)
    logger.debug("Loaded WSDL document", location=location, imports=len(description.imports))

    for imported in description.imports:
        _load_recursive(normalize_location(imported, base=location), context, descriptions)


def _merge_by_name(target: list, source: list) -> None:
    names = {item.name for item in target}
    for item in source:
        if item.name not in names:
            target.append(item)
            names.add(item.name)


def resolve_schema_includes_and_imports(
    schemas_by_base: dict[str, list[SchemaFragment]], context: ConversionContext
) -> SchemaUniverse:
    """Build the schema universe from the inline schemas and every schema
    they transitively include or import."""
    universe = SchemaUniverse()
    for fragments in schemas_by_base.values():
        for fragment in fragments:
            _add_schema(fragment, universe, context)

    logger.info("Resolved schema universe", fragments=len(universe))
    return universe


def _add_schema(fragment: SchemaFragment, universe: SchemaUniverse, context: ConversionContext) -> None:
    if not universe.add(fragment):
        return
    context.visited_schemas.add(fragment.key)

    for reference in fragment.references:
        try:
            location = normalize_location(reference.location, base=fragment.base)
        except DocumentLoadError as e:
            logger.warning("Skipping schema", location=e.location, reason=e.reason, referenced_by=fragment.key)
            continue
        if location in context.visited_schemas:
            continue
        context.visited_schemas.add(location)

        # chameleon include: a schema without targetNamespace joins the includer's
        default_namespace = fragment.target_namespace if reference.kind == "include" else None
        try:
            content = context.fetcher.read(location)
            child = parse_schema_document(content, location, default_namespace=default_namespace)
        except DocumentLoadError as e:
            logger.warning("Skipping schema", location=location, reason=e.reason, referenced_by=fragment.key)
            continue

        _add_schema(child, universe, context)

"""Renders an OpenAPI document as JSON or YAML text."""

import json

import yaml

from wsdl_openapi.openapi.models import OpenApiDocument

FORMATS = ("json", "yaml")


def render_document(document: OpenApiDocument, fmt: str = "json") -> str:
    """Serialize ``document`` in the requested format ('json' or 'yaml')."""
    data = document.to_dict()
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported output format: {fmt}")

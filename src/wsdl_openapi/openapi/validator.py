"""Sanity checks for generated OpenAPI documents."""

import json

import yaml

from wsdl_openapi.openapi.models import COMPONENT_REF_PREFIX


def validate_references(document: dict) -> dict[str, str]:
    """Check that every $ref points at an existing component.

    Returns dict of {location: error_message} for dangling references, where
    location is a slash-separated path into the document.
    """
    components = set((document.get("components") or {}).get("schemas") or {})
    errors = {}

    def walk(node, location: str) -> None:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                if not ref.startswith(COMPONENT_REF_PREFIX):
                    errors[location] = f"Unsupported reference {ref}"
                elif ref[len(COMPONENT_REF_PREFIX):] not in components:
                    errors[location] = f"Missing component {ref}"
            for key, value in node.items():
                walk(value, f"{location}/{key}")
        elif isinstance(node, list):
            for index, value in enumerate(node):
                walk(value, f"{location}/{index}")

    walk(document, "#")
    return errors


def validate_rendered(text: str, fmt: str = "json") -> dict[str, str]:
    """Check that rendered output parses back in its format.

    Returns {"_document": error_message} on failure, else an empty dict.
    """
    try:
        if fmt == "yaml":
            yaml.safe_load(text)
        else:
            json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        return {"_document": f"{type(e).__name__}: {e}"}
    return {}


def validate_document(document: dict, text: str, fmt: str = "json") -> dict[str, str]:
    """Run all checks. Returns dict of {location: error_message}."""
    errors = {}
    errors.update(validate_rendered(text, fmt))
    errors.update(validate_references(document))
    return errors

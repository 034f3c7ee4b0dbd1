from wsdl_openapi.openapi.validator import validate_document, validate_references, validate_rendered


def document_with(schema: dict, components: dict | None = None) -> dict:
    return {
        "openapi": "3.0.1",
        "info": {"title": "t", "version": "1.0.0"},
        "paths": {"/Svc/Op": {"get": {"responses": {"200": {
            "description": "Successful response",
            "content": {"application/json": {"schema": schema}},
        }}}}},
        "components": {"schemas": components or {}},
    }


class TestValidateReferences:
    def test_all_resolved(self):
        doc = document_with(
            {"$ref": "#/components/schemas/Item"},
            {"Item": {"type": "object", "properties": {"Self": {"$ref": "#/components/schemas/Item"}}}},
        )
        assert validate_references(doc) == {}

    def test_missing_component(self):
        doc = document_with({"type": "array", "items": {"$ref": "#/components/schemas/Gone"}})
        errors = validate_references(doc)
        location = "#/paths//Svc/Op/get/responses/200/content/application/json/schema/items"
        assert errors == {location: "Missing component #/components/schemas/Gone"}

    def test_unsupported_reference(self):
        errors = validate_references(document_with({"$ref": "other.json#/Thing"}))
        assert len(errors) == 1
        assert "Unsupported reference" in next(iter(errors.values()))

    def test_missing_components_section(self):
        assert validate_references({"paths": {}}) == {}


class TestValidateRendered:
    def test_valid_json(self):
        assert validate_rendered('{"openapi": "3.0.1"}', "json") == {}

    def test_invalid_json(self):
        errors = validate_rendered('{"openapi": ', "json")
        assert "JSONDecodeError" in errors["_document"]

    def test_valid_yaml(self):
        assert validate_rendered("openapi: 3.0.1\n", "yaml") == {}

    def test_invalid_yaml(self):
        assert "_document" in validate_rendered("key: [invalid\n", "yaml")


class TestValidateDocument:
    def test_combines_checks(self):
        doc = document_with({"$ref": "#/components/schemas/Gone"})
        errors = validate_document(doc, "not json", "json")
        assert "_document" in errors
        assert len(errors) == 2

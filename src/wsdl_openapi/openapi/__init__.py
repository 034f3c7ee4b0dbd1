"""OpenAPI models, schema synthesis, operation building and rendering."""

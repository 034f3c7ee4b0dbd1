"""OpenAPI document models produced by the converter.

Only the subset of OpenAPI 3 the converter emits is modeled. Dump with
``model_dump(by_alias=True, exclude_none=True)`` to get the wire form.
"""

from pydantic import BaseModel, ConfigDict, Field

COMPONENT_REF_PREFIX = "#/components/schemas/"


class Schema(BaseModel):
    """A schema object: a primitive, an object, an array, or a $ref."""

    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    format: str | None = None
    properties: dict[str, "Schema"] | None = None
    items: "Schema | None" = None
    ref: str | None = Field(default=None, alias="$ref")

    @classmethod
    def reference(cls, component_name: str) -> "Schema":
        return cls(ref=f"{COMPONENT_REF_PREFIX}{component_name}")

    @classmethod
    def array_of(cls, items: "Schema") -> "Schema":
        return cls(type="array", items=items)


Schema.model_rebuild()


class Parameter(BaseModel):
    """A single operation parameter. The converter only emits query parameters."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(default="query", alias="in")
    required: bool = False
    schema_: Schema = Field(alias="schema")


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: Schema = Field(alias="schema")


class RequestBody(BaseModel):
    content: dict[str, MediaType]

    @classmethod
    def for_schema(cls, schema: Schema) -> "RequestBody":
        return cls(content={"application/json": MediaType(schema_=schema)})


class Response(BaseModel):
    description: str
    content: dict[str, MediaType] | None = None


class OperationObject(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str | None = None
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}


class PathItem(BaseModel):
    get: OperationObject | None = None
    post: OperationObject | None = None


class Info(BaseModel):
    title: str
    version: str


class Components(BaseModel):
    schemas: dict[str, Schema] = {}


class OpenApiDocument(BaseModel):
    openapi: str
    info: Info
    paths: dict[str, PathItem] = {}
    components: Components = Components()

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

"""Pydantic models for the Swagger document and search results."""

from enum import Enum
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class HttpMethod(str, Enum):
    """HTTP methods an operation can be declared under."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: str) -> Optional["HttpMethod"]:
        """Case-insensitive lookup, None for unknown methods."""
        try:
            return cls(value.upper())
        except ValueError:
            return None


class Schema(BaseModel):
    """Recursive type description for a body or response."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: Optional[Union[str, list[str]]] = None
    format: Optional[str] = None
    items: Optional["Schema"] = None
    properties: Optional[dict[str, "Schema"]] = None
    title: Optional[str] = None
    description: Optional[str] = None
    read_only: Optional[bool] = Field(default=None, alias="readOnly")
    required: Optional[Union[list[str], bool]] = None
    ref: Optional[str] = Field(default=None, alias="$ref")

    def to_dict(self, _active: frozenset[int] = frozenset()) -> dict[str, Any]:
        """Wire representation, with a $ref marker where the schema recurses."""
        if id(self) in _active:
            return {"$ref": f"#/recursive/{self.title}" if self.title else "#/recursive"}
        active = _active | {id(self)}

        data: dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, Schema):
                value = value.to_dict(active)
            elif name == "properties":
                value = {key: prop.to_dict(active) for key, prop in value.items()}
            data[field.alias or name] = value
        for key, value in (self.model_extra or {}).items():
            if value is not None:
                data[key] = value
        return data


def dump_schema(schema: Optional[Schema]) -> Optional[dict[str, Any]]:
    return schema.to_dict() if schema is not None else None


class Parameter(BaseModel):
    """Operation parameter."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    location: str = Field(alias="in", description="query, header, path, formData, or body")
    description: Optional[str] = None
    required: Optional[bool] = None
    type: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")

    @field_serializer("schema_")
    def serialize_schema(self, schema: Optional[Schema]) -> Optional[dict[str, Any]]:
        return dump_schema(schema)


class Response(BaseModel):
    """Operation response for a single status code."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    description: str = ""
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    examples: Optional[dict[str, Any]] = None

    @field_serializer("schema_")
    def serialize_schema(self, schema: Optional[Schema]) -> Optional[dict[str, Any]]:
        return dump_schema(schema)


class Operation(BaseModel):
    """A single HTTP method handler at a path."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: Optional[list[str]] = None
    parameters: Optional[list[Parameter]] = None
    responses: Optional[dict[str, Response]] = None
    response_schema_name: Optional[str] = Field(
        default=None,
        alias="x-response-schema",
        description="Explicit name for the response schema",
    )


class PathItem(BaseModel):
    """Operations declared for one path."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    get: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    patch: Optional[Operation] = None
    delete: Optional[Operation] = None
    head: Optional[Operation] = None
    options: Optional[Operation] = None

    def operation(self, method: HttpMethod) -> Optional[Operation]:
        """Get the operation declared for a method."""
        return getattr(self, method.value.lower())

    def operations(self) -> Iterator[tuple[HttpMethod, Operation]]:
        """Iterate declared operations in fixed method order."""
        for method in HttpMethod:
            operation = self.operation(method)
            if operation is not None:
                yield method, operation


class Tag(BaseModel):
    """Tag definition."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    description: Optional[str] = None
    trait_tag: Optional[bool] = Field(default=None, alias="x-traitTag")


class TagGroup(BaseModel):
    """Named group of tags, used for display."""

    name: str
    tags: list[str] = Field(default_factory=list)


class SwaggerInfo(BaseModel):
    """Document metadata."""

    model_config = ConfigDict(extra="allow")

    title: str = ""
    description: str = ""
    version: str = ""


class SwaggerSpec(BaseModel):
    """Root of a Swagger 2.0 (or normalised OpenAPI 3) document."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    swagger: Optional[str] = None
    openapi: Optional[str] = None
    info: SwaggerInfo = Field(default_factory=SwaggerInfo)
    host: Optional[str] = None
    base_path: Optional[str] = Field(default=None, alias="basePath")
    schemes: list[str] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    tag_groups: list[TagGroup] = Field(default_factory=list, alias="x-tagGroups")
    paths: dict[str, PathItem] = Field(default_factory=dict)

    def find_tag(self, name: str) -> Optional[Tag]:
        """Get the first tag definition with this name."""
        for tag in self.tags:
            if tag.name == name:
                return tag
        return None


# Search results. Serialised with camelCase aliases and absent fields omitted.


class ResultModel(BaseModel):
    """Base for search results."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation."""
        return self.model_dump(by_alias=True, exclude_none=True)


class EndpointResult(ResultModel):
    """Lightweight endpoint summary."""

    path: str
    method: str
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: Optional[list[str]] = None
    parameters: Optional[list[Parameter]] = None

    @classmethod
    def from_operation(cls, path: str, method: HttpMethod, operation: Operation) -> "EndpointResult":
        return cls(
            path=path,
            method=method.value,
            summary=operation.summary,
            description=operation.description,
            operation_id=operation.operation_id,
            tags=operation.tags,
            parameters=operation.parameters,
        )


class EndpointDetails(EndpointResult):
    """Full endpoint including responses."""

    responses: Optional[dict[str, Response]] = None


class TagSearchResult(ResultModel):
    """Endpoints grouped under one tag."""

    tag_name: str = Field(alias="tagName")
    description: Optional[str] = None
    endpoints: list[EndpointResult] = Field(default_factory=list)


class SchemaResult(ResultModel):
    """One occurrence of a response schema."""

    schema_name: Optional[str] = Field(default=None, alias="schemaName")
    path: Optional[str] = None
    method: Optional[str] = None
    schema_: Schema = Field(alias="schema")

    @field_serializer("schema_")
    def serialize_schema(self, schema: Optional[Schema]) -> Optional[dict[str, Any]]:
        return dump_schema(schema)


class FulltextSearchResult(ResultModel):
    """Ranked full-text match."""

    path: str
    method: str
    summary: Optional[str] = None
    description: Optional[str] = None
    score: float
    matched_fields: list[str] = Field(default_factory=list, alias="matchedFields")


class EndpointListItem(ResultModel):
    """Row of the endpoint listing."""

    path: str
    method: str
    summary: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: Optional[list[str]] = None


class TagInfo(ResultModel):
    name: str
    description: Optional[str] = None


class TagGroupInfo(ResultModel):
    name: str
    tags: list[TagInfo] = Field(default_factory=list)


class TagListing(ResultModel):
    """All tags, plus tag groups with resolved descriptions."""

    tag_groups: list[TagGroupInfo] = Field(default_factory=list, alias="tagGroups")
    all_tags: list[TagInfo] = Field(default_factory=list, alias="allTags")

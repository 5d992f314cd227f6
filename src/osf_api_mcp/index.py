"""Search indexes built once from a Swagger document."""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import EndpointResult, HttpMethod, Operation, Schema, SchemaResult, SwaggerSpec
from .parsers import SwaggerParser

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> list[str]:
    """Tokenize text for indexing/searching.

    Lowercases, turns every character other than [a-z0-9] and whitespace into a
    space, splits on whitespace and drops words of two characters or less.
    """
    words = _NON_WORD.sub(" ", text.lower()).split()
    return [w for w in words if len(w) > 2]


@dataclass(frozen=True)
class OperationLocation:
    path: str
    method: HttpMethod


@dataclass(frozen=True)
class FulltextDocument:
    """Indexed text for one operation."""

    path: str
    method: HttpMethod
    content: str
    summary: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class EndpointIndex:
    paths: dict[str, dict[HttpMethod, Operation]]
    tags: dict[str, list[EndpointResult]]
    operation_ids: dict[str, OperationLocation]

    def get_operation(self, path: str, method: HttpMethod) -> Optional[Operation]:
        return self.paths.get(path, {}).get(method)


@dataclass(frozen=True)
class SchemaIndex:
    by_name: dict[str, list[SchemaResult]]
    by_property: dict[str, list[SchemaResult]]


@dataclass(frozen=True)
class FulltextIndex:
    words: dict[str, frozenset[str]]
    documents: dict[str, FulltextDocument]


@dataclass(frozen=True)
class ApiIndex:
    """Fully built indexes for one specification.

    Only build_index() creates instances, so holding an ApiIndex means every
    index is populated. Nothing mutates it after the build.
    """

    spec: SwaggerSpec
    endpoints: EndpointIndex
    schemas: SchemaIndex
    fulltext: FulltextIndex

    @property
    def endpoint_count(self) -> int:
        return len(self.fulltext.documents)


def document_id(path: str, method: HttpMethod) -> str:
    """Unique fulltext document id for an operation."""
    return f"{method.value}:{path}"


def response_schema_name(operation: Operation, schema: Schema) -> Optional[str]:
    """Name for a response schema: explicit override, else the schema title."""
    return operation.response_schema_name or schema.title


class _IndexBuilder:
    """Single pass over the specification populating all three indexes."""

    def __init__(self, spec: SwaggerSpec):
        self.spec = spec
        self.paths: dict[str, dict[HttpMethod, Operation]] = {}
        self.tags: dict[str, list[EndpointResult]] = defaultdict(list)
        self.operation_ids: dict[str, OperationLocation] = {}
        self.by_name: dict[str, list[SchemaResult]] = defaultdict(list)
        self.by_property: dict[str, list[SchemaResult]] = defaultdict(list)
        self.words: dict[str, set[str]] = defaultdict(set)
        self.documents: dict[str, FulltextDocument] = {}

    def build(self) -> ApiIndex:
        for path, path_item in self.spec.paths.items():
            methods = {}
            for method, operation in path_item.operations():
                methods[method] = operation
                self._add_endpoint(path, method, operation)
                self._add_schemas(path, method, operation)
                self._add_document(path, method, operation)
            if methods:
                self.paths[path] = methods

        return ApiIndex(
            spec=self.spec,
            endpoints=EndpointIndex(
                paths=self.paths,
                tags=dict(self.tags),
                operation_ids=self.operation_ids,
            ),
            schemas=SchemaIndex(
                by_name=dict(self.by_name),
                by_property=dict(self.by_property),
            ),
            fulltext=FulltextIndex(
                words={token: frozenset(ids) for token, ids in self.words.items()},
                documents=self.documents,
            ),
        )

    def _add_endpoint(self, path: str, method: HttpMethod, operation: Operation) -> None:
        # An operation with several tags is listed under each of them
        for tag in operation.tags or []:
            self.tags[tag].append(EndpointResult.from_operation(path, method, operation))

        if operation.operation_id:
            # Last occurrence wins for repeated operationIds
            self.operation_ids[operation.operation_id] = OperationLocation(path, method)

    def _add_schemas(self, path: str, method: HttpMethod, operation: Operation) -> None:
        for response in (operation.responses or {}).values():
            schema = response.schema_
            if schema is None:
                continue

            schema_name = response_schema_name(operation, schema)
            occurrence = SchemaResult(
                schema_name=schema_name,
                path=path,
                method=method.value,
                schema_=schema,
            )
            if schema_name:
                self.by_name[schema_name].append(occurrence)

            self._add_properties(schema, occurrence)
            # Arrays are unwrapped one level only, which keeps self-referencing
            # item schemas from recursing
            if schema.items is not None:
                self._add_properties(schema.items, occurrence)

    def _add_properties(self, schema: Schema, occurrence: SchemaResult) -> None:
        for prop_name in schema.properties or {}:
            self.by_property[prop_name].append(occurrence)

    def _add_document(self, path: str, method: HttpMethod, operation: Operation) -> None:
        parts = []
        if operation.summary:
            parts.append(operation.summary)
        if operation.description:
            parts.append(operation.description)
        for param in operation.parameters or []:
            if param.description:
                parts.append(param.description)
            parts.append(param.name)

        doc_id = document_id(path, method)
        content = " ".join(parts)
        self.documents[doc_id] = FulltextDocument(
            path=path,
            method=method,
            content=content,
            summary=operation.summary,
            description=operation.description,
        )

        for token in tokenize(content):
            self.words[token].add(doc_id)


def build_index(spec: SwaggerSpec) -> ApiIndex:
    """Build all search indexes from a parsed specification.

    Args:
        spec: Parsed Swagger document

    Returns:
        ApiIndex with endpoint, schema and fulltext indexes populated
    """
    index = _IndexBuilder(spec).build()
    logger.info(
        "Indexed %d endpoints across %d paths, %d tags, %d schemas, %d tokens",
        index.endpoint_count,
        len(index.endpoints.paths),
        len(index.endpoints.tags),
        len(index.schemas.by_name),
        len(index.fulltext.words),
    )
    return index


def load_index(spec_path: Path) -> ApiIndex:
    """Parse a Swagger file and build its indexes.

    Raises:
        SpecLoadError: If the file cannot be read or parsed
    """
    logger.info("Loading specification from %s", spec_path)
    spec = SwaggerParser.parse_file(spec_path)
    return build_index(spec)

"""Query resolvers over a built ApiIndex."""

import math
from collections import defaultdict
from typing import Optional

from .errors import EndpointNotFoundError
from .index import ApiIndex, response_schema_name, tokenize
from .models import (
    EndpointDetails,
    EndpointListItem,
    EndpointResult,
    FulltextSearchResult,
    HttpMethod,
    SchemaResult,
    TagGroupInfo,
    TagInfo,
    TagListing,
    TagSearchResult,
)


def search_endpoints(
    index: ApiIndex,
    path: Optional[str] = None,
    method: Optional[str] = None,
    operation_id: Optional[str] = None,
    tag: Optional[str] = None,
    limit: int = 10,
) -> list[EndpointResult]:
    """Search for endpoints by path, method, tag, or operationId.

    When operation_id is given it is the only criterion used; path, method and
    tag are ignored.

    Args:
        index: Built indexes
        path: Path substring (case-insensitive)
        method: HTTP method (case-insensitive)
        operation_id: operationId substring (case-insensitive)
        tag: Tag substring (case-insensitive)
        limit: Maximum number of results

    Returns:
        Matching endpoints in document order
    """
    endpoints = index.endpoints
    results: list[EndpointResult] = []

    if operation_id:
        needle = operation_id.lower()
        for op_id, location in endpoints.operation_ids.items():
            if needle not in op_id.lower():
                continue
            operation = endpoints.get_operation(location.path, location.method)
            if operation is not None:
                results.append(EndpointResult.from_operation(location.path, location.method, operation))
    else:
        path_filter = path.lower() if path else None
        method_filter = method.upper() if method else None
        tag_filter = tag.lower() if tag else None

        for path_str, methods in endpoints.paths.items():
            if path_filter and path_filter not in path_str.lower():
                continue
            for method_key, operation in methods.items():
                if method_filter and method_key.value != method_filter:
                    continue
                if tag_filter and not any(tag_filter in t.lower() for t in operation.tags or []):
                    continue
                results.append(EndpointResult.from_operation(path_str, method_key, operation))

    return results[:limit]


def search_by_tag(
    index: ApiIndex,
    tag: str,
    include_description: bool = False,
) -> list[TagSearchResult]:
    """Get endpoints grouped by every tag whose name contains `tag`."""
    needle = tag.lower()
    results = []

    for tag_name, tag_endpoints in index.endpoints.tags.items():
        if needle not in tag_name.lower():
            continue

        description = None
        if include_description:
            tag_info = index.spec.find_tag(tag_name)
            description = tag_info.description if tag_info else None

        results.append(TagSearchResult(
            tag_name=tag_name,
            description=description,
            endpoints=list(tag_endpoints),
        ))

    return results


def search_schemas(
    index: ApiIndex,
    schema_name: Optional[str] = None,
    property: Optional[str] = None,
    path: Optional[str] = None,
    method: Optional[str] = None,
) -> list[SchemaResult]:
    """Search response schemas.

    The first criterion given wins: schema name, then property name, then the
    exact path and method pair. With none of them the result is empty.

    Returns:
        Schema occurrences, unique per (path, method, schema name)
    """
    results: list[SchemaResult] = []

    if schema_name:
        needle = schema_name.lower()
        for name, occurrences in index.schemas.by_name.items():
            if needle in name.lower():
                results.extend(occurrences)
    elif property:
        needle = property.lower()
        for prop_name, occurrences in index.schemas.by_property.items():
            if needle in prop_name.lower():
                results.extend(occurrences)
    elif path and method:
        http_method = HttpMethod.parse(method)
        operation = index.endpoints.get_operation(path, http_method) if http_method else None
        if operation is not None:
            for response in (operation.responses or {}).values():
                if response.schema_ is None:
                    continue
                results.append(SchemaResult(
                    schema_name=response_schema_name(operation, response.schema_),
                    path=path,
                    method=http_method.value,
                    schema_=response.schema_,
                ))

    # A missing schema name is part of the key, so unnamed schemas on
    # different endpoints stay distinct
    unique: dict[tuple[Optional[str], Optional[str], Optional[str]], SchemaResult] = {}
    for result in results:
        key = (result.path, result.method, result.schema_name)
        if key not in unique:
            unique[key] = result

    return list(unique.values())


def fulltext_search(index: ApiIndex, query: str, limit: int = 10) -> list[FulltextSearchResult]:
    """Ranked keyword search over summaries, descriptions and parameters.

    Each query token found in the index adds (1 / number of query tokens) *
    ln(documents / documents containing the token) to every document that
    contains it.

    Args:
        index: Built indexes
        query: Free-text query
        limit: Maximum number of results

    Returns:
        Results sorted by score, highest first
    """
    tokens = tokenize(query)
    if not tokens:
        return []

    fulltext = index.fulltext
    total_documents = len(fulltext.documents)
    tf = 1 / len(tokens)

    scores: dict[str, float] = defaultdict(float)
    matched_fields: dict[str, dict[str, None]] = defaultdict(dict)

    for token in tokens:
        doc_ids = fulltext.words.get(token)
        if not doc_ids:
            continue

        idf = math.log(total_documents / len(doc_ids))
        for doc_id in doc_ids:
            scores[doc_id] += tf * idf

            doc = fulltext.documents[doc_id]
            if doc.summary and token in doc.summary.lower():
                matched_fields[doc_id]["summary"] = None
            if doc.description and token in doc.description.lower():
                matched_fields[doc_id]["description"] = None

    ranked = sorted(scores.items(), key=lambda x: -x[1])[:limit]

    results = []
    for doc_id, score in ranked:
        doc = fulltext.documents[doc_id]
        results.append(FulltextSearchResult(
            path=doc.path,
            method=doc.method.value,
            summary=doc.summary,
            description=doc.description,
            score=score,
            matched_fields=list(matched_fields[doc_id]),
        ))

    return results


def list_endpoints(index: ApiIndex, limit: int = 50, offset: int = 0) -> list[EndpointListItem]:
    """List every endpoint sorted by path, then method."""
    items = [
        EndpointListItem(
            path=path,
            method=method.value,
            summary=operation.summary,
            operation_id=operation.operation_id,
            tags=operation.tags,
        )
        for path, methods in index.endpoints.paths.items()
        for method, operation in methods.items()
    ]
    items.sort(key=lambda item: (item.path, item.method))
    return items[offset:offset + limit]


def get_endpoint_details(index: ApiIndex, path: str, method: str) -> EndpointDetails:
    """Get the full operation for an exact path and method.

    Raises:
        EndpointNotFoundError: If the path has no operation for the method
    """
    http_method = HttpMethod.parse(method)
    operation = index.endpoints.get_operation(path, http_method) if http_method else None
    if operation is None:
        raise EndpointNotFoundError(path, method)

    return EndpointDetails(
        path=path,
        method=http_method.value,
        summary=operation.summary,
        description=operation.description,
        operation_id=operation.operation_id,
        tags=operation.tags,
        parameters=operation.parameters,
        responses=operation.responses,
    )


def list_tags(index: ApiIndex) -> TagListing:
    """Get all tag definitions and tag groups."""
    spec = index.spec

    def tag_info(name: str) -> TagInfo:
        tag = spec.find_tag(name)
        return TagInfo(name=name, description=tag.description if tag else None)

    return TagListing(
        tag_groups=[
            TagGroupInfo(name=group.name, tags=[tag_info(name) for name in group.tags])
            for group in spec.tag_groups
        ],
        all_tags=[TagInfo(name=tag.name, description=tag.description) for tag in spec.tags],
    )

"""MCP server for the OSF API documentation."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from mcp.server.fastmcp import Context, FastMCP

from . import search
from .config import configure_logging, get_settings
from .errors import MissingParameterError, NotInitializedError
from .index import ApiIndex, load_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Load the specification and build the search indexes at startup."""
    settings = get_settings()
    index = load_index(settings.resolved_spec_path())
    logger.info("OSF API MCP Server initialized with %d endpoints", index.endpoint_count)
    yield {"index": index}


# Create the MCP server
mcp = FastMCP(
    "OSF API Documentation",
    lifespan=lifespan,
)


def get_index(ctx: Context) -> ApiIndex:
    """Get the search indexes from context."""
    index = ctx.request_context.lifespan_context.get("index")
    if index is None:
        raise NotInitializedError()
    return index


@mcp.tool()
async def search_endpoints(
    ctx: Context,
    path: Optional[str] = None,
    method: Optional[str] = None,
    operationId: Optional[str] = None,
    tag: Optional[str] = None,
    limit: int = 10,
) -> list[dict]:
    """Search for API endpoints by path, HTTP method, operationId, or tag.

    Args:
        path: Search for endpoints containing this path string (e.g., "/files", "/nodes")
        method: Filter by HTTP method (GET, POST, PATCH, DELETE, etc.)
        operationId: Search by operation ID (partial match). Other filters are ignored when set.
        tag: Filter by tag name (partial match)
        limit: Maximum number of results (default: 10)

    Returns a list of matching endpoints with their details.
    """
    index = get_index(ctx)
    results = search.search_endpoints(index, path, method, operationId, tag, limit)
    return [r.to_dict() for r in results]


@mcp.tool()
async def search_by_tag(
    ctx: Context,
    tag: str,
    includeDescription: bool = False,
) -> list[dict]:
    """Search for endpoints grouped by tags/categories.

    Args:
        tag: Tag name to search for (partial match)
        includeDescription: Include the tag description in results

    Returns all endpoints belonging to matching tags.
    """
    if not tag:
        raise MissingParameterError("tag")
    index = get_index(ctx)
    results = search.search_by_tag(index, tag, includeDescription)
    return [r.to_dict() for r in results]


@mcp.tool()
async def search_schemas(
    ctx: Context,
    schemaName: Optional[str] = None,
    property: Optional[str] = None,
    path: Optional[str] = None,
    method: Optional[str] = None,
) -> list[dict]:
    """Search for response schemas and data models.

    Args:
        schemaName: Search by schema/model name (e.g., "File", "Node", "User")
        property: Search schemas containing this property name
        path: Get schema for a specific endpoint path
        method: HTTP method (required if path is specified)

    Criteria are tried in the order above; the first one given is used.
    """
    index = get_index(ctx)
    results = search.search_schemas(index, schemaName, property, path, method)
    return [r.to_dict() for r in results]


@mcp.tool()
async def fulltext_search(
    ctx: Context,
    query: str,
    limit: int = 10,
) -> list[dict]:
    """Full-text search across endpoint summaries, descriptions, and parameters.

    Args:
        query: Search query (e.g., "list files", "upload")
        limit: Maximum number of results (default: 10)

    Results are ranked by relevance.
    """
    if not query:
        raise MissingParameterError("query")
    index = get_index(ctx)
    results = search.fulltext_search(index, query, limit)
    return [r.to_dict() for r in results]


@mcp.tool()
async def get_endpoint_details(
    ctx: Context,
    path: str,
    method: str,
) -> dict:
    """Get complete details for a specific API endpoint.

    Args:
        path: The exact endpoint path (e.g., "/files/{file_id}/")
        method: The HTTP method (GET, POST, etc.)

    Returns parameters, responses and schemas of the endpoint.
    """
    if not path or not method:
        raise MissingParameterError("path", "method")
    index = get_index(ctx)
    return search.get_endpoint_details(index, path, method).to_dict()


@mcp.tool()
async def list_tags(ctx: Context) -> dict:
    """List all tags/categories with their descriptions, grouped by tag groups."""
    index = get_index(ctx)
    return search.list_tags(index).to_dict()


@mcp.tool()
async def list_endpoints(
    ctx: Context,
    limit: int = 50,
    offset: int = 0,
) -> list[dict]:
    """List all endpoints sorted by path and method.

    Args:
        limit: Maximum number of results (default: 50)
        offset: Number of endpoints to skip (default: 0)
    """
    index = get_index(ctx)
    return [item.to_dict() for item in search.list_endpoints(index, limit, offset)]


def run_server():
    """Run the MCP server."""
    configure_logging(get_settings().log_level)
    mcp.run()


if __name__ == "__main__":
    run_server()

"""Exceptions raised by the OSF API MCP server."""

from typing import Any, Optional


class OsfApiMcpError(Exception):
    """Base error with a user-facing message and optional details."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class NotInitializedError(OsfApiMcpError):
    """The specification or its indexes were accessed before loading."""

    def __init__(self, what: str = "Indexes"):
        super().__init__(f"{what} not built. Load the specification first.")


class EndpointNotFoundError(OsfApiMcpError):
    """No operation exists for the requested path and method."""

    def __init__(self, path: str, method: str):
        self.path = path
        self.method = method.upper()
        super().__init__(f"Endpoint not found: {self.method} {path}")


class MissingParameterError(OsfApiMcpError, ValueError):
    """A required tool parameter is missing or empty."""

    def __init__(self, *names: str):
        self.names = names
        if len(names) == 1:
            message = f"{names[0]} parameter is required"
        else:
            message = f"{' and '.join(names)} parameters are required"
        super().__init__(message)


class SpecLoadError(OsfApiMcpError):
    """The specification could not be read or parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        super().__init__(f"Failed to load specification from {source}", {"reason": reason})

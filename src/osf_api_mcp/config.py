"""Configuration for the OSF API MCP server."""

import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Path to the Swagger document, relative paths resolve against the project root
    spec_path: Path = Path("schema/osf_api/swagger.json")

    # Remote source for `osf-api-mcp update`
    spec_url: Optional[str] = None

    log_level: str = "INFO"

    # Seconds
    http_timeout: float = 30.0

    model_config = {"env_prefix": "OSF_API_MCP_"}

    def resolved_spec_path(self) -> Path:
        """Absolute path to the Swagger document."""
        if self.spec_path.is_absolute():
            return self.spec_path
        return get_project_root() / self.spec_path


def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings()


def get_project_root() -> Path:
    """Get the project root directory."""
    # Start from the current file and go up to find pyproject.toml
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback to current working directory
    return Path.cwd()


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout carries the MCP stdio protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

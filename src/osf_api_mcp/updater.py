"""Specification updater - downloads the Swagger document."""

import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class UpdateResult:
    """Result of downloading the specification."""

    def __init__(
        self,
        url: str,
        success: bool,
        updated: bool = False,
        error: Optional[str] = None,
    ):
        self.url = url
        self.success = success
        self.updated = updated
        self.error = error

    def __repr__(self) -> str:
        status = "updated" if self.updated else ("ok" if self.success else f"error: {self.error}")
        return f"UpdateResult({self.url}: {status})"


def get_file_hash(path: Path) -> Optional[str]:
    """Get MD5 hash of a file, or None if it doesn't exist."""
    if not path.exists():
        return None
    return hashlib.md5(path.read_bytes()).hexdigest()


async def fetch_spec(
    client: httpx.AsyncClient,
    url: str,
    output_path: Path,
    dry_run: bool = False,
) -> UpdateResult:
    """Download the specification and write it if it changed.

    Args:
        client: HTTP client to use
        url: Location of the Swagger document
        output_path: File to write
        dry_run: If True, don't write the file, just check

    Returns:
        UpdateResult with status
    """
    try:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
        content = response.content
    except httpx.HTTPStatusError as e:
        logger.warning("Fetching %s failed with HTTP %d", url, e.response.status_code)
        return UpdateResult(url, success=False, error=f"HTTP {e.response.status_code}")
    except httpx.RequestError as e:
        logger.warning("Fetching %s failed: %s", url, e)
        return UpdateResult(url, success=False, error=str(e))

    # Check if content changed
    if get_file_hash(output_path) == hashlib.md5(content).hexdigest():
        return UpdateResult(url, success=True, updated=False)

    if dry_run:
        return UpdateResult(url, success=True, updated=True)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(content)
    except OSError as e:
        return UpdateResult(url, success=False, error=str(e))

    logger.info("Wrote %d bytes to %s", len(content), output_path)
    return UpdateResult(url, success=True, updated=True)


async def update_spec(
    url: str,
    output_path: Path,
    dry_run: bool = False,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpdateResult:
    """Update the local specification from its online source."""
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await fetch_spec(client, url, output_path, dry_run)


def update_spec_sync(
    url: str,
    output_path: Path,
    dry_run: bool = False,
    timeout: float = 30.0,
) -> UpdateResult:
    """Synchronous wrapper for update_spec."""
    return asyncio.run(update_spec(url, output_path, dry_run, timeout))

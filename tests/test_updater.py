"""Tests for the specification updater."""

import asyncio
import hashlib

import httpx

from osf_api_mcp.updater import get_file_hash, update_spec

SPEC_URL = "https://api.example.org/swagger.json"
SPEC_BODY = b'{"swagger": "2.0", "paths": {}}'


def run_update(handler, output_path, dry_run=False):
    transport = httpx.MockTransport(handler)
    return asyncio.run(update_spec(SPEC_URL, output_path, dry_run=dry_run, transport=transport))


def serve_spec(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=SPEC_BODY)


class TestUpdateSpec:
    """Tests for update_spec."""

    def test_writes_new_file(self, tmp_path):
        output = tmp_path / "schema" / "swagger.json"

        result = run_update(serve_spec, output)

        assert result.success
        assert result.updated
        assert output.read_bytes() == SPEC_BODY

    def test_unchanged_file_not_rewritten(self, tmp_path):
        output = tmp_path / "swagger.json"
        output.write_bytes(SPEC_BODY)

        result = run_update(serve_spec, output)

        assert result.success
        assert not result.updated

    def test_dry_run_does_not_write(self, tmp_path):
        output = tmp_path / "swagger.json"

        result = run_update(serve_spec, output, dry_run=True)

        assert result.updated
        assert not output.exists()

    def test_http_error(self, tmp_path):
        result = run_update(lambda request: httpx.Response(404), tmp_path / "swagger.json")

        assert not result.success
        assert result.error == "HTTP 404"

    def test_connection_error(self, tmp_path):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = run_update(fail, tmp_path / "swagger.json")

        assert not result.success
        assert "connection refused" in result.error
        assert "error" in repr(result)


def test_get_file_hash(tmp_path):
    path = tmp_path / "file.json"
    assert get_file_hash(path) is None

    path.write_bytes(b"content")
    assert get_file_hash(path) == hashlib.md5(b"content").hexdigest()

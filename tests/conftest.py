"""Shared fixtures."""

import json
from pathlib import Path

import pytest

from osf_api_mcp.index import ApiIndex, build_index
from osf_api_mcp.parsers import SwaggerParser

FIXTURES = Path(__file__).parent / "fixtures"
MINIMAL_SPEC = FIXTURES / "swagger-minimal.json"
EDGE_CASES_SPEC = FIXTURES / "swagger-edge-cases.json"


@pytest.fixture
def minimal_path() -> Path:
    return MINIMAL_SPEC


@pytest.fixture
def minimal_raw() -> dict:
    return json.loads(MINIMAL_SPEC.read_text(encoding="utf-8"))


@pytest.fixture
def minimal_index() -> ApiIndex:
    return build_index(SwaggerParser.parse_file(MINIMAL_SPEC))


@pytest.fixture
def edge_index() -> ApiIndex:
    return build_index(SwaggerParser.parse_file(EDGE_CASES_SPEC))

"""Tests for the tokenizer and index builder."""

import dataclasses

import pytest

from osf_api_mcp.errors import SpecLoadError
from osf_api_mcp.index import build_index, load_index, tokenize
from osf_api_mcp.models import HttpMethod, Operation, PathItem, Response, Schema, SwaggerSpec


class TestTokenize:
    """Tests for tokenize."""

    def test_splits_on_punctuation(self):
        assert tokenize("file-upload") == ["file", "upload"]

    def test_drops_short_words(self):
        assert tokenize("id") == []
        assert tokenize("a is to") == []

    def test_keeps_three_letter_words(self):
        assert tokenize("api") == ["api"]

    def test_lowercases(self):
        assert tokenize("FiLeS List") == ["files", "list"]

    def test_empty_and_whitespace(self):
        assert tokenize("") == []
        assert tokenize("   \t\n") == []

    def test_underscores_split(self):
        """Underscores are not word characters."""
        assert tokenize("full_name") == ["full", "name"]


class TestEndpointIndex:
    """Tests for the endpoint index."""

    def test_paths(self, minimal_index):
        paths = minimal_index.endpoints.paths

        assert "/files/" in paths
        assert "/files/{file_id}/" in paths
        assert set(paths["/files/{file_id}/"]) == {HttpMethod.GET, HttpMethod.PATCH, HttpMethod.DELETE}

    def test_tags(self, minimal_index):
        tags = minimal_index.endpoints.tags

        assert set(tags) == {"Files", "FileVersions", "Nodes", "Users"}
        assert len(tags["Files"]) == 5
        assert [e.path for e in tags["FileVersions"]] == ["/files/{file_id}/versions/"]

    def test_operation_ids(self, minimal_index):
        location = minimal_index.endpoints.operation_ids["files_list"]

        assert location.path == "/files/"
        assert location.method == HttpMethod.GET

    def test_duplicate_operation_id_last_wins(self, edge_index):
        location = edge_index.endpoints.operation_ids["dup_op"]
        assert location.path == "/duplicate-op-2/"

    def test_multi_tag_operation_listed_under_each_tag(self, edge_index):
        tags = edge_index.endpoints.tags

        assert [e.path for e in tags["Alpha"]] == ["/file-upload/", "/items/"]
        assert [e.path for e in tags["Beta"]] == ["/items/"]


class TestSchemaIndex:
    """Tests for the schema index."""

    def test_by_name(self, minimal_index):
        by_name = minimal_index.schemas.by_name

        assert {"FileList", "File", "FileVersionList", "NodeList", "User"} <= set(by_name)
        assert len(by_name["File"]) == 2

    def test_name_override(self, edge_index):
        by_name = edge_index.schemas.by_name

        assert "OverrideName" in by_name
        assert "IgnoredTitle" not in by_name

    def test_by_property(self, minimal_index):
        by_property = minimal_index.schemas.by_property

        assert "id" in by_property
        assert "name" in by_property
        assert "username" in by_property

    def test_array_items_unwrapped(self, edge_index):
        assert "itemProp" in edge_index.schemas.by_property

    def test_nested_properties_not_indexed(self, edge_index):
        by_property = edge_index.schemas.by_property

        assert "level1" in by_property
        assert "level2" not in by_property
        assert "level3" not in by_property

    def test_unnamed_schemas_indexed_by_property(self, edge_index):
        occurrences = edge_index.schemas.by_property["data"]

        assert [o.path for o in occurrences] == ["/endpoint-no-schema-name/", "/another-no-schema-name/"]
        assert all(o.schema_name is None for o in occurrences)

    def test_occurrences_point_at_endpoints(self, minimal_index):
        endpoints = minimal_index.endpoints
        for occurrences in minimal_index.schemas.by_property.values():
            for occurrence in occurrences:
                method = HttpMethod(occurrence.method)
                assert endpoints.get_operation(occurrence.path, method) is not None

    def test_self_referencing_schema(self):
        """Test that self-referencing schemas index in bounded time."""
        node = Schema(type="object", title="Tree", properties={"value": Schema(type="string")})
        node.properties["children"] = node
        node.items = node

        spec = SwaggerSpec(paths={
            "/tree": PathItem(get=Operation(responses={"200": Response(schema_=node)})),
        })

        index = build_index(spec)

        assert set(index.schemas.by_property) == {"value", "children"}
        assert len(index.schemas.by_property["children"]) == 2
        assert index.schemas.by_name["Tree"][0].schema_ is node


class TestFulltextIndex:
    """Tests for the fulltext index."""

    def test_document_per_operation(self, minimal_index):
        documents = minimal_index.fulltext.documents

        assert len(documents) == 9
        assert "GET:/files/" in documents
        assert "DELETE:/files/{file_id}/" in documents

    def test_document_content(self, minimal_index):
        doc = minimal_index.fulltext.documents["GET:/files/{file_id}/"]

        assert doc.content == (
            "Retrieve a file Returns details of a file "
            "The unique identifier of the file file_id"
        )
        assert doc.summary == "Retrieve a file"

    def test_every_word_has_documents(self, minimal_index):
        fulltext = minimal_index.fulltext
        for token, doc_ids in fulltext.words.items():
            assert doc_ids
            assert all(doc_id in fulltext.documents for doc_id in doc_ids)

    def test_parameter_names_indexed(self, minimal_index):
        assert "GET:/files/" in minimal_index.fulltext.words["page"]


class TestApiIndex:
    """Tests for the engine handle."""

    def test_frozen(self, minimal_index):
        with pytest.raises(dataclasses.FrozenInstanceError):
            minimal_index.spec = None

    def test_load_index(self, minimal_path):
        index = load_index(minimal_path)
        assert index.endpoint_count == 9

    def test_load_index_missing_file(self, tmp_path):
        with pytest.raises(SpecLoadError):
            load_index(tmp_path / "swagger.json")

    def test_empty_spec(self):
        index = build_index(SwaggerSpec())

        assert index.endpoints.paths == {}
        assert index.fulltext.documents == {}

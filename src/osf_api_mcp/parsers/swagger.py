"""Swagger/OpenAPI document parser."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import SpecLoadError
from ..models import HttpMethod, SwaggerSpec

logger = logging.getLogger(__name__)


class SwaggerParser:
    """Parser turning a raw Swagger document into a SwaggerSpec."""

    # Preferred media types when an OpenAPI 3 response carries `content`
    CONTENT_TYPES = ["application/json", "*/*"]

    def parse(self, spec: dict[str, Any], source: str = "<dict>") -> SwaggerSpec:
        """Parse a Swagger document.

        Args:
            spec: Decoded Swagger/OpenAPI document
            source: Name of the source, used in error messages

        Returns:
            Validated SwaggerSpec
        """
        if not isinstance(spec, dict):
            raise SpecLoadError(source, "document root is not an object")

        # YAML anchors can make the decoded document self-referencing
        spec = self._break_cycles(spec, frozenset())

        paths = spec.get("paths") or {}
        document = spec

        # Anything that isn't a mapping is left for validation to report
        if isinstance(paths, dict):
            normalized_paths = {}
            for path, path_item in paths.items():
                if isinstance(path_item, dict):
                    path_item = dict(path_item)
                    for method in HttpMethod:
                        key = method.value.lower()
                        if isinstance(path_item.get(key), dict):
                            path_item[key] = self._normalize_operation(path_item[key])
                normalized_paths[path] = path_item
            document = {**spec, "paths": normalized_paths}

        try:
            return SwaggerSpec.model_validate(document)
        except ValidationError as e:
            raise SpecLoadError(source, str(e)) from e

    def _break_cycles(self, value: Any, active: frozenset[int]) -> Any:
        """Copy the document, replacing a mapping that contains itself with a $ref marker."""
        if isinstance(value, dict):
            if id(value) in active:
                title = value.get("title")
                return {"$ref": f"#/recursive/{title}" if isinstance(title, str) else "#/recursive"}
            active = active | {id(value)}
            return {key: self._break_cycles(item, active) for key, item in value.items()}
        if isinstance(value, list):
            if id(value) in active:
                return []
            active = active | {id(value)}
            return [self._break_cycles(item, active) for item in value]
        return value

    def _normalize_operation(self, operation: dict[str, Any]) -> dict[str, Any]:
        """Drop unresolved parameter refs and lift OpenAPI 3 response schemas."""
        operation = dict(operation)

        parameters = operation.get("parameters")
        if isinstance(parameters, list):
            # $ref parameters are not resolved
            operation["parameters"] = [
                param for param in parameters
                if not (isinstance(param, dict) and "$ref" in param)
            ]

        responses = operation.get("responses")
        if isinstance(responses, dict):
            operation["responses"] = {
                str(code): self._normalize_response(response)
                for code, response in responses.items()
            }

        return operation

    def _normalize_response(self, response: Any) -> Any:
        """Use the first media type schema when the response has no `schema`."""
        if not isinstance(response, dict) or "schema" in response:
            return response

        content = response.get("content")
        if not isinstance(content, dict) or not content:
            return response

        media = None
        for content_type in self.CONTENT_TYPES:
            if content_type in content:
                media = content[content_type]
                break
        if media is None:
            media = next(iter(content.values()))

        if isinstance(media, dict) and "schema" in media:
            return {**response, "schema": media["schema"]}
        return response

    @classmethod
    def parse_file(cls, file_path: Path) -> SwaggerSpec:
        """Parse a Swagger file.

        Args:
            file_path: Path to the document (.json, .yaml, or .yml)

        Returns:
            Validated SwaggerSpec
        """
        source = str(file_path)

        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise SpecLoadError(source, str(e)) from e

        try:
            # Parse based on file extension
            if file_path.suffix.lower() in [".yaml", ".yml"]:
                spec = yaml.safe_load(content)
            else:
                spec = json.loads(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SpecLoadError(source, str(e)) from e

        logger.debug("Parsed %s (%d bytes)", source, len(content))
        return cls().parse(spec, source=source)

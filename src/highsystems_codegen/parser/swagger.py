"""OpenAPI / Swagger document parser.

Reads the Swagger-like JSON (or YAML) document into an ApiDocument.
"""

import json
import re
from pathlib import Path

import yaml

from .base import ApiDocument, DocumentError, Operation, Param

HTTP_METHODS = ("delete", "get", "post", "put")


def parse_openapi(file_path: Path) -> ApiDocument:
    """Load and parse an OpenAPI/Swagger file."""
    text = file_path.read_text(encoding="utf-8")
    return parse_document(_load(text, file_path))


def parse_document(doc: dict) -> ApiDocument:
    """Parse an already-decoded document.

    Operations keep the document's path order; within a path the verbs
    are visited in HTTP_METHODS order.
    """
    if not isinstance(doc, dict):
        raise DocumentError(f"Expected a mapping at top level, got {type(doc).__name__}")

    operations = []
    paths = doc.get("paths") or {}

    for path, methods in paths.items():
        for method in HTTP_METHODS:
            operation = (methods or {}).get(method)
            if not operation:
                continue

            operations.append(
                Operation(
                    method=method,
                    path=path,
                    operation_id=operation.get("operationId") or _default_operation_id(method, path),
                    description=operation.get("description") or "",
                    parameters=_parse_parameters(operation.get("parameters") or []),
                    request_body=_parse_request_body(operation.get("requestBody")),
                    response_schema=_parse_response(operation.get("responses") or {}),
                )
            )

    return ApiDocument(
        host=doc.get("host", ""),
        base_path=doc.get("basePath", ""),
        operations=operations,
    )


def _load(text: str, file_path: Path) -> dict:
    # Tab-indented JSON is not valid YAML, so JSON files go through json.
    try:
        if file_path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DocumentError(f"Invalid API document {file_path}: {exc}") from exc


def _parse_parameters(params: list[dict]) -> list[Param]:
    result = []
    for p in params:
        schema = p.get("schema", {})
        result.append(
            Param(
                name=p["name"],
                location=p.get("in", "query"),
                required=p.get("required", False),
                param_type=p.get("type") or schema.get("type", ""),
                description=p.get("description") or "",
                enum=p.get("enum") or schema.get("enum"),
            )
        )
    return result


def _parse_request_body(body: dict | None) -> dict | None:
    if not body:
        return None
    content = body.get("content") or {}
    return (content.get("application/json") or {}).get("schema")


def _parse_response(responses: dict) -> dict | None:
    ok = responses.get("200") or responses.get(200)
    if not ok:
        return None
    content = ok.get("content") or {}
    return (content.get("application/json") or {}).get("schema")


def _default_operation_id(method: str, path: str) -> str:
    """`get /widgets/{id}` -> `get-widgets-id`."""
    return "-".join([method, *re.findall(r"[A-Za-z0-9]+", path)])

"""Data models for a parsed API document.

The Swagger parser converts its input into these models; the generator
only ever sees them, never the raw document.
"""

from pydantic import BaseModel


class DocumentError(ValueError):
    """Raised when an API document cannot be parsed."""


class Param(BaseModel):
    """A single operation parameter (path or query)."""

    name: str
    location: str  # path / query
    required: bool
    param_type: str  # string / integer / boolean
    description: str = ""
    enum: list | None = None


class Operation(BaseModel):
    """One HTTP verb + path combination with its schemas."""

    method: str  # delete / get / post / put
    path: str  # /widgets/{id}
    operation_id: str
    description: str = ""
    parameters: list[Param] = []
    request_body: dict | None = None  # application/json request schema
    response_schema: dict | None = None  # 200 application/json schema


class ApiDocument(BaseModel):
    """The whole document, operations in generation order."""

    host: str = ""
    base_path: str = ""
    operations: list[Operation] = []

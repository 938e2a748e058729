"""Schema nodes and primitive type mapping.

A schema node is one of three variants: PrimitiveSchema, ArraySchema or
ObjectSchema. parse_schema() builds them from raw document dicts.
"""

from __future__ import annotations

from pydantic import BaseModel

KNOWN_TYPES = {"string", "boolean", "number", "integer", "array", "object"}


class PrimitiveSchema(BaseModel):
    """A string/integer/boolean leaf. An empty type means it was missing."""

    type: str = ""
    description: str = ""
    enum: list | None = None


class ArraySchema(BaseModel):
    description: str = ""
    items: SchemaNode | None = None


class ObjectSchema(BaseModel):
    description: str = ""
    properties: dict[str, SchemaNode] | None = None
    required: list[str] | bool | None = None

    def is_required(self, key: str) -> bool:
        """Only keys listed in a `required` array are mandatory."""
        return isinstance(self.required, list) and key in self.required


SchemaNode = PrimitiveSchema | ArraySchema | ObjectSchema

ArraySchema.model_rebuild()
ObjectSchema.model_rebuild()


def parse_schema(raw: dict | None) -> SchemaNode:
    """Convert a raw JSON schema dict into a schema node."""
    raw = raw or {}
    kind = raw.get("type") or ""
    description = raw.get("description") or ""

    if kind == "array":
        items = raw.get("items")
        return ArraySchema(
            description=description,
            items=parse_schema(items) if items is not None else None,
        )

    if kind == "object":
        properties = raw.get("properties")
        return ObjectSchema(
            description=description,
            properties=(
                {key: parse_schema(value) for key, value in properties.items()}
                if properties is not None
                else None
            ),
            required=raw.get("required"),
        )

    return PrimitiveSchema(type=kind, description=description, enum=raw.get("enum"))


def transform_type(type_name: str | None) -> str:
    """Map a schema primitive type name to its TypeScript type."""
    if type_name == "integer":
        return "number"
    if type_name in KNOWN_TYPES:
        return type_name
    return "any"

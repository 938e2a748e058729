"""Schema walker — turns schema nodes into TypeScript declaration lines.

The same functions build request body fields and response types; they
know nothing about which side they are on.
"""

import json
import logging

from highsystems_codegen.generator.schema import ArraySchema, ObjectSchema, PrimitiveSchema, SchemaNode, transform_type

logger = logging.getLogger(__name__)

INDENT = "\t"


def escape_description(description: str) -> str:
    return description.replace("{", "\\{").replace("}", "\\}")


def doc_comment(description: str) -> list[str]:
    """Render a /** */ block, one line per description line."""
    lines = ["/**"]
    for line in description.split("\n"):
        lines.append(f" * {escape_description(line)}".rstrip())
    lines.append(" */")
    return lines


def enum_union(values: list) -> str:
    """Render enum values as a union of literals: 'A' | 'B' | 3."""
    literals = []
    for value in values:
        if isinstance(value, str):
            escaped = value.replace("\\", "\\\\").replace("'", "\\'")
            literals.append(f"'{escaped}'")
        else:
            literals.append(json.dumps(value))
    return " | ".join(literals)


def build_type(
    key: str,
    schema: SchemaNode,
    required: bool = True,
    tab_level: int = 1,
    nested: bool = True,
    false_unions: frozenset[str] = frozenset(),
) -> list[str]:
    """Build the declaration lines of one named schema node.

    Nested nodes render as `key?: type;`, the top-level node as
    `Key = type;`. Every line is prefixed with `tab_level` tabs.
    """
    optional = "" if required else "?"
    # `| false` applies to fields of the top-level declaration only
    child_unions = frozenset() if nested else false_unions
    head = f"{key}{optional}:" if nested else f"{key}{optional} ="
    results: list[str] = []

    if schema.description:
        results.extend(doc_comment(schema.description))

    if isinstance(schema, ArraySchema):
        items = schema.items
        if isinstance(items, ObjectSchema):
            if items.properties is not None:
                results.append(f"{head} {{")
                results.extend(build_body_type(items, tab_level, false_unions=child_unions))
                union = " | false" if key in false_unions else ""
                results.append(f"}}[]{union};")
            else:
                logger.warning("Missing properties for array items: %s. Assigning as `any[]`.", key)
                results.append(f"{head} any[];")
        elif isinstance(items, ArraySchema):
            results.append(f"{head} any[][];")
        elif isinstance(items, PrimitiveSchema) and items.enum:
            results.append(f"{head} ({enum_union(items.enum)})[];")
        elif isinstance(items, PrimitiveSchema) and items.type:
            results.append(f"{head} {transform_type(items.type)}[];")
        else:
            logger.warning("Missing items type: %s. Assigning as `any[]`.", key)
            results.append(f"{head} any[];")
    elif isinstance(schema, ObjectSchema):
        if schema.properties is not None:
            results.append(f"{head} {{")
            results.extend(build_body_type(schema, tab_level, false_unions=child_unions))
            results.append("};")
        else:
            logger.warning("Missing properties for object type: %s. Assigning as `any`.", key)
            results.append(f"{head} any;")
    elif isinstance(schema, PrimitiveSchema):
        if schema.enum:
            results.append(f"{head} {enum_union(schema.enum)};")
        elif schema.type:
            results.append(f"{head} {transform_type(schema.type)};")
        else:
            logger.warning("Missing type: %s. Assigning as `any`.", key)
            results.append(f"{head} any;")
    else:
        raise TypeError(f"Unhandled schema node: {type(schema).__name__}")

    return [INDENT * tab_level + line for line in results]


def build_body_type(
    schema: ObjectSchema,
    tab_level: int = 1,
    renames: dict[str, str] | None = None,
    false_unions: frozenset[str] = frozenset(),
) -> list[str]:
    """Build one field per property of an object node.

    `renames` maps original property names to emitted names; it only
    applies at this level and is not passed down.
    """
    results: list[str] = []
    for key, prop in (schema.properties or {}).items():
        results.extend(
            build_type(
                (renames or {}).get(key, key),
                prop,
                required=schema.is_required(key),
                tab_level=tab_level,
                false_unions=false_unions,
            )
        )
    return results


def build_response_type(
    name: str,
    schema: SchemaNode,
    false_unions: frozenset[str] = frozenset(),
) -> str:
    """Build the full `type Name = ...;` declaration for a response."""
    top = schema.model_copy(update={"description": ""})
    lines = build_type(name, top, nested=False, false_unions=false_unions)
    return "type " + "\n".join(line[1:] for line in lines).strip()

"""Operation compiler — one API operation in, one client method out.

For every operation three pieces of TypeScript are produced: the method
(doc comment, overload signatures and body), its request type and its
response type.
"""

import logging

from pydantic import BaseModel

from highsystems_codegen.parser.base import Operation
from highsystems_codegen.generator.overrides import OverrideResolver
from highsystems_codegen.generator.schema import ObjectSchema, PrimitiveSchema, SchemaNode, parse_schema, transform_type
from highsystems_codegen.generator.walker import INDENT, build_body_type, build_response_type, doc_comment, enum_union, escape_description

logger = logging.getLogger(__name__)

REQUEST_BASE_TYPE = "HighSystemsRequest"
RESPONSE_TYPE_PREFIX = "HighSystemsResponse"

TRAILING_ARGS = [
    ("requestOptions", "Override axios request configuration"),
    ("returnAxios", "If `true`, the returned object will be the entire `AxiosResponse` object"),
]


class Fragment(BaseModel):
    """Generated source for one operation."""

    function_definition: str
    request_type: str
    response_type: str


def function_name_for(operation_id: str) -> str:
    """Derive the method name from an operationId.

    `users-getUser` -> `getUser`, `get-widget` -> `getWidget`.
    """
    segments = [s for s in operation_id.split("-") if s]
    if not segments:
        return operation_id
    last = segments[-1]
    if len(segments) == 1 or any(c.isupper() for c in last):
        return last
    first = segments[0]
    return first[:1].lower() + first[1:] + "".join(capitalize(s) for s in segments[1:])


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def compile_operation(operation: Operation, resolver: OverrideResolver) -> Fragment:
    """Compile one operation into its method and type fragments."""
    operation_id = operation.operation_id
    function_name = function_name_for(operation_id)
    suffix = capitalize(function_name)
    req_name = f"{REQUEST_BASE_TYPE}{suffix}"
    res_name = f"{RESPONSE_TYPE_PREFIX}{suffix}"

    fn_args: list[tuple[str, str]] = []
    query_args: list[str] = []
    placeholders: dict[str, str] = {}
    req_type = [f"type {req_name} = {REQUEST_BASE_TYPE} & {{"]

    for param in operation.parameters:
        name = resolver.resolve_name(operation_id, param.name)
        fn_args.append((name, param.description))
        query_args.append(name if name == param.name else f"{param.name}: {name}")
        placeholders[param.name] = name

        if param.description:
            req_type.extend(INDENT + line for line in doc_comment(param.description))
        if param.enum:
            param_type = enum_union(param.enum)
        else:
            if not param.param_type:
                logger.warning("Missing type: %s.%s. Assigning as `any`.", operation_id, param.name)
            param_type = transform_type(param.param_type)
        req_type.append(f"{INDENT}{name}{'' if param.required else '?'}: {param_type};")

    has_body = operation.request_body is not None
    data_expr = "body"
    if has_body:
        body = parse_schema(resolver.body_schema(operation_id, operation.request_body))
        if isinstance(body, ObjectSchema) and body.properties is None:
            logger.warning("Missing properties for request body of %s. Assigning as `any`.", operation_id)
            req_type.append(f"{INDENT}[key: string]: any;")
        elif isinstance(body, ObjectSchema):
            renames = {}
            for key in body.properties or {}:
                new_name = resolver.resolve_name(operation_id, key)
                if new_name != key:
                    renames[key] = new_name
            req_type.extend(
                build_body_type(body, renames=renames, false_unions=resolver.false_unions(operation_id))
            )
            # Renamed body fields are destructured and mapped back to their wire names.
            fn_args.extend((new_name, "") for new_name in renames.values())
            if renames:
                mapped = ", ".join(f"{key}: {new_name}" for key, new_name in renames.items())
                data_expr = f"{{ {mapped}, ...body }}"
        else:
            logger.warning("Request body of %s is not an object. Assigning as `any`.", operation_id)
            req_type.append(f"{INDENT}[key: string]: any;")
    req_type.append("};")

    res_type = _response_type(operation, resolver, res_name)

    path_template = operation.path
    for original, name in placeholders.items():
        path_template = path_template.replace(f"{{{original}}}", f"${{{name}}}")

    destructured = [name for name, _ in fn_args]
    args_optional = not destructured and not has_body

    def arg_list(return_axios: str) -> str:
        names = destructured + ["requestOptions", f"returnAxios = {return_axios}"]
        if has_body:
            names.append("...body")
        return ", ".join(names)

    call_options = [f"method: '{operation.method}'", f"url: `{path_template}`"]
    if resolver.with_credentials(operation_id):
        call_options.append("withCredentials: true")
    if has_body:
        call_options.append(f"data: {data_expr}")
    if query_args:
        call_options.append(f"params: {{ {', '.join(query_args)} }}")

    documented = [(name, desc) for name, desc in fn_args + TRAILING_ARGS if desc]
    lines = [
        "/**",
        f" * {function_name}",
        " *",
        *(f" * {escape_description(line)}".rstrip() for line in operation.description.split("\n")),
        " *",
        f" * @param options {function_name} method options object",
        *(f" * @param options.{name} {escape_description(desc)}" for name, desc in documented),
        " */",
        f"public async {function_name}({{ {arg_list('false')} }}: {req_name} & {{ returnAxios?: false }}): "
        f"Promise<{res_name}['results']>;",
        f"public async {function_name}({{ {arg_list('true')} }}: {req_name} & {{ returnAxios: true }}): "
        f"Promise<AxiosResponse<{res_name}>>;",
        f"public async {function_name}({{ {arg_list('false')} }}: {req_name}{' = {}' if args_optional else ''}): "
        f"Promise<{res_name}['results'] | AxiosResponse<{res_name}>> {{",
        f"{INDENT}const results = await this.api<{res_name}>({{",
        ",\n".join(INDENT * 2 + option for option in call_options),
        f"{INDENT}}}, requestOptions);",
        "",
        f"{INDENT}if(returnAxios){{",
        f"{INDENT * 2}return results;",
        f"{INDENT}}}",
        "",
        f"{INDENT}return typeof(results.data) === 'object' ? results.data.results : results.data;",
        "}",
    ]

    return Fragment(
        function_definition="\n".join(lines),
        request_type="\n".join(req_type),
        response_type=res_type,
    )


def _response_type(operation: Operation, resolver: OverrideResolver, res_name: str) -> str:
    false_unions = resolver.false_unions(operation.operation_id)
    if operation.response_schema is None:
        logger.warning(
            "No 200 JSON response schema: %s. Assigning `results` as `any`.", operation.operation_id
        )
        return build_response_type(res_name, _envelope(PrimitiveSchema(type="any"), results_required=False))

    schema = parse_schema(resolver.response_schema(operation.operation_id, operation.response_schema))
    if isinstance(schema, ObjectSchema) and "results" in (schema.properties or {}):
        return build_response_type(res_name, schema, false_unions)
    return build_response_type(res_name, _envelope(schema), false_unions)


def _envelope(results: SchemaNode, results_required: bool = True) -> ObjectSchema:
    """Wrap a payload schema in the `{ success, results }` envelope."""
    return ObjectSchema(
        properties={
            "success": PrimitiveSchema(type="boolean"),
            "results": results,
        },
        required=["success", "results"] if results_required else ["success"],
    )

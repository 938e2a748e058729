import logging
from pathlib import Path

import pytest

from highsystems_codegen.generator.operation import compile_operation, function_name_for
from highsystems_codegen.generator.overrides import (
    OverrideEntry,
    OverrideResolver,
    RequestOverride,
    load_overrides,
)
from highsystems_codegen.parser.base import Operation, Param
from highsystems_codegen.parser.swagger import parse_openapi

FIXTURES = Path(__file__).parent / "fixtures"


def _get_widget() -> Operation:
    return Operation(
        method="get",
        path="/widgets/{id}",
        operation_id="get-widget",
        parameters=[Param(name="id", location="path", required=True, param_type="string")],
        response_schema={"type": "object", "properties": {"name": {"type": "string"}}},
    )


def _fixture_operation(operation_id: str) -> Operation:
    doc = parse_openapi(FIXTURES / "widgets.json")
    return [op for op in doc.operations if op.operation_id == operation_id][0]


class TestFunctionName:
    @pytest.mark.parametrize("operation_id, expected", [
        ("widgets-getWidget", "getWidget"),
        ("api-v1-users-getUsers", "getUsers"),
        ("get-widget", "getWidget"),
        ("get-widgets-id", "getWidgetsId"),
        ("Users-list", "usersList"),
        ("ping", "ping"),
    ])
    def test_derivation(self, operation_id, expected):
        assert function_name_for(operation_id) == expected


class TestGetWidgetScenario:
    def test_request_type(self):
        fragment = compile_operation(_get_widget(), OverrideResolver())
        assert fragment.request_type == (
            "type HighSystemsRequestGetWidget = HighSystemsRequest & {\n"
            "\tid: string;\n"
            "};"
        )

    def test_response_type_is_wrapped_in_envelope(self):
        fragment = compile_operation(_get_widget(), OverrideResolver())
        assert fragment.response_type == (
            "type HighSystemsResponseGetWidget = {\n"
            "\tsuccess: boolean;\n"
            "\tresults: {\n"
            "\t\tname?: string;\n"
            "\t};\n"
            "};"
        )

    def test_signatures(self):
        fn = compile_operation(_get_widget(), OverrideResolver()).function_definition
        assert (
            "public async getWidget({ id, requestOptions, returnAxios = false }: "
            "HighSystemsRequestGetWidget & { returnAxios?: false }): "
            "Promise<HighSystemsResponseGetWidget['results']>;"
        ) in fn
        assert (
            "public async getWidget({ id, requestOptions, returnAxios = true }: "
            "HighSystemsRequestGetWidget & { returnAxios: true }): "
            "Promise<AxiosResponse<HighSystemsResponseGetWidget>>;"
        ) in fn
        assert (
            "public async getWidget({ id, requestOptions, returnAxios = false }: "
            "HighSystemsRequestGetWidget): "
            "Promise<HighSystemsResponseGetWidget['results'] | AxiosResponse<HighSystemsResponseGetWidget>> {"
        ) in fn

    def test_body(self):
        fn = compile_operation(_get_widget(), OverrideResolver()).function_definition
        assert (
            "\tconst results = await this.api<HighSystemsResponseGetWidget>({\n"
            "\t\tmethod: 'get',\n"
            "\t\turl: `/widgets/${id}`,\n"
            "\t\tparams: { id }\n"
            "\t}, requestOptions);"
        ) in fn
        assert "{id}" not in fn.replace("${id}", "")
        assert "data:" not in fn
        assert fn.endswith(
            "\tif(returnAxios){\n"
            "\t\treturn results;\n"
            "\t}\n"
            "\n"
            "\treturn typeof(results.data) === 'object' ? results.data.results : results.data;\n"
            "}"
        )

    def test_doc_comment(self):
        fn = compile_operation(_get_widget(), OverrideResolver()).function_definition
        lines = fn.split("\n")
        assert lines[:3] == ["/**", " * getWidget", " *"]
        assert " * @param options getWidget method options object" in lines
        assert " * @param options.requestOptions Override axios request configuration" in lines
        assert not any(line.startswith(" * @param options.id") for line in lines)


class TestParameters:
    def test_enum_query_param_with_description(self):
        fragment = compile_operation(_fixture_operation("widgets-getWidgets"), OverrideResolver())
        assert fragment.request_type.split("\n")[1:5] == [
            "\t/**",
            "\t * Filter by status",
            "\t */",
            "\tstatus?: 'active' | 'archived';",
        ]
        assert " * @param options.status Filter by status" in fragment.function_definition
        assert "\t\tparams: { status }" in fragment.function_definition

    def test_array_of_objects_response(self):
        fragment = compile_operation(_fixture_operation("widgets-getWidgets"), OverrideResolver())
        assert "\tresults: {\n\t\tx?: number;\n\t}[];" in fragment.response_type

    def test_no_arguments_makes_options_optional(self):
        fn = compile_operation(_fixture_operation("settings-getSettings"), OverrideResolver()).function_definition
        assert "({ requestOptions, returnAxios = false }: HighSystemsRequestGetSettings = {})" in fn
        assert "params:" not in fn
        assert "\t\turl: `/settings`\n" in fn

    def test_arguments_make_options_required(self):
        fn = compile_operation(_get_widget(), OverrideResolver()).function_definition
        assert "= {})" not in fn

    def test_existing_envelope_is_kept(self):
        fragment = compile_operation(_fixture_operation("settings-getSettings"), OverrideResolver())
        assert fragment.response_type == (
            "type HighSystemsResponseGetSettings = {\n"
            "\tsuccess: boolean;\n"
            "\tresults: {\n"
            "\t\trealm: string;\n"
            "\t\ttheme?: 'A' | 'B';\n"
            "\t};\n"
            "};"
        )

    def test_missing_param_type_warns(self, caplog):
        caplog.set_level(logging.WARNING, logger="highsystems_codegen")
        op = Operation(
            method="get",
            path="/things",
            operation_id="things-getThings",
            parameters=[Param(name="q", location="query", required=False, param_type="")],
        )
        fragment = compile_operation(op, OverrideResolver())
        assert "\tq?: any;" in fragment.request_type
        assert "things-getThings.q" in caplog.text


class TestRequestBody:
    def test_body_fields_extend_request_type(self):
        fragment = compile_operation(_fixture_operation("widgets-putWidget"), OverrideResolver())
        assert fragment.request_type == (
            "type HighSystemsRequestPutWidget = HighSystemsRequest & {\n"
            "\t/**\n"
            "\t * Widget id\n"
            "\t */\n"
            "\tid: string;\n"
            "\t/**\n"
            "\t * Display name\n"
            "\t */\n"
            "\tname: string;\n"
            "\tsize?: number;\n"
            "\ttags?: string[];\n"
            "};"
        )

    def test_body_is_forwarded_as_data(self):
        fn = compile_operation(_fixture_operation("widgets-putWidget"), OverrideResolver()).function_definition
        assert "({ id, requestOptions, returnAxios = false, ...body }: HighSystemsRequestPutWidget & " in fn
        assert "({ id, requestOptions, returnAxios = true, ...body }: HighSystemsRequestPutWidget & " in fn
        assert "\t\tdata: body,\n\t\tparams: { id }\n" in fn
        assert "= {})" not in fn

    def test_body_only_operation_is_not_optional(self):
        op = Operation(
            method="post",
            path="/widgets",
            operation_id="widgets-postWidget",
            request_body={"type": "object", "properties": {"name": {"type": "string"}}},
        )
        fn = compile_operation(op, OverrideResolver()).function_definition
        assert "({ requestOptions, returnAxios = false, ...body }: HighSystemsRequestPostWidget)" in fn
        assert "\t\tdata: body\n" in fn

    def test_non_object_body_warns(self, caplog):
        caplog.set_level(logging.WARNING, logger="highsystems_codegen")
        op = Operation(
            method="post",
            path="/raw",
            operation_id="raw-postRaw",
            request_body={"type": "string"},
        )
        fragment = compile_operation(op, OverrideResolver())
        assert "\t[key: string]: any;" in fragment.request_type
        assert "raw-postRaw" in caplog.text

    def test_object_body_without_properties_warns(self, caplog):
        caplog.set_level(logging.WARNING, logger="highsystems_codegen")
        op = Operation(
            method="post",
            path="/blobs",
            operation_id="blobs-postBlob",
            request_body={"type": "object"},
            response_schema={"type": "string"},
        )
        fragment = compile_operation(op, OverrideResolver())
        assert fragment.request_type == (
            "type HighSystemsRequestPostBlob = HighSystemsRequest & {\n"
            "\t[key: string]: any;\n"
            "};"
        )
        assert "data: body" in fragment.function_definition
        assert "blobs-postBlob" in caplog.text

    def test_results_without_properties_degrade_to_any(self, caplog):
        caplog.set_level(logging.WARNING, logger="highsystems_codegen")
        fragment = compile_operation(_fixture_operation("widgets-putWidget"), OverrideResolver())
        assert "\tresults?: any;" in fragment.response_type
        assert "results" in caplog.text


class TestMissingResponse:
    def test_fallback_envelope(self, caplog):
        caplog.set_level(logging.WARNING, logger="highsystems_codegen")
        op = Operation(method="delete", path="/things/{id}", operation_id="things-deleteThing")
        fragment = compile_operation(op, OverrideResolver())
        assert fragment.response_type == (
            "type HighSystemsResponseDeleteThing = {\n"
            "\tsuccess: boolean;\n"
            "\tresults?: any;\n"
            "};"
        )
        assert "things-deleteThing" in caplog.text


class TestOverrides:
    def _compile_put(self, one_shot: bool = False):
        resolver = OverrideResolver(load_overrides(FIXTURES / "overrides.yaml"), one_shot=one_shot)
        return compile_operation(_fixture_operation("widgets-putWidget"), resolver)

    def test_renamed_path_param(self):
        fragment = self._compile_put()
        fn = fragment.function_definition
        assert "\t\turl: `/widgets/${widgetId}`,\n" in fn
        assert "\t\tparams: { id: widgetId }" in fn
        assert "\twidgetId: string;" in fragment.request_type
        assert " * @param options.widgetId Widget id" in fn

    def test_renamed_body_field_mapped_back(self):
        fragment = self._compile_put()
        fn = fragment.function_definition
        assert "({ widgetId, widgetSize, requestOptions, returnAxios = false, ...body }" in fn
        assert "\t\tdata: { size: widgetSize, ...body },\n" in fn
        assert "\twidgetSize?: number;" in fragment.request_type

    def test_body_patch_and_credentials(self):
        fragment = self._compile_put()
        assert "\tcolor?: string;" in fragment.request_type
        assert "\t\twithCredentials: true,\n" in fragment.function_definition

    def test_response_patch(self):
        fragment = self._compile_put()
        # `required` lists are concatenated, so results becomes mandatory
        assert "\tresults: any;" in fragment.response_type

    def test_false_union(self):
        resolver = OverrideResolver({"widgets-getWidgets": OverrideEntry(false_unions=["results"])})
        fragment = compile_operation(_fixture_operation("widgets-getWidgets"), resolver)
        assert "\t}[] | false;" in fragment.response_type

    def test_one_shot_rename_shared_by_param_and_body(self):
        resolver = OverrideResolver(
            {"things-putThing": OverrideEntry(request=RequestOverride(args={"id": "thingId"}))},
            one_shot=True,
        )
        op = Operation(
            method="put",
            path="/things/{id}",
            operation_id="things-putThing",
            parameters=[Param(name="id", location="path", required=True, param_type="string")],
            request_body={"type": "object", "properties": {"id": {"type": "string"}}},
        )
        fragment = compile_operation(op, resolver)
        assert "\tthingId: string;" in fragment.request_type
        assert "\tid?: string;" in fragment.request_type
        assert "data: body" in fragment.function_definition

from pathlib import Path

import pytest

from openapi_test_sheet.errors import LoadError
from openapi_test_sheet.parser.swagger import load_document, parse_operations, resolve_ref

FIXTURES = Path(__file__).parent / "fixtures"


def _operations():
    return parse_operations(load_document(FIXTURES / "petstore.yaml"))


def _find(operations, method, path):
    return [op for op in operations if op.method == method and op.path == path][0]


class TestLoadDocument:
    def test_load_yaml(self):
        doc = load_document(FIXTURES / "petstore.yaml")
        assert "/pets" in doc["paths"]

    def test_load_json(self, tmp_path):
        f = tmp_path / "api.json"
        f.write_text('{"openapi": "3.0.0", "paths": {}}', encoding="utf-8")
        assert load_document(f) == {"openapi": "3.0.0", "paths": {}}

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError):
            load_document(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "broken.yaml"
        f.write_text("paths: [unclosed", encoding="utf-8")
        with pytest.raises(LoadError):
            load_document(f)

    def test_root_must_be_mapping(self, tmp_path):
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(LoadError, match="not a mapping"):
            load_document(f)


class TestParseOperations:
    def test_operation_count_and_order(self):
        operations = _operations()
        assert [(op.method, op.path) for op in operations] == [
            ("GET", "/pets"),
            ("POST", "/pets"),
            ("GET", "/pets/{petId}"),
            ("DELETE", "/pets/{petId}"),
        ]

    def test_path_level_parameters_are_ignored(self):
        get_pets = _find(_operations(), "GET", "/pets")
        assert get_pets.headers == []

    def test_parameter_buckets(self):
        get_pets = _find(_operations(), "GET", "/pets")
        assert [p.name for p in get_pets.query_params] == ["limit"]
        assert get_pets.query_params[0].param_type == "integer"
        assert get_pets.query_params[0].example == 20
        # cookie parameters are dropped
        assert all(p.name != "session" for p in get_pets.headers + get_pets.path_params + get_pets.query_params)

    def test_operation_id_defaults_to_method_and_path(self):
        delete = _find(_operations(), "DELETE", "/pets/{petId}")
        assert delete.operation_id == "DELETE /pets/{petId}"

    def test_request_body_from_reference(self):
        post = _find(_operations(), "POST", "/pets")
        body = post.request_body
        assert list(body.properties) == ["name", "age", "vaccinated", "tags"]
        assert body.required == ["name", "age"]
        assert body.properties["name"].example == "Rex"
        assert body.properties["age"].required is True
        assert body.properties["vaccinated"].required is False

    def test_response_status_codes_in_order(self):
        post = _find(_operations(), "POST", "/pets")
        assert list(post.responses) == ["201", "400", "401"]
        assert post.responses["400"].description == "Invalid input"

    def test_response_reference_resolved_verbatim(self):
        get_pets = _find(_operations(), "GET", "/pets")
        assert get_pets.responses["200"].schema_content == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/Pet"},
        }
        assert get_pets.responses["500"].schema_content is None

    def test_integer_status_keys_become_strings(self):
        doc = {"paths": {"/ping": {"get": {"responses": {200: {"description": "OK"}}}}}}
        assert list(parse_operations(doc)[0].responses) == ["200"]


class TestLenientParsing:
    def test_inline_body_properties(self):
        doc = {"paths": {"/users": {"post": {
            "requestBody": {"content": {"application/json": {"schema": {
                "required": ["email"],
                "properties": {"email": {"type": "string"}, "age": {}},
            }}}},
            "responses": {"201": {"description": "Created"}},
        }}}}
        body = parse_operations(doc)[0].request_body
        assert body.properties["email"].required is True
        assert body.properties["age"].type == "string"

    def test_unresolved_reference_means_no_body(self):
        doc = {"paths": {"/users": {"post": {
            "requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Nope"}}}},
            "responses": {"201": {}},
        }}}}
        op = parse_operations(doc)[0]
        assert op.request_body is None
        assert op.responses["201"].description == ""

    def test_non_json_content_is_ignored(self):
        doc = {"paths": {"/upload": {"post": {
            "requestBody": {"content": {"multipart/form-data": {"schema": {"properties": {"file": {}}}}}},
            "responses": {"200": {"content": {"text/plain": {"schema": {"type": "string"}}}}},
        }}}}
        op = parse_operations(doc)[0]
        assert op.request_body is None
        assert op.responses["200"].schema_content is None

    def test_malformed_pieces_default_out(self):
        doc = {
            "components": "not-a-mapping",
            "paths": {
                "/a": {"get": {"parameters": "nope", "responses": {"200": "OK", "404": None}}},
                "/b": {"put": None},
                "/c": "oops",
            },
        }
        operations = parse_operations(doc)
        assert [op.path for op in operations] == ["/a", "/b"]
        assert list(operations[0].responses) == ["200", "404"]
        assert operations[0].responses["200"].description == ""
        assert operations[1].responses == {}

    def test_missing_paths(self):
        assert parse_operations({"openapi": "3.0.0"}) == []

    def test_parameters_without_name_are_dropped(self):
        doc = {"paths": {"/a": {"get": {"parameters": [{"in": "query"}, "junk"], "responses": {}}}}}
        assert parse_operations(doc)[0].query_params == []


class TestResolveRef:
    COMPONENTS = {
        "Alias": {"$ref": "#/components/schemas/Pet"},
        "Pet": {"properties": {"id": {"type": "integer"}}},
        "Loop": {"$ref": "#/components/schemas/Loop"},
    }

    def test_single_hop_by_default(self):
        assert resolve_ref({"$ref": "#/components/schemas/Alias"}, self.COMPONENTS) == {
            "$ref": "#/components/schemas/Pet"
        }

    def test_deeper_resolution(self):
        resolved = resolve_ref({"$ref": "#/components/schemas/Alias"}, self.COMPONENTS, depth=3)
        assert resolved == {"properties": {"id": {"type": "integer"}}}

    def test_cycle_stays_opaque(self):
        resolved = resolve_ref({"$ref": "#/components/schemas/Loop"}, self.COMPONENTS, depth=5)
        assert resolved == {"$ref": "#/components/schemas/Loop"}

    def test_missing_target(self):
        assert resolve_ref({"$ref": "#/components/schemas/Missing"}, self.COMPONENTS) is None

    def test_body_through_alias_needs_depth(self):
        doc = {
            "components": {"schemas": self.COMPONENTS},
            "paths": {"/pets": {"post": {
                "requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Alias"}}}},
                "responses": {"201": {"description": "Created"}},
            }}},
        }
        assert parse_operations(doc)[0].request_body.properties == {}
        assert list(parse_operations(doc, ref_depth=2)[0].request_body.properties) == ["id"]


class TestBodyWithoutProperties:
    def test_reference_to_array_schema_gives_empty_body(self):
        doc = {
            "components": {"schemas": {"Tags": {"type": "array", "items": {"type": "string"}}}},
            "paths": {"/tags": {"put": {
                "requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Tags"}}}},
                "responses": {"400": {"description": "Bad"}},
            }}},
        }
        body = parse_operations(doc)[0].request_body
        assert body is not None
        assert body.properties == {}
        assert body.required == []

    def test_inline_object_without_properties(self):
        doc = {"paths": {"/blob": {"post": {
            "requestBody": {"content": {"application/json": {"schema": {"type": "object", "required": ["x"]}}}},
            "responses": {"201": {}},
        }}}}
        body = parse_operations(doc)[0].request_body
        assert body.properties == {}
        assert body.required == ["x"]


class TestExamples:
    def _param(self, example):
        doc = {"paths": {"/a": {"get": {
            "parameters": [{"name": "q", "in": "query", "schema": {"example": example}}],
            "responses": {},
        }}}}
        return parse_operations(doc)[0].query_params[0]

    def test_zero_and_false_count_as_missing(self):
        assert self._param(0).example == ""
        assert self._param(False).example == ""

    def test_empty_containers_are_kept(self):
        assert self._param([]).example == []
        assert self._param({}).example == {}

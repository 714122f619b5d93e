"""Request fixtures and expected response fragments.

Fixtures are deterministic except for 400 cases under the "random"
invalid-body strategy, where each required body property is either
dropped or given a value of the wrong type. Pass a seeded random.Random
to make those reproducible.
"""

import json
import random
from typing import Any

from openapi_test_sheet.config import INVALID_BODY_STRATEGIES
from openapi_test_sheet.parser.base import ApiOperation, ApiResponse, Param, is_present

from .scenario import status_number

INVALID_AUTH_TOKEN = "INVALID_AUTH_TOKEN"
NON_EXISTENT_ID = "NON_EXISTENT_ID"

AUTH_HEADER_MARKERS = ("auth", "api-key")

_INVALID_VALUES = {
    "string": 123,
    "integer": "not-a-number",
    "number": "not-a-number",
    "boolean": "not-a-boolean",
}

_DEFAULT_VALUES = {
    "string": "sample_string",
    "integer": 1,
    "number": 1.0,
    "boolean": True,
}


def invalid_value_for_type(type_name: str) -> Any:
    """A value that does not match the declared type."""
    if type_name == "array":
        return {}
    if type_name == "object":
        return []
    return _INVALID_VALUES.get(type_name)


def default_value_for_type(type_name: str) -> Any:
    """A plausible value for the declared type."""
    if type_name == "array":
        return []
    if type_name == "object":
        return {}
    return _DEFAULT_VALUES.get(type_name)


def to_json(value: Any) -> str:
    """Compact JSON used for every serialized cell."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def extract_response_schema(response: ApiResponse) -> str:
    """Serialized expected-response fragment for one response."""
    if response.schema_content is None:
        return "{}"

    content = dict(response.schema_content)
    if is_present(response.example):
        content["example"] = response.example
    return to_json(content)


def _placeholder(param: Param) -> Any:
    return param.example if is_present(param.example) else f"{{{param.name}}}"


class FixtureBuilder:
    """Builds the `testData` structure for an operation and a target status."""

    def __init__(self, strategy: str = "random", rng: random.Random | None = None):
        if strategy not in INVALID_BODY_STRATEGIES:
            raise ValueError(f"Unknown invalid-body strategy: {strategy}")
        self.strategy = strategy
        self.rng = rng or random.Random()

    def build(self, operation: ApiOperation, status_code: str) -> dict:
        status = status_number(status_code)
        data: dict[str, dict] = {}

        if operation.headers:
            data["headers"] = {
                h.name: INVALID_AUTH_TOKEN if status == 401 and self._is_auth_header(h) else _placeholder(h)
                for h in operation.headers
            }

        if operation.path_params:
            data["pathParams"] = {
                p.name: NON_EXISTENT_ID if status == 404 and "id" in p.name.lower() else _placeholder(p)
                for p in operation.path_params
            }

        if operation.query_params:
            data["queryParams"] = {p.name: _placeholder(p) for p in operation.query_params}

        if operation.request_body is not None:
            data["body"] = self._build_body(operation, status)

        return data

    def _build_body(self, operation: ApiOperation, status: int | None) -> dict:
        body = {}
        omit_next = True
        for name, prop in operation.request_body.properties.items():
            if prop.required and status == 400:
                if self._should_omit(omit_next):
                    omit_next = False
                    continue
                omit_next = True
                body[name] = invalid_value_for_type(prop.type)
            else:
                body[name] = prop.example if is_present(prop.example) else default_value_for_type(prop.type)
        return body

    def _should_omit(self, omit_next: bool) -> bool:
        if self.strategy == "omit":
            return True
        if self.strategy == "corrupt":
            return False
        if self.strategy == "alternate":
            return omit_next
        return self.rng.random() > 0.5

    @staticmethod
    def _is_auth_header(param: Param) -> bool:
        name = param.name.lower()
        return any(marker in name for marker in AUTH_HEADER_MARKERS)

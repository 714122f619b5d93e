"""Test case generator: one record per declared response of each operation."""

import logging
import random

from pydantic import BaseModel, ConfigDict

from openapi_test_sheet.config import GeneratorSettings
from openapi_test_sheet.parser.base import ApiOperation, Param

from .fixtures import FixtureBuilder, extract_response_schema, to_json
from .scenario import case_name, expected_result, scenario_label, step_list

logger = logging.getLogger(__name__)


class TestCaseRecord(BaseModel):
    """A single generated test case, the unit written to the workbook."""

    __test__ = False
    model_config = ConfigDict(frozen=True)

    endpoint: str
    method: str
    operation_id: str
    summary: str
    description: str
    status_code: str
    response_description: str
    request_headers: str
    path_params: str
    query_params: str
    request_body: str
    expected_response: str
    test_name: str
    test_scenario: str
    test_steps: str
    test_data: str
    expected_result: str


class TestCaseGenerator:
    """Derives test case records from parsed operations."""

    __test__ = False

    def __init__(self, settings: GeneratorSettings | None = None):
        self.settings = settings or GeneratorSettings()
        self.fixtures = FixtureBuilder(
            strategy=self.settings.invalid_body,
            rng=random.Random(self.settings.seed),
        )

    def generate(self, operations: list[ApiOperation]) -> list[TestCaseRecord]:
        """Generate records for all operations, in document order."""
        records = []
        for operation in operations:
            records.extend(self._generate_for_operation(operation))
        return records

    def _generate_for_operation(self, operation: ApiOperation) -> list[TestCaseRecord]:
        if not operation.responses:
            logger.debug("%s %s declares no responses", operation.method, operation.path)

        request_headers = _params_json(operation.headers)
        path_params = _params_json(operation.path_params)
        query_params = _params_json(operation.query_params)
        request_body = to_json(operation.request_body.model_dump() if operation.request_body else {})

        records = []
        for status_code, response in operation.responses.items():
            records.append(
                TestCaseRecord(
                    endpoint=operation.path,
                    method=operation.method,
                    operation_id=operation.operation_id,
                    summary=operation.summary,
                    description=operation.description,
                    status_code=status_code,
                    response_description=response.description,
                    request_headers=request_headers,
                    path_params=path_params,
                    query_params=query_params,
                    request_body=request_body,
                    expected_response=extract_response_schema(response),
                    test_name=case_name(operation.operation_id, status_code, response.description),
                    test_scenario=scenario_label(
                        operation.method, status_code, operation.summary, response.description
                    ),
                    test_steps=step_list(operation.method, operation.path, status_code),
                    test_data=to_json(self.fixtures.build(operation, status_code)),
                    expected_result=expected_result(status_code, response.description),
                )
            )
        return records


def _params_json(params: list[Param]) -> str:
    """Serialize a parameter bucket; an empty bucket becomes '{}'."""
    if not params:
        return "{}"
    return to_json([
        {"name": p.name, "required": p.required, "type": p.param_type, "example": p.example}
        for p in params
    ])

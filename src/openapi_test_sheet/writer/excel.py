"""Excel report writer.

Records are projected into four tables (plain lists of row dicts, so they
can be checked without opening a workbook) and then written with openpyxl.
"""

import re
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font

from openapi_test_sheet.errors import WriteError
from openapi_test_sheet.generator.testcase import TestCaseRecord

SUMMARY_COLUMNS = ["Endpoint", "Method", "Operation ID", "Summary", "Status Codes"]
TEST_CASE_COLUMNS = [
    "Test ID", "Test Name", "Endpoint", "Method",
    "Test Scenario", "Test Steps", "Status Code", "Expected Result",
]
REQUEST_COLUMNS = [
    "Test ID", "Endpoint", "Method", "Headers",
    "Path Parameters", "Query Parameters", "Request Body", "Test Data",
]
RESPONSE_COLUMNS = [
    "Test ID", "Endpoint", "Method", "Status Code",
    "Response Description", "Expected Response Schema",
]

SHEETS = [
    ("API Summary", SUMMARY_COLUMNS),
    ("Test Cases", TEST_CASE_COLUMNS),
    ("Request Details", REQUEST_COLUMNS),
    ("Response Details", RESPONSE_COLUMNS),
]


def make_test_id(operation_id: str, status_code: str) -> str:
    """`TC_<operationId>_<status>` with anything outside [A-Za-z0-9_] replaced."""
    return re.sub(r"[^A-Za-z0-9_]", "_", f"TC_{operation_id}_{status_code}")


def summary_rows(records: list[TestCaseRecord]) -> list[dict]:
    """One row per (method, endpoint); status codes of repeats are appended."""
    unique: dict[str, dict] = {}
    for tc in records:
        key = f"{tc.method}:{tc.endpoint}"
        if key not in unique:
            unique[key] = {
                "Endpoint": tc.endpoint,
                "Method": tc.method,
                "Operation ID": tc.operation_id,
                "Summary": tc.summary,
                "Status Codes": tc.status_code,
            }
        else:
            unique[key]["Status Codes"] += f", {tc.status_code}"
    return list(unique.values())


def case_rows(records: list[TestCaseRecord]) -> list[dict]:
    return [
        {
            "Test ID": make_test_id(tc.operation_id, tc.status_code),
            "Test Name": tc.test_name,
            "Endpoint": tc.endpoint,
            "Method": tc.method,
            "Test Scenario": tc.test_scenario,
            "Test Steps": tc.test_steps,
            "Status Code": tc.status_code,
            "Expected Result": tc.expected_result,
        }
        for tc in records
    ]


def request_rows(records: list[TestCaseRecord]) -> list[dict]:
    return [
        {
            "Test ID": make_test_id(tc.operation_id, tc.status_code),
            "Endpoint": tc.endpoint,
            "Method": tc.method,
            "Headers": tc.request_headers,
            "Path Parameters": tc.path_params,
            "Query Parameters": tc.query_params,
            "Request Body": tc.request_body,
            "Test Data": tc.test_data,
        }
        for tc in records
    ]


def response_rows(records: list[TestCaseRecord]) -> list[dict]:
    return [
        {
            "Test ID": make_test_id(tc.operation_id, tc.status_code),
            "Endpoint": tc.endpoint,
            "Method": tc.method,
            "Status Code": tc.status_code,
            "Response Description": tc.response_description,
            "Expected Response Schema": tc.expected_response,
        }
        for tc in records
    ]


def build_tables(records: list[TestCaseRecord]) -> dict[str, list[dict]]:
    """All four sheets keyed by sheet name, in workbook order."""
    return {
        "API Summary": summary_rows(records),
        "Test Cases": case_rows(records),
        "Request Details": request_rows(records),
        "Response Details": response_rows(records),
    }


class ExcelWriter:
    """Writes test case records into a four-sheet workbook."""

    def write(self, records: list[TestCaseRecord], output: Path) -> Path:
        output = Path(output)
        tables = build_tables(records)

        wb = Workbook()
        wb.remove(wb.active)
        for sheet_name, columns in SHEETS:
            self._fill_sheet(wb.create_sheet(sheet_name), columns, tables[sheet_name])

        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output)
        except (OSError, ValueError) as e:
            raise WriteError(output, str(e)) from e
        return output

    def _fill_sheet(self, ws, columns: list[str], rows: list[dict]) -> None:
        ws.append(columns)
        for cell in ws[1]:
            cell.font = Font(bold=True)
        ws.freeze_panes = "A2"

        wrap = Alignment(wrap_text=True, vertical="top")
        for row in rows:
            ws.append([_cell_text(row[col]) for col in columns])
            for cell in ws[ws.max_row]:
                if not isinstance(cell.value, str):
                    continue
                # text only, never a formula
                cell.data_type = "s"
                if "\n" in cell.value:
                    cell.alignment = wrap


def _cell_text(value):
    """Strip control characters that worksheets cannot store."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value

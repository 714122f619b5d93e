"""Data models for parsed OpenAPI operations.

The parser converts the raw document tree into these models so the
generator never has to look at the document again.
"""

from typing import Any

from pydantic import BaseModel


def is_present(value: Any) -> bool:
    """Whether an example was actually given.

    None, "", 0 and False count as missing; empty lists and mappings do not.
    """
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == value and value != 0
    return True


class Param(BaseModel):
    """A single header, path or query parameter."""

    name: str
    location: str  # header / path / query
    required: bool = False
    param_type: str = "string"
    example: Any = ""


class BodyProperty(BaseModel):
    """One top-level property of a JSON request body."""

    type: str = "string"
    example: Any = ""
    required: bool = False


class RequestBodySpec(BaseModel):
    """Flattened view of an application/json request body schema."""

    properties: dict[str, BodyProperty] = {}
    required: list[str] = []


class ApiResponse(BaseModel):
    """A declared response for one status code."""

    description: str = ""
    schema_content: dict | None = None  # None when no application/json schema
    example: Any = None


class ApiOperation(BaseModel):
    """One HTTP method bound to one path."""

    path: str
    method: str  # GET / POST / PUT / PATCH / DELETE
    operation_id: str
    summary: str = ""
    description: str = ""
    headers: list[Param] = []
    path_params: list[Param] = []
    query_params: list[Param] = []
    request_body: RequestBodySpec | None = None
    responses: dict[str, ApiResponse] = {}

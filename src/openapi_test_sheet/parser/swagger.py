"""OpenAPI document loader and operation parser.

Loading is strict: a file that cannot be read or decoded raises LoadError.
Parsing is lenient: anything missing or oddly shaped inside the document
falls back to an empty default instead of raising.
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from openapi_test_sheet.errors import LoadError

from .base import ApiOperation, ApiResponse, BodyProperty, Param, RequestBodySpec, is_present

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete")
PARAM_LOCATIONS = ("header", "path", "query")
JSON_CONTENT = "application/json"


def load_document(file_path: Path) -> dict:
    """Read a YAML or JSON OpenAPI file into a mapping."""
    try:
        text = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(file_path, str(e)) from e

    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise LoadError(file_path, str(e)) from e

    if not isinstance(doc, dict):
        raise LoadError(file_path, "document root is not a mapping")
    return doc


def parse_operations(doc: dict, ref_depth: int = 1) -> list[ApiOperation]:
    """Collect every supported operation in document order."""
    components = _schema_registry(doc)
    operations = []

    for path, path_item in _as_dict(doc.get("paths")).items():
        for method, operation in _as_dict(path_item).items():
            if str(method).lower() not in HTTP_METHODS:
                logger.debug("Skipping %r under %s", method, path)
                continue
            operations.append(
                _parse_operation(str(path), str(method), _as_dict(operation), components, ref_depth)
            )

    return operations


def resolve_ref(schema: Any, components: dict, depth: int = 1) -> dict | None:
    """Follow named schema references at most `depth` hops.

    Returns None if the first reference cannot be found. Stops early on a
    cycle, so the returned schema may still carry an unresolved `$ref`.
    """
    current = _as_dict(schema)
    seen = set()
    hops = 0
    while "$ref" in current and hops < depth:
        name = _ref_name(current["$ref"])
        if name in seen:
            logger.debug("Circular reference to %s left unresolved", name)
            break
        seen.add(name)
        target = components.get(name)
        if not isinstance(target, dict):
            logger.debug("Unresolved reference %r", current["$ref"])
            return None if hops == 0 else current
        current = target
        hops += 1
    return current


def _parse_operation(path: str, method: str, operation: dict, components: dict, ref_depth: int) -> ApiOperation:
    method = method.upper()
    buckets: dict[str, list[Param]] = {loc: [] for loc in PARAM_LOCATIONS}
    for param in _parse_parameters(operation.get("parameters")):
        buckets[param.location].append(param)

    responses = {
        str(status): _parse_response(_as_dict(resp), components, ref_depth)
        for status, resp in _as_dict(operation.get("responses")).items()
    }

    return ApiOperation(
        path=path,
        method=method,
        operation_id=_text(operation.get("operationId")) or f"{method} {path}",
        summary=_text(operation.get("summary")),
        description=_text(operation.get("description")),
        headers=buckets["header"],
        path_params=buckets["path"],
        query_params=buckets["query"],
        request_body=_parse_request_body(operation.get("requestBody"), components, ref_depth),
        responses=responses,
    )


def _parse_parameters(params: Any) -> list[Param]:
    result = []
    if not isinstance(params, list):
        return result

    for p in params:
        if not isinstance(p, dict) or not p.get("name"):
            continue
        location = p.get("in")
        if location not in PARAM_LOCATIONS:
            logger.debug("Dropping parameter %r in %r", p.get("name"), location)
            continue
        schema = _as_dict(p.get("schema"))
        result.append(
            Param(
                name=str(p["name"]),
                location=location,
                required=bool(p.get("required", False)),
                param_type=_text(schema.get("type")) or "string",
                example=_example(schema.get("example")),
            )
        )
    return result


def _parse_request_body(body: Any, components: dict, ref_depth: int) -> RequestBodySpec | None:
    schema = _json_media(body).get("schema")
    if not isinstance(schema, dict):
        return None

    if not schema.get("properties") and "$ref" in schema:
        schema = resolve_ref(schema, components, ref_depth)
        if schema is None:
            return None

    properties = _as_dict(schema.get("properties"))
    required = schema.get("required")
    required = [str(r) for r in required] if isinstance(required, list) else []

    return RequestBodySpec(
        properties={
            str(name): BodyProperty(
                type=_text(_as_dict(prop).get("type")) or "string",
                example=_example(_as_dict(prop).get("example")),
                required=name in required,
            )
            for name, prop in properties.items()
        },
        required=required,
    )


def _parse_response(resp: dict, components: dict, ref_depth: int) -> ApiResponse:
    media = _json_media(resp)
    schema = media.get("schema")
    content = None

    if isinstance(schema, dict):
        content = {}
        if schema.get("properties"):
            content = {"properties": copy.deepcopy(schema["properties"])}
        elif "$ref" in schema:
            resolved = resolve_ref(schema, components, ref_depth)
            if resolved is not None:
                content = copy.deepcopy(resolved)

    return ApiResponse(
        description=_text(resp.get("description")),
        schema_content=content,
        example=media.get("example"),
    )


def _json_media(holder: Any) -> dict:
    """Return the application/json media object of a body or response."""
    return _as_dict(_as_dict(_as_dict(holder).get("content")).get(JSON_CONTENT))


def _schema_registry(doc: dict) -> dict:
    return _as_dict(_as_dict(doc.get("components")).get("schemas"))


def _ref_name(ref: Any) -> str:
    return str(ref).split("/")[-1]


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _example(value: Any) -> Any:
    return value if is_present(value) else ""

"""Human-readable scenario text for a single (operation, status) pair."""


def status_number(status_code: str) -> int | None:
    """Numeric value of a status code key, None for keys like 'default' or '2XX'."""
    text = str(status_code).strip()
    return int(text) if text.isascii() and text.isdigit() else None


def is_success(status: int | None) -> bool:
    return status is not None and 200 <= status < 300


def is_client_error(status: int | None) -> bool:
    return status is not None and 400 <= status < 500


def scenario_label(method: str, status_code: str, summary: str, response_description: str) -> str:
    """Classify a status code into a scenario label.

    401, 403 and 404 are matched before the generic 4xx label.
    """
    status = status_number(status_code)
    method = method.upper()

    if is_success(status):
        return f"Verify successful {method} request - {summary}"
    if is_client_error(status):
        if status == 401:
            return "Verify authentication failure case"
        if status == 403:
            return "Verify authorization failure case"
        if status == 404:
            return "Verify not found case"
        return f"Verify client error case - {response_description}"
    if status is not None and status >= 500:
        return f"Verify server error handling - {response_description}"

    return f"Verify {method} request with {status_code} response"


def step_list(method: str, path: str, status_code: str) -> str:
    """Numbered steps, one per line. Success cases get a sixth step."""
    status = status_number(status_code)
    method = method.upper()

    steps = [f"Prepare the {method} request to {path}"]

    if method == "GET":
        steps.append("Set required headers and parameters")
    else:
        steps.append("Set required headers and body parameters")

    if status == 401:
        steps.append("Send request with invalid or missing authentication")
    elif status == 403:
        steps.append("Send request with insufficient permissions")
    elif status == 404:
        steps.append("Send request with non-existent resource ID")
    elif is_client_error(status):
        steps.append("Send request with invalid data")
    else:
        steps.append("Send the request")

    steps.append(f"Verify the response status code is {status_code}")
    steps.append("Validate the response structure matches the schema")

    if is_success(status):
        steps.append("Validate the business logic of the response")

    return "\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))


def case_name(operation_id: str, status_code: str, response_description: str) -> str:
    return f"{operation_id} - {status_code} - {response_description}"


def expected_result(status_code: str, response_description: str) -> str:
    return f"Should return {status_code} with {response_description}"
